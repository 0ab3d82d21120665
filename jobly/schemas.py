from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for payloads exchanged in the canonical camelCase shape."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Company ---

class CompanyBase(CamelModel):
    name: str = Field(min_length=1)
    description: str
    num_employees: int | None = Field(None, ge=0)
    logo_url: str | None = None


class CompanyCreate(CompanyBase):
    handle: str = Field(min_length=1, max_length=25)


class CompanyUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1)
    description: str | None = None
    num_employees: int | None = Field(None, ge=0)
    logo_url: str | None = None


class CompanyResponse(CompanyBase):
    handle: str


class CompanyFilters(CamelModel):
    min_employees: int | None = None
    max_employees: int | None = None
    name_like: str | None = None


# --- Job ---

class JobCreate(CamelModel):
    title: str = Field(min_length=1)
    salary: int | None = Field(None, ge=0)
    equity: Decimal | None = Field(None, ge=0, le=1)
    company_handle: str = Field(min_length=1, max_length=25)


class JobUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1)
    salary: int | None = Field(None, ge=0)
    equity: Decimal | None = Field(None, ge=0, le=1)


class JobResponse(CamelModel):
    id: int
    title: str
    salary: int | None
    equity: str | None  # decimal rendered as text, e.g. "0.1"
    company_handle: str


class JobFilters(CamelModel):
    title: str | None = None
    min_salary: int | None = None
    has_equity: bool | None = None
