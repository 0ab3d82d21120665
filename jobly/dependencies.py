from fastapi import Query

from jobly.schemas import CompanyFilters, JobFilters


class CompanyFilterParams:
    """
    FastAPI dependency that parses the optional company list filters.

    Usage in a router::

        @router.get("/companies")
        async def list_companies(params: CompanyFilterParams = Depends()):
            ...

    Bounds are only checked for being integers here; range consistency
    (``maxEmployees >= minEmployees``) is enforced by
    ``company_service.company_filter_clause`` so direct callers get the
    same check.
    """

    def __init__(
        self,
        min_employees: int | None = Query(
            None,
            alias="minEmployees",
            description="Only companies with at least this many employees.",
        ),
        max_employees: int | None = Query(
            None,
            alias="maxEmployees",
            description="Only companies with at most this many employees.",
        ),
        name_like: str | None = Query(
            None,
            alias="nameLike",
            description="Case-insensitive substring of the company name.",
        ),
    ) -> None:
        self.min_employees = min_employees
        self.max_employees = max_employees
        self.name_like = name_like

    @property
    def filters(self) -> CompanyFilters:
        return CompanyFilters(
            min_employees=self.min_employees,
            max_employees=self.max_employees,
            name_like=self.name_like,
        )


class JobFilterParams:
    """FastAPI dependency that parses the optional job list filters."""

    def __init__(
        self,
        title: str | None = Query(
            None,
            description="Case-insensitive substring of the job title.",
        ),
        min_salary: int | None = Query(
            None,
            alias="minSalary",
            description="Only jobs paying at least this salary.",
        ),
        has_equity: bool | None = Query(
            None,
            alias="hasEquity",
            description="true: equity above zero; false: exactly zero equity.",
        ),
    ) -> None:
        self.title = title
        self.min_salary = min_salary
        self.has_equity = has_equity

    @property
    def filters(self) -> JobFilters:
        return JobFilters(
            title=self.title,
            min_salary=self.min_salary,
            has_equity=self.has_equity,
        )
