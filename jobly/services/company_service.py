"""
Company service - data access for the Company resource.

Design notes
------------
- Statements are plain parameterized SQL run through ``sqlalchemy.text``;
  placeholders come from ``jobly.sql`` so fragment numbering stays
  contiguous when filter and key values are combined.
- Column names only ever come from the fixed ``_UPDATE_COLUMNS`` table;
  payload keys outside it are rejected before a statement is built.
- ``create_company`` checks for an existing handle first to give a precise
  error.  That check is not atomic; the primary-key constraint still
  decides concurrent inserts, and its violation is re-signalled as a
  ``ConflictError`` naming the handle, or the name when that collided.
- Functions flush nothing and never commit; the ``get_db`` dependency owns
  the transaction.
"""
import logging
from typing import Any, Mapping

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobly.exceptions import ConflictError, NotFoundError, ValidationError, is_unique_violation
from jobly.schemas import CompanyFilters
from jobly.sql import SqlClause, placeholder, sql_for_partial_update

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_COMPANY_COLUMNS = (
    'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'
)

# Updatable fields and the column each one writes.
_UPDATE_COLUMNS: dict[str, str] = {
    "name": "name",
    "description": "description",
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

# Updatable fields backed by NOT NULL columns.
_REQUIRED_FIELDS: frozenset[str] = frozenset({"name", "description"})


def _company_to_dict(row: Mapping[str, Any]) -> dict:
    return {
        "handle": row["handle"],
        "name": row["name"],
        "description": row["description"],
        "numEmployees": row["numEmployees"],
        "logoUrl": row["logoUrl"],
    }


def _duplicate_message(exc: IntegrityError, data: Mapping[str, Any]) -> str:
    """Name the column a unique violation hit; the primary key is the default."""
    detail = str(exc.orig)
    if "companies.name" in detail or "companies_name_key" in detail:
        return f"Duplicate company name: {data['name']}"
    return f"Duplicate company: {data['handle']}"


async def _company_exists(db: AsyncSession, handle: str) -> bool:
    result = await db.execute(
        text("SELECT handle FROM companies WHERE handle = :p1"), {"p1": handle}
    )
    return result.first() is not None


def company_filter_clause(filters: CompanyFilters) -> SqlClause:
    """
    Translate *filters* into a WHERE fragment.

    Fragments are emitted in a fixed order (min employees, max employees,
    name) regardless of how the caller supplied them.  A bound of ``0`` is
    a real filter; only ``None`` (and an empty name) means "not given".
    An empty clause means no predicate was supplied.

    Raises ``ValidationError`` for negative bounds or ``max < min``.
    """
    min_employees = filters.min_employees
    max_employees = filters.max_employees

    for label, bound in (("minEmployees", min_employees), ("maxEmployees", max_employees)):
        if bound is not None and bound < 0:
            raise ValidationError(f"{label} cannot be negative")
    if min_employees is not None and max_employees is not None and max_employees < min_employees:
        raise ValidationError("maxEmployees has to be greater than minEmployees")

    fragments: list[str] = []
    values: list[Any] = []

    if min_employees is not None:
        values.append(min_employees)
        fragments.append(f'"num_employees" >= {placeholder(len(values))}')
    if max_employees is not None:
        values.append(max_employees)
        fragments.append(f'"num_employees" <= {placeholder(len(values))}')
    if filters.name_like:
        values.append(f"%{filters.name_like.lower()}%")
        fragments.append(f'LOWER("name") LIKE {placeholder(len(values))}')

    return SqlClause(" AND ".join(fragments), values)


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def create_company(db: AsyncSession, data: Mapping[str, Any]) -> dict:
    """
    Insert a company and return its canonical dict.

    Raises ``ValidationError`` when ``handle``, ``name`` or ``description``
    is missing, and ``ConflictError`` when the handle or the name is already
    taken; the existing row is left untouched.
    """
    handle = data.get("handle")
    if not handle or not data.get("name") or data.get("description") is None:
        raise ValidationError("handle, name or description is missing")

    if await _company_exists(db, handle):
        raise ConflictError(f"Duplicate company: {handle}")

    insert = text(
        f"""INSERT INTO companies (handle, name, description, num_employees, logo_url)
            VALUES (:p1, :p2, :p3, :p4, :p5)
            RETURNING {_COMPANY_COLUMNS}"""
    )
    try:
        result = await db.execute(
            insert,
            {
                "p1": handle,
                "p2": data["name"],
                "p3": data["description"],
                "p4": data.get("numEmployees"),
                "p5": data.get("logoUrl"),
            },
        )
    except IntegrityError as exc:
        if is_unique_violation(exc):
            raise ConflictError(_duplicate_message(exc, data)) from exc
        raise

    company = _company_to_dict(result.mappings().one())
    logger.info("Created company %s", handle)
    return company


async def get_companies(db: AsyncSession, filters: CompanyFilters | None = None) -> list[dict]:
    """Return companies matching *filters* (all when omitted), ordered by name."""
    where = company_filter_clause(filters) if filters is not None else SqlClause("", [])

    sql = f"SELECT {_COMPANY_COLUMNS} FROM companies"
    if where.clause:
        sql += f" WHERE {where.clause}"
    sql += " ORDER BY name"

    logger.debug("Listing companies: %s %r", sql, where.values)
    result = await db.execute(text(sql), where.params())
    return [_company_to_dict(row) for row in result.mappings().all()]


async def get_company(db: AsyncSession, handle: str) -> dict:
    result = await db.execute(
        text(f"SELECT {_COMPANY_COLUMNS} FROM companies WHERE handle = :p1"),
        {"p1": handle},
    )
    row = result.mappings().first()
    if row is None:
        raise NotFoundError(f"No company: {handle}")
    return _company_to_dict(row)


async def update_company(db: AsyncSession, handle: str, data: Mapping[str, Any]) -> dict:
    """
    Partially update the company identified by *handle*.

    Only ``name``, ``description``, ``numEmployees`` and ``logoUrl`` may be
    changed; any other key, or a null ``name`` or ``description``, raises
    ``ValidationError``.  A new name already in use raises ``ConflictError``.
    Absence of the company is detected from the empty RETURNING set.
    """
    unknown = sorted(set(data) - set(_UPDATE_COLUMNS))
    if unknown:
        raise ValidationError(f"Cannot update company field(s): {', '.join(unknown)}")
    cleared = sorted(field for field in _REQUIRED_FIELDS.intersection(data) if data[field] is None)
    if cleared:
        raise ValidationError(f"Company field(s) cannot be null: {', '.join(cleared)}")

    set_clause = sql_for_partial_update(data, _UPDATE_COLUMNS)
    handle_idx = placeholder(len(set_clause.values) + 1)

    sql = (
        f"UPDATE companies SET {set_clause.clause} "
        f"WHERE handle = {handle_idx} "
        f"RETURNING {_COMPANY_COLUMNS}"
    )
    logger.debug("Updating company %s: %s", handle, sql)
    try:
        result = await db.execute(text(sql), set_clause.params(handle))
    except IntegrityError as exc:
        if is_unique_violation(exc):
            raise ConflictError(f"Duplicate company name: {data.get('name')}") from exc
        raise
    row = result.mappings().first()
    if row is None:
        raise NotFoundError(f"No company: {handle}")

    logger.info("Updated company %s (%s)", handle, ", ".join(data))
    return _company_to_dict(row)


async def delete_company(db: AsyncSession, handle: str) -> None:
    result = await db.execute(
        text("DELETE FROM companies WHERE handle = :p1 RETURNING handle"),
        {"p1": handle},
    )
    if result.first() is None:
        raise NotFoundError(f"No company: {handle}")
    logger.info("Deleted company %s", handle)
