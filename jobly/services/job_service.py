"""
Job service - data access for the Job resource.

Jobs belong to exactly one company.  The company reference and the id are
fixed at creation: ``update_job`` refuses payloads naming either before
anything reaches the store.  An unknown company on insert is reported by
the store as a foreign-key violation and re-signalled as ``NotFoundError``.
"""
import logging
from decimal import Decimal
from typing import Any, Mapping

from sqlalchemy import Numeric, bindparam, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobly.exceptions import NotFoundError, ValidationError, is_foreign_key_violation
from jobly.schemas import JobFilters
from jobly.sql import SqlClause, placeholder, sql_for_partial_update

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

_IMMUTABLE_FIELDS: frozenset[str] = frozenset({"id", "companyHandle"})

# Updatable fields backed by NOT NULL columns.
_REQUIRED_FIELDS: frozenset[str] = frozenset({"title"})

# Updatable fields and the column each one writes.
_UPDATE_COLUMNS: dict[str, str] = {
    "title": "title",
    "salary": "salary",
    "equity": "equity",
}


def _to_decimal(value) -> Decimal | None:
    """Coerce an equity to Decimal through its text form, so 0.1 stays 0.1."""
    if value is None or isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _format_equity(value) -> str | None:
    """Render a stored equity (Decimal from asyncpg, float/int from SQLite) as text."""
    value = _to_decimal(value)
    return None if value is None else str(value)


# Equity binds as NUMERIC: a Decimal reaches asyncpg unchanged, while the
# SQLite dialect converts it to float.
_INSERT_JOB = text(
    f"""INSERT INTO jobs (title, salary, equity, company_handle)
        VALUES (:p1, :p2, :p3, :p4)
        RETURNING {_JOB_COLUMNS}"""
).bindparams(bindparam("p3", type_=Numeric()))


def _job_to_dict(row: Mapping[str, Any]) -> dict:
    return {
        "id": row["id"],
        "title": row["title"],
        "salary": row["salary"],
        "equity": _format_equity(row["equity"]),
        "companyHandle": row["companyHandle"],
    }


def job_filter_clause(filters: JobFilters) -> SqlClause:
    """
    Translate *filters* into a WHERE fragment, in the fixed order title,
    minimum salary, equity.

    ``has_equity=True`` keeps jobs with equity above zero, ``False`` keeps
    jobs with exactly zero equity, ``None`` adds no equity predicate.  Both
    equity comparisons bind a literal ``0``.
    """
    if filters.min_salary is not None and filters.min_salary < 0:
        raise ValidationError("minSalary cannot be negative")

    fragments: list[str] = []
    values: list[Any] = []

    if filters.title:
        values.append(f"%{filters.title.lower()}%")
        fragments.append(f'LOWER("title") LIKE {placeholder(len(values))}')
    if filters.min_salary is not None:
        values.append(filters.min_salary)
        fragments.append(f'"salary" >= {placeholder(len(values))}')
    if filters.has_equity is not None:
        values.append(0)
        op = ">" if filters.has_equity else "="
        fragments.append(f'"equity" {op} {placeholder(len(values))}')

    return SqlClause(" AND ".join(fragments), values)


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def create_job(db: AsyncSession, data: Mapping[str, Any]) -> dict:
    """
    Insert a job and return its canonical dict.

    Raises ``ValidationError`` when ``title`` or ``companyHandle`` is
    missing, and ``NotFoundError`` when the company does not exist.
    """
    title = data.get("title")
    company_handle = data.get("companyHandle")
    if not title or not company_handle:
        raise ValidationError("title or companyHandle is missing")

    try:
        result = await db.execute(
            _INSERT_JOB,
            {
                "p1": title,
                "p2": data.get("salary"),
                "p3": _to_decimal(data.get("equity")),
                "p4": company_handle,
            },
        )
    except IntegrityError as exc:
        if is_foreign_key_violation(exc):
            raise NotFoundError(f"No company: {company_handle}") from exc
        raise

    job = _job_to_dict(result.mappings().one())
    logger.info("Created job %s for company %s", job["id"], company_handle)
    return job


async def get_jobs(db: AsyncSession, filters: JobFilters | None = None) -> list[dict]:
    """Return jobs matching *filters* (all when omitted), ordered by title then id."""
    where = job_filter_clause(filters) if filters is not None else SqlClause("", [])

    sql = f"SELECT {_JOB_COLUMNS} FROM jobs"
    if where.clause:
        sql += f" WHERE {where.clause}"
    sql += " ORDER BY title, id"

    logger.debug("Listing jobs: %s %r", sql, where.values)
    result = await db.execute(text(sql), where.params())
    return [_job_to_dict(row) for row in result.mappings().all()]


async def get_job(db: AsyncSession, job_id: int) -> dict:
    result = await db.execute(
        text(f"SELECT {_JOB_COLUMNS} FROM jobs WHERE id = :p1"), {"p1": job_id}
    )
    row = result.mappings().first()
    if row is None:
        raise NotFoundError(f"No job: {job_id}")
    return _job_to_dict(row)


async def update_job(db: AsyncSession, job_id: int, data: Mapping[str, Any]) -> dict:
    """
    Partially update the job identified by *job_id*.

    A payload naming ``id`` or ``companyHandle`` is always rejected, even
    when the rest of it is valid.  Only ``title``, ``salary`` and
    ``equity`` may be changed, and ``title`` cannot be set to null.
    """
    forbidden = sorted(_IMMUTABLE_FIELDS.intersection(data))
    if forbidden:
        raise ValidationError(f"Cannot change job field(s): {', '.join(forbidden)}")
    unknown = sorted(set(data) - set(_UPDATE_COLUMNS))
    if unknown:
        raise ValidationError(f"Cannot update job field(s): {', '.join(unknown)}")
    cleared = sorted(field for field in _REQUIRED_FIELDS.intersection(data) if data[field] is None)
    if cleared:
        raise ValidationError(f"Job field(s) cannot be null: {', '.join(cleared)}")

    data = dict(data)
    if "equity" in data:
        data["equity"] = _to_decimal(data["equity"])

    set_clause = sql_for_partial_update(data, _UPDATE_COLUMNS)
    id_idx = placeholder(len(set_clause.values) + 1)

    sql = f"UPDATE jobs SET {set_clause.clause} WHERE id = {id_idx} RETURNING {_JOB_COLUMNS}"
    stmt = text(sql)
    if "equity" in data:
        equity_idx = list(data).index("equity") + 1
        stmt = stmt.bindparams(bindparam(f"p{equity_idx}", type_=Numeric()))

    logger.debug("Updating job %s: %s", job_id, sql)
    result = await db.execute(stmt, set_clause.params(job_id))
    row = result.mappings().first()
    if row is None:
        raise NotFoundError(f"No job: {job_id}")

    logger.info("Updated job %s (%s)", job_id, ", ".join(data))
    return _job_to_dict(row)


async def delete_job(db: AsyncSession, job_id: int) -> None:
    result = await db.execute(
        text("DELETE FROM jobs WHERE id = :p1 RETURNING id"), {"p1": job_id}
    )
    if result.first() is None:
        raise NotFoundError(f"No job: {job_id}")
    logger.info("Deleted job %s", job_id)
