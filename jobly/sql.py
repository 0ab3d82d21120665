"""
Helpers for building parameterized SQL fragments.

Fragments use numbered named placeholders (``:p1``, ``:p2`` …) so the same
statement text runs unchanged on PostgreSQL (asyncpg) and SQLite
(aiosqlite) through ``sqlalchemy.text``.  Index ``N`` always binds
``values[N - 1]``.
"""
from typing import Any, Mapping, NamedTuple

from jobly.exceptions import ValidationError


class SqlClause(NamedTuple):
    """A SQL fragment plus the values bound to its placeholders, in order."""

    clause: str
    values: list

    def params(self, *extra: Any) -> dict[str, Any]:
        """
        Return the bind dictionary for ``clause``.

        *extra* values are appended after ``values`` and take the next
        placeholder indices; callers use this for the trailing record key.
        """
        bound = [*self.values, *extra]
        return {f"p{idx}": value for idx, value in enumerate(bound, start=1)}


def placeholder(index: int) -> str:
    """Return the placeholder text for 1-based position *index*."""
    return f":p{index}"


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def sql_for_partial_update(data: Mapping[str, Any], js_to_sql: Mapping[str, str]) -> SqlClause:
    """
    Build the SET clause of a partial UPDATE.

    ``{"numEmployees": 10, "name": "Acme"}`` with
    ``{"numEmployees": "num_employees"}`` becomes::

        SqlClause('"num_employees"=:p1, "name"=:p2', [10, "Acme"])

    Fields missing from *js_to_sql* are used as column names unchanged.
    The WHERE clause is left to the caller, which binds the record key at
    ``placeholder(len(values) + 1)``.

    Raises ``ValidationError`` when *data* is empty.
    """
    if not data:
        raise ValidationError("No data")

    cols = [
        f"{quote_identifier(js_to_sql.get(field, field))}={placeholder(idx)}"
        for idx, field in enumerate(data, start=1)
    ]
    return SqlClause(", ".join(cols), list(data.values()))
