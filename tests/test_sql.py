"""
Partial-update clause builder tests - pure functions, no database.
"""
import pytest

from jobly.exceptions import ValidationError
from jobly.sql import SqlClause, placeholder, quote_identifier, sql_for_partial_update


def test_single_field():
    result = sql_for_partial_update({"name": "Acme"}, {})
    assert result.clause == '"name"=:p1'
    assert result.values == ["Acme"]


def test_remaps_columns_and_keeps_input_order():
    result = sql_for_partial_update(
        {"logoUrl": "http://x.img", "name": "Acme", "numEmployees": 10},
        {"numEmployees": "num_employees", "logoUrl": "logo_url"},
    )
    assert result.clause == '"logo_url"=:p1, "name"=:p2, "num_employees"=:p3'
    assert result.values == ["http://x.img", "Acme", 10]


def test_one_fragment_per_field_with_matching_indices():
    data = {f"f{i}": i * 10 for i in range(1, 8)}
    result = sql_for_partial_update(data, {})
    fragments = result.clause.split(", ")
    assert len(fragments) == len(data) == len(result.values)
    for idx, (fragment, field) in enumerate(zip(fragments, data), start=1):
        assert fragment == f'"{field}"=:p{idx}'
        assert result.values[idx - 1] == data[field]


def test_none_values_are_kept():
    result = sql_for_partial_update({"logoUrl": None}, {"logoUrl": "logo_url"})
    assert result.clause == '"logo_url"=:p1'
    assert result.values == [None]


def test_empty_data_is_rejected():
    with pytest.raises(ValidationError, match="No data"):
        sql_for_partial_update({}, {"numEmployees": "num_employees"})


def test_params_appends_record_key():
    result = sql_for_partial_update({"salary": 2000, "equity": 0.5}, {})
    assert result.params(7) == {"p1": 2000, "p2": 0.5, "p3": 7}


def test_params_without_values():
    assert SqlClause("", []).params() == {}


def test_placeholder_is_one_based_name():
    assert placeholder(1) == ":p1"
    assert placeholder(12) == ":p12"


def test_quote_identifier_doubles_embedded_quotes():
    assert quote_identifier("logo_url") == '"logo_url"'
    assert quote_identifier('we"ird') == '"we""ird"'
