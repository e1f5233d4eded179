import json
import textwrap

import pytest
from pydantic import ValidationError

from statement_desk.models import Statement
from statement_desk.source import (
    RecordSourceError,
    dump_statements,
    generate_sample_statements,
    load_statements,
    parse_statements,
)


def test_statement_accepts_wire_keys_and_dumps_them_back():
    s = Statement.model_validate(
        {"statementID": 5, "customerName": "Ana", "totalAmountDue": 12.5, "usageTotal": 300}
    )
    assert s.statement_id == 5
    assert s.customer_name == "Ana"
    assert s.billing_address is None
    assert s.energy_charge == 0.0
    dumped = s.model_dump(by_alias=True)
    assert dumped["statementID"] == 5
    assert dumped["deliveryCharger"] == 0.0
    assert "customer_name" not in dumped
    assert len(dumped) == 22


def test_statement_is_frozen():
    s = Statement(statement_id=1)
    with pytest.raises(ValidationError):
        s.customer_name = "x"  # type: ignore[misc]


def test_parse_statements_requires_an_array():
    with pytest.raises(RecordSourceError, match="JSON array"):
        parse_statements({"statementID": 1})


def test_parse_statements_reports_invalid_records():
    with pytest.raises(RecordSourceError, match="Invalid statement payload"):
        parse_statements([{"statementID": "not-a-number"}])


def test_load_json_file(tmp_path):
    path = tmp_path / "statements.json"
    path.write_text(
        json.dumps([{"statementID": 1, "dueDate": "2024-02-01"}, {"statementID": 2}]),
        encoding="utf-8",
    )
    records = load_statements(path)
    assert [r.statement_id for r in records] == [1, 2]
    assert records[0].due_date == "2024-02-01"


def test_load_csv_file_with_blank_cells(tmp_path):
    path = tmp_path / "statements.csv"
    path.write_text(
        textwrap.dedent(
            """\
            statementID,customerName,totalAmountDue,usageTotal,billingAddress
            1,  Ana   Torres ,120.50,400,
            2,Bob,,,12 Oak St
            """
        ),
        encoding="utf-8",
    )
    first, second = load_statements(path)
    assert first.customer_name == "Ana Torres"
    assert first.total_amount_due == 120.5
    assert first.usage_total == 400
    assert first.billing_address is None
    assert second.total_amount_due == 0.0
    assert second.billing_address == "12 Oak St"


def test_load_csv_without_statement_id_header(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("customerName\nAna\n", encoding="utf-8")
    with pytest.raises(RecordSourceError, match="statementID"):
        load_statements(path)


def test_load_rejects_missing_and_unsupported_files(tmp_path):
    with pytest.raises(RecordSourceError, match="Cannot read"):
        load_statements(tmp_path / "missing.json")
    other = tmp_path / "data.txt"
    other.write_text("[]", encoding="utf-8")
    with pytest.raises(RecordSourceError, match="Unsupported"):
        load_statements(other)


def test_load_reports_malformed_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(RecordSourceError, match="Failed to parse"):
        load_statements(path)


def test_sample_statements_are_deterministic_and_consistent():
    a = generate_sample_statements(30, seed=3)
    b = generate_sample_statements(30, seed=3)
    assert a == b
    assert len({s.statement_id for s in a}) == 30
    for s in a:
        assert s.usage_peak + s.usage_off_peak == s.usage_total
        assert s.billing_start_date < s.billing_end_date < s.due_date
        assert s.usage_unit == "kWh"
    assert generate_sample_statements(0) == []
    with pytest.raises(ValueError):
        generate_sample_statements(-1)


def test_dump_then_load_preserves_records(tmp_path):
    records = generate_sample_statements(4)
    path = dump_statements(records, tmp_path / "out.json")
    assert load_statements(path) == records
    assert not (tmp_path / "out.json.tmp").exists()
