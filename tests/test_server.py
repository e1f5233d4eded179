from fastapi.testclient import TestClient

from statement_desk.server import STATEMENTS_PATH, create_app
from statement_desk.source import generate_sample_statements, parse_statements

from tests.helpers.records import make_statement


def test_statements_are_served_with_wire_keys_in_source_order():
    records = [
        make_statement(3, customer_name="Ana", due_date="2024-02-01"),
        make_statement(1, customer_name=None, total_amount_due=12.5),
    ]
    client = TestClient(create_app(records))

    resp = client.get(STATEMENTS_PATH)
    assert resp.status_code == 200
    body = resp.json()
    assert [item["statementID"] for item in body] == [3, 1]
    assert body[0]["customerName"] == "Ana"
    assert body[1]["customerName"] is None
    assert body[1]["totalAmountDue"] == 12.5
    assert "deliveryCharger" in body[0]
    assert "customer_name" not in body[0]


def test_served_payload_decodes_back_into_the_same_records():
    records = generate_sample_statements(6)
    client = TestClient(create_app(records))
    assert parse_statements(client.get(STATEMENTS_PATH).json()) == records


def test_empty_listing_is_an_empty_array():
    client = TestClient(create_app([]))
    resp = client.get(STATEMENTS_PATH)
    assert resp.status_code == 200
    assert resp.json() == []


def test_health_reports_record_count():
    client = TestClient(create_app(generate_sample_statements(4)))
    assert client.get("/health").json() == {"status": "healthy", "statements": 4}


def test_listing_is_read_only():
    client = TestClient(create_app([make_statement(1)]))
    assert client.post(STATEMENTS_PATH, json=[]).status_code == 405
