"""
Test Invoice API

This module tests the invoice routes including:
- Next number preview
- Invoice creation and counter advance
- Invoice listing
- Error mapping
"""

import logging
from datetime import date

from invoicing.features.invoice.routes_invoice import get_number_generator
from invoicing.features.invoice.number_generator import ConfigurableNumberGenerator
from invoicing.main import app

TEST_INVOICE = {
    "customer_id": "acme",
    "invoice_date": "2024-03-07"
}


def use_template(invoice_db, template):
    app.dependency_overrides[get_number_generator] = lambda: ConfigurableNumberGenerator(invoice_db, template=template)


def test_preview_does_not_advance(test_client, invoice_db):
    """Test previewing twice yields the same number"""
    use_template(invoice_db, "INV-{Y}-{cy,4}")

    for _ in range(2):
        response = test_client.get("/api/invoices/next-number", params={"invoice_date": "2024-03-07"})
        assert response.status_code == 200
        assert response.json() == {"generator": "default", "invoice_number": "INV-2024-0001"}


def test_preview_template_override(test_client, invoice_db):
    """Test the template query parameter replaces the configured one"""
    use_template(invoice_db, "{c}")

    response = test_client.get(
        "/api/invoices/next-number",
        params={"invoice_date": "2024-03-07", "customer_id": "acme", "template": "{D}.{M}.{y}/{ccm,3}"}
    )
    assert response.status_code == 200
    assert response.json()["invoice_number"] == "07.03.24/001"


def test_preview_defaults_to_today(test_client, invoice_db):
    """Test the invoice date defaults to today"""
    use_template(invoice_db, "{Y}{M}{D}")

    response = test_client.get("/api/invoices/next-number")
    assert response.status_code == 200
    assert response.json()["invoice_number"] == date.today().strftime("%Y%m%d")


def test_preview_customer_counter_requires_customer(test_client, invoice_db):
    """Test missing customer for customer counters is a client error"""
    use_template(invoice_db, "{ccy}")

    response = test_client.get("/api/invoices/next-number", params={"invoice_date": "2024-03-07"})
    assert response.status_code == 400


def test_create_invoice_advances_counters(test_client, invoice_db):
    """Test each created invoice takes the next number"""
    use_template(invoice_db, "{Y}/{cy,3}-{ccy}")

    first = test_client.post("/api/invoices", json=TEST_INVOICE)
    assert first.status_code == 200
    data = first.json()
    assert data["invoice_number"] == "2024/001-1"
    assert data["customer_id"] == "acme"
    assert data["invoice_date"].startswith("2024-03-07")
    assert data["id"]

    second = test_client.post("/api/invoices", json={"customer_id": "globex", "invoice_date": "2024-06-01"})
    assert second.json()["invoice_number"] == "2024/002-1"

    third = test_client.post("/api/invoices", json=TEST_INVOICE)
    assert third.json()["invoice_number"] == "2024/003-2"


def test_create_invoice_validation(test_client, invoice_db):
    """Test an empty customer is rejected"""
    use_template(invoice_db, "{c}")

    response = test_client.post("/api/invoices", json={"customer_id": ""})
    assert response.status_code == 422


def test_list_invoices(test_client, invoice_db):
    """Test stored invoices are listed newest first"""
    use_template(invoice_db, "{cd}")

    test_client.post("/api/invoices", json={"customer_id": "acme", "invoice_date": "2024-01-02"})
    test_client.post("/api/invoices", json={"customer_id": "acme", "invoice_date": "2024-01-03"})
    test_client.post("/api/invoices", json={"customer_id": "globex", "invoice_date": "2024-01-04"})

    response = test_client.get("/api/invoices")
    assert response.status_code == 200
    assert [invoice["invoice_date"][:10] for invoice in response.json()] == ["2024-01-04", "2024-01-03", "2024-01-02"]

    response = test_client.get("/api/invoices", params={"customer_id": "acme", "limit": 1})
    assert [invoice["invoice_date"][:10] for invoice in response.json()] == ["2024-01-03"]


def test_database_error_maps_to_500(test_client, invoice_db, mock_collection):
    """Test driver errors surface as server errors"""
    use_template(invoice_db, "{c}")

    async def broken(query):
        raise RuntimeError("connection lost")

    mock_collection.count_documents = broken

    response = test_client.get("/api/invoices/next-number", params={"invoice_date": "2024-03-07"})
    assert response.status_code == 500
    assert response.json()["detail"] == "connection lost"


def test_get_invoice(test_client, invoice_db):
    """Test fetching a stored invoice by id"""
    use_template(invoice_db, "{Y}-{c}")

    created = test_client.post("/api/invoices", json=TEST_INVOICE).json()

    response = test_client.get(f"/api/invoices/{created['id']}")
    assert response.status_code == 200
    assert response.json()["invoice_number"] == "2024-1"

    assert test_client.get("/api/invoices/not-an-id").status_code == 404
    assert test_client.get("/api/invoices/0123456789abcdef01234567").status_code == 404


def test_preview_oversized_width(test_client, invoice_db):
    """Test an oversized width in a template override yields the natural value"""
    use_template(invoice_db, "{c}")

    response = test_client.get(
        "/api/invoices/next-number",
        params={"invoice_date": "2024-03-07", "template": "{Y,99999999999999999999}/{c,1000000000}"}
    )
    assert response.status_code == 200
    assert response.json()["invoice_number"] == "2024/1"


def test_lookup_errors_are_logged(test_client, mock_collection, caplog):
    """Test list and lookup failures log the traceback and map to 500"""
    def broken_find(query):
        raise RuntimeError("cursor lost")

    async def broken_find_one(query):
        raise RuntimeError("cursor lost")

    mock_collection.find = broken_find
    mock_collection.find_one = broken_find_one

    with caplog.at_level(logging.ERROR, logger="invoicing.features.invoice.routes_invoice"):
        assert test_client.get("/api/invoices").status_code == 500
        assert test_client.get("/api/invoices/0123456789abcdef01234567").status_code == 500

    tracebacks = [record for record in caplog.records if record.message == "Full traceback:"]
    assert len(tracebacks) == 2
    assert all(record.exc_info for record in tracebacks)
