import pytest

from emi_calc_web.app import create_app

PAYLOAD = {
    "loanAmount": "1000000",
    "interestRate": "8.5",
    "tenure": "10",
    "tenureUnit": "years",
    "comparisonRates": "9, 8.5",
    "currency": "INR",
}


def test_healthz(client):
    assert client.get("/healthz").get_json() == {"status": "ok"}


def test_currencies(client):
    codes = [c["code"] for c in client.get("/api/currencies").get_json()]
    assert codes == ["INR", "NPR"]


def test_calculate_json(client):
    resp = client.post("/api/calculate", json=PAYLOAD)
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["error"] is None
    assert data["result"]["monthly_emi"] == pytest.approx(12_399.45, rel=1e-3)
    assert data["terms"] == {"principal": 1_000_000.0, "annual_rate_percent": 8.5, "term_months": 120}
    assert len(data["schedule"]) == 120
    assert data["truncated"] == 0
    assert [s["label"] for s in data["comparison"]] == ["Current (8.50%)", "9.00%"]
    assert data["currency"]["symbol"] == "₹"


def test_calculate_form_fields(client):
    resp = client.post("/api/calculate", data={**PAYLOAD, "tenure": "24", "tenureUnit": "months"})
    assert resp.status_code == 200
    assert len(resp.get_json()["schedule"]) == 24


def test_comparison_rates_as_list(client):
    resp = client.post("/api/calculate", json={**PAYLOAD, "comparisonRates": [7, "x", 0, 8.5]})
    assert [s["rate"] for s in resp.get_json()["comparison"]] == [7.0, 8.5]


def test_schedule_preview_and_full():
    client = create_app({"TESTING": True, "SCHEDULE_PREVIEW_ROWS": 12}).test_client()
    preview = client.post("/api/calculate", json=PAYLOAD).get_json()
    assert len(preview["schedule"]) == 12
    assert preview["truncated"] == 108
    full = client.post("/api/calculate", json={**PAYLOAD, "full": "1"}).get_json()
    assert len(full["schedule"]) == 120
    assert full["truncated"] == 0


def test_unparseable_input_is_bad_request(client):
    resp = client.post("/api/calculate", json={**PAYLOAD, "loanAmount": "a lot"})
    assert resp.status_code == 400
    data = resp.get_json()
    assert data["result"] is None
    assert data["schedule"] == [] and data["comparison"] == []
    assert "Invalid amount" in data["error"]


@pytest.mark.parametrize("field, value", [("loanAmount", "0"), ("interestRate", "-1"), ("tenure", "0")])
def test_invalid_terms_clear_the_result(client, field, value):
    resp = client.post("/api/calculate", json={**PAYLOAD, field: value})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["result"] is None
    assert data["schedule"] == [] and data["comparison"] == []
    assert data["error"]


def test_unknown_currency_falls_back(client):
    data = client.post("/api/calculate", json={**PAYLOAD, "currency": "USD"}).get_json()
    assert data["currency"]["code"] == "NPR"


@pytest.mark.parametrize("value", [5, 0, ["years"], {"unit": "years"}, True])
def test_non_string_tenure_unit_is_bad_request(client, value):
    resp = client.post("/api/calculate", json={**PAYLOAD, "tenureUnit": value})
    assert resp.status_code == 400
    data = resp.get_json()
    assert data["result"] is None
    assert "Tenure unit" in data["error"]


@pytest.mark.parametrize("value", [5, ["INR"], {"code": "INR"}, None, False])
def test_non_string_currency_falls_back(client, value):
    resp = client.post("/api/calculate", json={**PAYLOAD, "currency": value})
    assert resp.status_code == 200
    assert resp.get_json()["currency"]["code"] == "NPR"


def test_missing_tenure_unit_means_years(client):
    payload = {k: v for k, v in PAYLOAD.items() if k != "tenureUnit"}
    assert len(client.post("/api/calculate", json=payload).get_json()["schedule"]) == 120


@pytest.mark.parametrize(
    "field, value",
    [("loanAmount", 1e400), ("interestRate", 1e400), ("loanAmount", ["1000000"]), ("tenure", [10])],
)
def test_non_finite_or_malformed_numbers_are_bad_request(client, field, value):
    resp = client.post("/api/calculate", json={**PAYLOAD, field: value})
    assert resp.status_code == 400
    assert resp.get_json()["result"] is None
