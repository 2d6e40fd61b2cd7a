import json

import pytest

from finance_calc_web.app import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    app.config["RATES_FILE"] = None
    with app.test_client() as client:
        yield client


LOAN_FORM = {"principal": "10.000,00", "rate": "12,00%", "term": "1", "loan_type": "price", "frequency": "monthly"}


class TestIndex:
    def test_form_renders(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert b"Loan Calculator" in resp.data
        assert b"Result" not in resp.data

    def test_result_panel(self, client):
        resp = client.post("/", data=LOAN_FORM)
        assert resp.status_code == 200
        body = resp.get_data(as_text=True)
        assert "R$ 888,49" in body
        assert "more installments" not in body

    def test_preview_truncated(self, client):
        form = dict(LOAN_FORM, term="30", loan_type="sac")
        body = client.post("/", data=form).get_data(as_text=True)
        assert "First installment" in body
        assert "... and 348 more installments" in body

    def test_term_input_accepts_fractions(self, client):
        body = client.get("/").get_data(as_text=True)
        assert 'name="term"' in body
        assert 'step="any"' in body
        assert 'step="1"' not in body

    def test_fractional_term(self, client):
        form = dict(LOAN_FORM, term="1,5")
        body = client.post("/", data=form).get_data(as_text=True)
        assert "... and 6 more installments" in body

    def test_dotted_thousands_principal(self, client):
        form = dict(LOAN_FORM, principal="10.000")
        body = client.post("/", data=form).get_data(as_text=True)
        assert "R$ 888,49" in body

    def test_invalid_input_shows_no_result(self, client):
        form = dict(LOAN_FORM, principal="")
        resp = client.post("/", data=form)
        assert resp.status_code == 200
        assert "<h2>Result</h2>" not in resp.get_data(as_text=True)

    def test_clear(self, client):
        form = dict(LOAN_FORM, action="clear")
        body = client.post("/", data=form).get_data(as_text=True)
        assert "<h2>Result</h2>" not in body


class TestLoanApi:
    def test_json_result(self, client):
        resp = client.post("/api/loan", json={"principal": 12000, "rate": 12, "term": 1, "loan_type": "sac"})
        assert resp.status_code == 200
        result = resp.get_json()["result"]
        assert len(result["schedule"]) == 12
        assert result["summary"]["payment"] == pytest.approx(1120)
        assert result["schedule"][-1]["payment"] == pytest.approx(1010)

    def test_no_result_for_zero_rate(self, client):
        resp = client.post("/api/loan", json={"principal": 12000, "rate": 0, "term": 1})
        assert resp.status_code == 422
        assert resp.get_json()["result"] is None

    def test_rate_too_small_gives_no_result(self, client):
        resp = client.post("/api/loan", json={"principal": 10000, "rate": "1e-26", "term": 1})
        assert resp.status_code == 422
        assert resp.get_json()["result"] is None

    def test_unknown_system(self, client):
        resp = client.post("/api/loan", json={"principal": 12000, "rate": 12, "term": 1, "loan_type": "bullet"})
        assert resp.status_code == 422


class TestCalculatorApi:
    def test_discount(self, client):
        resp = client.post("/api/discount", json={"value": 200, "percent": 15})
        assert resp.status_code == 200
        assert resp.get_json()["result"]["final_value"] == pytest.approx(170)

    def test_interest(self, client):
        resp = client.post("/api/interest", json={"capital": 1000, "rate": 5, "periods": 3, "mode": "compound"})
        assert resp.get_json()["result"]["interest"] == pytest.approx(157.625)

    def test_investment_invalid(self, client):
        resp = client.post("/api/investment", json={"initial": 1000, "months": 0, "rate": 12})
        assert resp.status_code == 422

    def test_convert_with_inline_rates(self, client):
        resp = client.post("/api/convert", json={"amount": 100, "from": "BRL", "to": "USD", "rates": {"USD": 0.2}})
        assert resp.status_code == 200
        assert resp.get_json()["result"]["converted"] == pytest.approx(20)

    def test_convert_from_rates_file(self, client, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text(json.dumps({"base": "BRL", "rates": {"EUR": 0.18}}), encoding="utf-8")
        app.config["RATES_FILE"] = str(path)
        resp = client.post("/api/convert", json={"amount": 100, "to": "EUR"})
        assert resp.get_json()["result"]["converted"] == pytest.approx(18)

    def test_convert_swapped_pair(self, client):
        payload = {"amount": 100, "from": "BRL", "to": "USD", "rates": {"USD": 0.2}, "swap": True}
        result = client.post("/api/convert", json=payload).get_json()["result"]
        assert result["converted"] == pytest.approx(500)
        assert result["display"] == "$ 100,00 = R$ 500,00"

    def test_convert_rates_must_be_a_mapping(self, client):
        resp = client.post("/api/convert", json={"amount": 100, "to": "USD", "rates": ["USD", 0.2]})
        assert resp.status_code == 422
        assert resp.get_json()["result"] is None

    def test_convert_missing_rates_file(self, client, tmp_path):
        app.config["RATES_FILE"] = str(tmp_path / "missing.json")
        resp = client.post("/api/convert", json={"amount": 100, "to": "USD", "rates": {"USD": 0.2}})
        assert resp.status_code == 422
        assert "Rates file unavailable" in resp.get_json()["error"]

    def test_convert_numeric_rate_is_not_grouped(self, client):
        resp = client.post("/api/convert", json={"amount": 100, "to": "JPY", "rates": {"JPY": 28.125}})
        assert resp.get_json()["result"]["converted"] == pytest.approx(2812.5)

    def test_pregnancy(self, client):
        resp = client.post("/api/pregnancy", json={"lmp": "2024-01-01", "today": "2024-03-01"})
        result = resp.get_json()["result"]
        assert result["due_date"] == "2024-10-07"
        assert result["trimester"] == 1

    def test_unknown_calculator(self, client):
        assert client.post("/api/mortgage", json={}).status_code == 404

    def test_currencies(self, client):
        codes = [c["code"] for c in client.get("/api/currencies").get_json()]
        assert codes[0] == "BRL"
        assert "INR" in codes
