import json

import pytest
from click.testing import CliRunner

from finance_calc.main import NO_RESULT, cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestLoanCommand:
    def test_price_summary_and_schedule(self, runner):
        result = runner.invoke(cli, ["loan", "-p", "10000", "-r", "12", "-t", "1"])
        assert result.exit_code == 0, result.output
        assert "R$ 888,49" in result.output
        assert "Installments       : 12" in result.output
        assert "more installments" not in result.output

    def test_sac_reports_first_installment(self, runner):
        result = runner.invoke(cli, ["loan", "-p", "12000", "-r", "12", "-t", "1", "--type", "sac"])
        assert result.exit_code == 0, result.output
        assert "First installment  : R$ 1.120,00" in result.output
        assert "R$ 1.010,00" in result.output

    def test_long_schedule_is_previewed(self, runner):
        result = runner.invoke(cli, ["loan", "-p", "300k", "-r", "10", "-t", "30"])
        assert result.exit_code == 0, result.output
        assert "... and 348 more installments" in result.output

    def test_full_schedule(self, runner):
        result = runner.invoke(cli, ["loan", "-p", "300k", "-r", "10", "-t", "30", "--full"])
        assert result.exit_code == 0, result.output
        assert "more installments" not in result.output
        assert "\n360\t" in result.output

    def test_quarterly_frequency(self, runner):
        result = runner.invoke(cli, ["loan", "-p", "10000", "-r", "12", "-t", "2", "-f", "quarterly"])
        assert result.exit_code == 0, result.output
        assert "Installments       : 8" in result.output

    @pytest.mark.parametrize("args", [["-p", "0", "-r", "12", "-t", "1"], ["-p", "1000", "-r", "0", "-t", "1"]])
    def test_non_positive_input_gives_no_result(self, runner, args):
        result = runner.invoke(cli, ["loan", *args])
        assert result.exit_code == 0
        assert NO_RESULT in result.output

    def test_rate_too_small_gives_no_result(self, runner):
        result = runner.invoke(cli, ["loan", "-p", "10000", "-r", "0.00000000000000000000000001", "-t", "1"])
        assert result.exit_code == 0, result.output
        assert NO_RESULT in result.output

    def test_bad_amount(self, runner):
        result = runner.invoke(cli, ["loan", "-p", "lots", "-r", "12", "-t", "1"])
        assert result.exit_code != 0
        assert "Invalid amount" in result.output

    def test_json_export(self, runner, tmp_path):
        path = tmp_path / "schedule.json"
        result = runner.invoke(cli, ["loan", "-p", "10000", "-r", "12", "-t", "1", "--output", str(path)])
        assert result.exit_code == 0, result.output
        data = json.loads(path.read_text(encoding="utf-8"))
        assert len(data["schedule"]) == 12
        assert data["schedule"][0]["number"] == 1
        assert round(data["summary"]["payment"], 2) == 888.49

    def test_csv_export(self, runner, tmp_path):
        path = tmp_path / "schedule.csv"
        result = runner.invoke(cli, ["loan", "-p", "10000", "-r", "12", "-t", "1", "--output", str(path)])
        assert result.exit_code == 0, result.output
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "Number,Payment,Principal,Interest,Balance"
        assert len(lines) == 13

    def test_unsupported_export(self, runner, tmp_path):
        path = tmp_path / "schedule.txt"
        result = runner.invoke(cli, ["loan", "-p", "10000", "-r", "12", "-t", "1", "--output", str(path)])
        assert result.exit_code != 0


class TestCompareCommand:
    def test_lists_every_system(self, runner):
        result = runner.invoke(cli, ["compare", "-p", "10000", "-r", "12", "-t", "1"])
        assert result.exit_code == 0, result.output
        for name in ("price", "sac", "flat"):
            assert name in result.output


class TestOtherCalculators:
    def test_compound_interest(self, runner):
        result = runner.invoke(cli, ["interest", "-c", "1000", "-r", "5", "-n", "3", "--mode", "compound"])
        assert result.exit_code == 0, result.output
        assert "Compound interest: R$ 157,63" in result.output
        assert "Amount: R$ 1.157,63" in result.output

    def test_investment(self, runner):
        result = runner.invoke(cli, ["investment", "--initial", "1000", "--monthly", "100", "--months", "12", "-r", "12"])
        assert result.exit_code == 0, result.output
        assert "Total invested  : R$ 2.200,00" in result.output

    def test_investment_requires_rate(self, runner):
        result = runner.invoke(cli, ["investment", "--months", "12", "-r", "0"])
        assert result.exit_code == 0
        assert "period" in result.output

    def test_discount(self, runner):
        result = runner.invoke(cli, ["discount", "--value", "200", "--percent", "15"])
        assert result.exit_code == 0, result.output
        assert "Final value     : R$ 170,00" in result.output

    def test_convert_with_inline_rate(self, runner):
        result = runner.invoke(cli, ["convert", "-a", "100", "--from", "BRL", "--to", "USD", "--rate", "USD=0.2"])
        assert result.exit_code == 0, result.output
        assert "R$ 100,00 = $ 20,00" in result.output

    def test_convert_swapped_pair(self, runner):
        args = ["convert", "-a", "100", "--from", "BRL", "--to", "USD", "--rate", "USD=0.2", "--swap"]
        result = runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        assert "$ 100,00 = R$ 500,00" in result.output
        assert "1 USD = 5,0000 BRL" in result.output

    def test_convert_with_rates_file(self, runner, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text('{"base": "BRL", "date": "2024-05-01", "rates": {"EUR": 0.18}}', encoding="utf-8")
        result = runner.invoke(cli, ["convert", "-a", "100", "--to", "EUR", "--rates-file", str(path)])
        assert result.exit_code == 0, result.output
        assert "€ 18,00" in result.output
        assert "Rates as of 2024-05-01" in result.output

    def test_convert_without_rates(self, runner, monkeypatch):
        monkeypatch.delenv("FINANCE_CALC_RATES_FILE", raising=False)
        result = runner.invoke(cli, ["convert", "-a", "100"])
        assert result.exit_code == 0
        assert NO_RESULT in result.output

    def test_pregnancy(self, runner):
        result = runner.invoke(cli, ["pregnancy", "--lmp", "2024-01-01", "--today", "2024-03-01"])
        assert result.exit_code == 0, result.output
        assert "Due date        : 07/10/2024" in result.output
        assert "Gestational age : 8 weeks" in result.output

    def test_pregnancy_bad_date(self, runner):
        result = runner.invoke(cli, ["pregnancy", "--lmp", "01/01/2024"])
        assert result.exit_code != 0
