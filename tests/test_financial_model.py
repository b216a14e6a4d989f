"""
Integration tests for the full pipeline
"""

import json

import pytest

from financial_projection import FinancialModel, InputValidationError


class TestFinancialModel:

    def test_founder_pipeline(self, founder_inputs):
        output = FinancialModel(founder_inputs).build_model()
        assert output.validated_inputs.errors == []
        assert output.statements.is_balanced()
        assert output.summary.estimated_enterprise_value > 0
        assert output.comps is None

    def test_investor_pipeline(self, investor_inputs):
        output = FinancialModel(investor_inputs, mode="investor", projection_years=7).build_model()
        assert output.statements.projection_years == 7
        assert output.summary.equity_value_per_share_status == "computed"

    def test_strict_mode_rejects_invalid_inputs(self):
        model = FinancialModel({}, mode="investor")
        with pytest.raises(InputValidationError) as exc_info:
            model.build_model()
        assert "Missing required input: tax_rate" in exc_info.value.errors
        assert model.output is None

    def test_lenient_mode_proceeds(self):
        output = FinancialModel({}, mode="investor", strict=False).build_model()
        assert output.validated_inputs.errors
        assert output.valuation.enterprise_value is None
        assert output.statements.is_balanced()

    def test_comps_from_inputs(self, founder_inputs, peer_company):
        founder_inputs["comparable_companies"] = [peer_company]
        output = FinancialModel(founder_inputs).build_model()
        assert output.comps.summary_metrics["pe_ratio"].median == pytest.approx(18.0)
        assert output.summary.comps_summary["ev_to_revenue"]["mean"] == pytest.approx(5.0)

    def test_empty_comps_list(self, founder_inputs):
        founder_inputs["comparable_companies"] = []
        output = FinancialModel(founder_inputs).build_model()
        assert output.comps.message == "No comparable company data provided."

    def test_to_dict_is_json_serializable(self, founder_inputs, peer_company):
        founder_inputs["comparable_companies"] = [peer_company]
        d = FinancialModel(founder_inputs).build_model().to_dict()
        payload = json.loads(json.dumps(d))
        assert payload["mode"] == "founder"
        assert len(payload["financial_model"]["income_statement"]["years"]) == 5
        assert payload["valuation"]["irr"] is None

    def test_statements_to_dataframes(self, founder_inputs):
        frames = FinancialModel(founder_inputs).build_model().statements_to_dataframes()
        assert frames["balance_sheet"].loc["balance_sheet_check"].abs().max() < 1e-6

    def test_non_mapping_inputs(self):
        with pytest.raises(InputValidationError):
            FinancialModel(["not", "a", "mapping"]).build_model()
        output = FinancialModel(["not", "a", "mapping"], strict=False).build_model()
        assert len(output.validated_inputs.errors) == 1
        assert output.comps is None
        assert output.statements.is_balanced()
