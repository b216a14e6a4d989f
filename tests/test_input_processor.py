"""
Unit tests for input validation and normalization
"""

import pytest

from financial_projection.config import load_yaml_config
from financial_projection.core.diagnostics import DiagnosticKind, of_kind
from financial_projection.core.input_processor import (
    FieldSpec,
    build_schemas,
    get_schemas,
    process_inputs,
    required_when,
)


PROJECTED_FIELDS = [
    "revenue_growth_rate",
    "cogs_as_percentage_of_revenue",
    "sga_as_percentage_of_revenue",
    "rd_as_percentage_of_revenue",
    "other_opex_as_percentage_of_revenue",
    "depreciation_as_percentage_of_revenue",
    "depreciation_growth_rate",
    "capex_as_percentage_of_revenue",
]


class TestFounderDefaults:
    """Founder mode fills every gap with a default."""

    def test_empty_inputs_are_valid(self):
        result = process_inputs({}, "founder")
        assert result.errors == []
        assert result.is_valid
        assert result.mode == "founder"

    def test_scalar_defaults(self):
        result = process_inputs({}, "founder")
        assert result.assumptions["tax_rate"] == 0.21
        assert result.assumptions["base_revenue"] == 1_000_000
        assert result.valuation_assumptions["wacc"] == 0.10
        assert result.valuation_assumptions["terminal_value_method"] == "exit_multiple"
        assert result.valuation_assumptions["exit_multiple_metric"] == "EBITDA"

    def test_shares_outstanding_has_no_default(self):
        result = process_inputs({}, "founder")
        assert "shares_outstanding" not in result.assumptions

    def test_optional_operating_defaults(self):
        assumptions = process_inputs({}, "founder").assumptions
        assert assumptions["other_opex_as_percentage_of_revenue"] == [0.0] * 5
        assert assumptions["depreciation_growth_rate"] == [0.05] * 5
        for name in ("base_depreciation", "base_accounts_receivable",
                     "base_inventory", "base_accounts_payable"):
            assert assumptions[name] == 0

    @pytest.mark.parametrize("field_name", PROJECTED_FIELDS)
    def test_default_arrays_match_horizon(self, field_name):
        result = process_inputs({}, "founder", projection_years=7)
        assert len(result.assumptions[field_name]) == 7

    def test_default_lists_are_copies(self):
        first = process_inputs({}, "founder")
        first.assumptions["revenue_growth_rate"][0] = 99.0
        second = process_inputs({}, "founder")
        assert second.assumptions["revenue_growth_rate"][0] == 0.10


class TestNormalization:
    """Projected arrays are forced to the projection horizon."""

    def test_short_array_padded_with_last_value(self):
        result = process_inputs(
            {"assumptions": {"revenue_growth_rate": [0.10, 0.08]}}, "founder"
        )
        assert result.assumptions["revenue_growth_rate"] == [0.10, 0.08, 0.08, 0.08, 0.08]

    def test_long_array_truncated(self):
        result = process_inputs(
            {"assumptions": {"cogs_as_percentage_of_revenue": [0.5, 0.5, 0.5, 0.5, 0.5, 0.9, 0.9]}},
            "founder",
        )
        assert result.assumptions["cogs_as_percentage_of_revenue"] == [0.5] * 5

    def test_caller_inputs_not_mutated(self):
        growth = [0.10]
        process_inputs({"assumptions": {"revenue_growth_rate": growth}}, "founder")
        assert growth == [0.10]

    def test_empty_array_reported_and_default_used(self):
        result = process_inputs({"assumptions": {"revenue_growth_rate": []}}, "founder")
        assert any("revenue_growth_rate" in e for e in result.errors)
        assert result.assumptions["revenue_growth_rate"] == [0.10, 0.08, 0.05, 0.03, 0.03]

    def test_empty_array_without_default_is_dropped(self, investor_inputs):
        investor_inputs["assumptions"]["other_opex_as_percentage_of_revenue"] = []
        result = process_inputs(investor_inputs, "investor")
        assert result.errors == ["Empty projection series for other_opex_as_percentage_of_revenue"]
        assert "other_opex_as_percentage_of_revenue" not in result.assumptions

    def test_invalid_horizon_falls_back_to_default(self):
        result = process_inputs({}, "founder", projection_years=0)
        assert result.projection_years == 5
        assert len(result.errors) == 1


class TestTypeChecks:
    """Type mismatches are reported but the value passes through."""

    def test_number_mismatch(self):
        result = process_inputs({"assumptions": {"tax_rate": "0.21"}}, "founder")
        assert result.errors == ["Invalid type for tax_rate. Expected number, got str."]
        assert result.assumptions["tax_rate"] == "0.21"

    def test_boolean_is_not_a_number(self):
        result = process_inputs({"assumptions": {"tax_rate": True}}, "founder")
        assert len(result.errors) == 1

    def test_array_item_mismatch(self):
        result = process_inputs(
            {"assumptions": {"revenue_growth_rate": [0.1, "high"]}}, "founder"
        )
        assert len(result.errors) == 1
        assert "revenue_growth_rate" in result.errors[0]

    def test_valuation_mismatch_mentions_section(self):
        result = process_inputs({"valuation_assumptions": {"wacc": "ten"}}, "founder")
        assert result.errors == [
            "Invalid type for valuation assumption wacc. Expected number, got str."
        ]

    def test_invalid_choice(self):
        result = process_inputs(
            {"valuation_assumptions": {"terminal_value_method": "gordonGrowth"}}, "founder"
        )
        assert len(result.errors) == 1
        assert "perpetual_growth" in result.errors[0]

    def test_errors_are_collected_not_raised(self):
        result = process_inputs(
            {
                "assumptions": {"tax_rate": "x", "base_revenue": "y"},
                "valuation_assumptions": {"wacc": None},
            },
            "founder",
        )
        assert len(result.errors) == 3
        assert len(of_kind(result.diagnostics, DiagnosticKind.VALIDATION_ERROR)) == 3

    def test_non_mapping_section(self):
        result = process_inputs({"assumptions": [1, 2, 3]}, "founder")
        assert len(result.errors) == 1
        assert result.assumptions["tax_rate"] == 0.21


class TestInvestorRequirements:
    """Investor mode requires explicit assumptions."""

    def test_complete_inputs_are_valid(self, investor_inputs):
        result = process_inputs(investor_inputs, "investor")
        assert result.errors == []

    def test_missing_required_fields(self):
        result = process_inputs({}, "investor")
        assert "Missing required input: tax_rate" in result.errors
        assert "Missing required input: revenue_growth_rate" in result.errors
        assert "Missing required valuation input: wacc" in result.errors
        assert "Missing required valuation input: terminal_value_method" in result.errors

    def test_terminal_growth_required_for_perpetual_growth(self, investor_inputs):
        del investor_inputs["valuation_assumptions"]["terminal_growth_rate"]
        result = process_inputs(investor_inputs, "investor")
        assert result.errors == ["Missing required valuation input: terminal_growth_rate"]

    def test_exit_multiple_required_for_exit_multiple(self, investor_inputs):
        investor_inputs["valuation_assumptions"] = {
            "wacc": 0.09,
            "terminal_value_method": "exit_multiple",
        }
        result = process_inputs(investor_inputs, "investor")
        assert result.errors == ["Missing required valuation input: exit_multiple"]

    def test_growth_not_required_for_exit_multiple(self, investor_inputs):
        investor_inputs["valuation_assumptions"] = {
            "wacc": 0.09,
            "terminal_value_method": "exit_multiple",
            "exit_multiple": 10,
        }
        result = process_inputs(investor_inputs, "investor")
        assert result.errors == []
        assert "terminal_growth_rate" not in result.valuation_assumptions

    def test_missing_history_is_a_data_gap(self, investor_inputs):
        del investor_inputs["historical_data"]
        result = process_inputs(investor_inputs, "investor")
        assert result.errors == []
        gaps = of_kind(result.diagnostics, DiagnosticKind.DATA_GAP_WARNING)
        assert len(gaps) == 1
        assert gaps[0].field == "historical_data"


class TestModeAndHistory:

    def test_unknown_mode_uses_founder_schema(self):
        result = process_inputs({}, "angel")
        assert result.mode == "founder"
        assert len(result.errors) == 1
        assert "angel" in result.errors[0]
        assert result.assumptions["tax_rate"] == 0.21

    def test_historical_data_passed_through(self, investor_inputs):
        result = process_inputs(investor_inputs, "investor")
        assert result.historical_data["income_statement"]["revenue"] == 5_000_000

    def test_non_mapping_historical_data(self):
        result = process_inputs({"historical_data": [1, 2]}, "founder")
        assert len(result.errors) == 1
        assert result.historical_data == {}

    @pytest.mark.parametrize("raw_inputs", [[1], "inputs", 42])
    def test_non_mapping_inputs(self, raw_inputs):
        result = process_inputs(raw_inputs, "founder")
        assert len(result.errors) == 1
        assert "expected an object" in result.errors[0]
        assert result.assumptions["base_revenue"] == 1_000_000
        assert result.historical_data == {}

    def test_to_dict(self):
        d = process_inputs({}, "founder").to_dict()
        assert d["mode"] == "founder"
        assert d["projection_years"] == 5
        assert d["errors"] == []


class TestSchemaDeclarations:
    """Schemas are declarative and can be supplied by the caller."""

    def test_packaged_schemas_have_both_modes(self):
        schemas = get_schemas()
        assert set(schemas) == {"founder", "investor"}

    def test_required_when_predicate(self):
        predicate = required_when({"terminal_value_method": "perpetual_growth"})
        assert predicate({"terminal_value_method": "perpetual_growth"})
        assert not predicate({"terminal_value_method": "exit_multiple"})
        assert not predicate({})

    def test_callable_requiredness(self):
        spec = FieldSpec(name="hurdle", type="number", required=lambda p: p.get("strict") == 1)
        assert spec.is_required({"strict": 1})
        assert not spec.is_required({"strict": 0})

    def test_custom_schema(self):
        schemas = build_schemas({
            "founder": {
                "assumptions": {
                    "tax_rate": {"type": "number", "default": 0.30},
                },
                "valuation_assumptions": {
                    "method": {"type": "string", "default": "a", "choices": ["a", "b"]},
                    "rate": {"type": "number", "required_when": {"method": "b"}},
                },
            },
        })
        ok = process_inputs({}, "founder", schemas=schemas)
        assert ok.errors == []
        assert ok.assumptions == {"tax_rate": 0.30}

        missing = process_inputs({"valuation_assumptions": {"method": "b"}}, "founder", schemas=schemas)
        assert missing.errors == ["Missing required valuation input: rate"]

    def test_schema_override_from_environment(self, tmp_path, monkeypatch):
        schema_file = tmp_path / "schemas.yaml"
        schema_file.write_text(
            "founder:\n"
            "  assumptions:\n"
            "    tax_rate: {type: number, default: 0.35}\n"
            "  valuation_assumptions: {}\n"
        )
        monkeypatch.setenv("FINANCIAL_PROJECTION_SCHEMAS", str(schema_file))
        result = process_inputs({}, "founder")
        assert result.assumptions == {"tax_rate": 0.35}

    def test_load_yaml_config_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml_config(tmp_path / "missing.yaml")

    def test_load_yaml_config_requires_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_yaml_config(path)
