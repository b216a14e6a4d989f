"""
Unit tests for comparable company analysis
"""

import pytest

from financial_projection.core.comps import (
    ComparableCompany,
    MultipleStats,
    calculate_multiple,
    generate_comps_analysis,
)
from financial_projection.core.diagnostics import DiagnosticKind


class TestCalculateMultiple:

    def test_basic_ratio(self):
        assert calculate_multiple(10_000_000, 2_000_000) == pytest.approx(5.0)

    @pytest.mark.parametrize("numerator,denominator", [
        (10.0, 0),
        (10.0, None),
        (None, 5.0),
        ("10", 5.0),
        (float("inf"), 5.0),
    ])
    def test_not_meaningful(self, numerator, denominator):
        assert calculate_multiple(numerator, denominator) is None

    def test_zero_numerator_is_valid(self):
        assert calculate_multiple(0, 5.0) == 0.0


class TestComparableCompany:

    def test_scenario_multiples(self, peer_company):
        comp = ComparableCompany.from_dict(peer_company)
        assert comp.ev_to_revenue == pytest.approx(5.0)
        assert comp.ev_to_ebitda == pytest.approx(10.0)
        assert comp.pe_ratio == pytest.approx(18.0)

    def test_camel_case_aliases(self):
        comp = ComparableCompany.from_dict({
            "enterpriseValue": 900.0,
            "ltmRevenue": 300.0,
            "ltmEbitda": 90.0,
            "ltmNetIncome": 50.0,
            "marketCap": 800.0,
        })
        assert comp.ev_to_revenue == pytest.approx(3.0)
        assert comp.ev_to_ebitda == pytest.approx(10.0)
        assert comp.pe_ratio == pytest.approx(16.0)
        assert comp.extra == {}

    def test_extra_fields_pass_through(self, peer_company):
        d = ComparableCompany.from_dict(peer_company).to_dict()
        assert d["name"] == "Peer Co"
        assert d["ev_to_revenue"] == pytest.approx(5.0)

    def test_missing_data_gives_none(self):
        comp = ComparableCompany.from_dict({"enterprise_value": 100.0, "ltm_ebitda": 0})
        assert comp.multiples() == {"ev_to_revenue": None, "ev_to_ebitda": None, "pe_ratio": None}


class TestMultipleStats:

    def test_single_value(self):
        stats = MultipleStats.from_values([7.5])
        assert stats.mean == stats.median == stats.high == stats.low == 7.5
        assert stats.count == 1

    def test_odd_count_median(self):
        stats = MultipleStats.from_values([9.0, 3.0, 6.0])
        assert stats.median == pytest.approx(6.0)
        assert stats.high == 9.0
        assert stats.low == 3.0
        assert stats.mean == pytest.approx(6.0)

    def test_even_count_median(self):
        stats = MultipleStats.from_values([4.0, 1.0, 3.0, 2.0])
        assert stats.median == pytest.approx(2.5)

    def test_no_values(self):
        assert MultipleStats.from_values([]) is None


class TestGenerateCompsAnalysis:

    def test_single_company(self, peer_company):
        analysis = generate_comps_analysis([peer_company], "founder")
        metrics = analysis.summary_metrics
        assert set(metrics) == {"ev_to_revenue", "ev_to_ebitda", "pe_ratio"}
        pe = metrics["pe_ratio"]
        assert pe.mean == pe.median == pe.high == pe.low == pytest.approx(18.0)
        assert analysis.message is None

    def test_invalid_values_excluded(self, peer_company):
        loss_maker = dict(peer_company, name="Loss Co", ltm_net_income=0, ltm_revenue=4_000_000)
        analysis = generate_comps_analysis([peer_company, loss_maker], "investor")
        assert analysis.summary_metrics["pe_ratio"].count == 1
        assert analysis.summary_metrics["ev_to_revenue"].count == 2
        assert analysis.summary_metrics["ev_to_revenue"].median == pytest.approx(3.75)
        assert analysis.detailed_comps[1].pe_ratio is None

    def test_metric_with_no_valid_values_is_omitted(self):
        analysis = generate_comps_analysis(
            [{"enterprise_value": 100.0, "ltm_revenue": 50.0}], "founder"
        )
        assert set(analysis.summary_metrics) == {"ev_to_revenue"}

    @pytest.mark.parametrize("empty", [None, []])
    def test_empty_input(self, empty):
        analysis = generate_comps_analysis(empty, "founder")
        assert analysis.summary_metrics == {}
        assert analysis.detailed_comps == ()
        assert analysis.message == "No comparable company data provided."
        assert analysis.to_dict()["message"] == "No comparable company data provided."

    def test_non_mapping_entries_skipped(self, peer_company):
        analysis = generate_comps_analysis([peer_company, "not a company"], "founder")
        assert len(analysis.detailed_comps) == 1
        assert analysis.diagnostics[0].kind is DiagnosticKind.DATA_GAP_WARNING

    def test_to_dict(self, peer_company):
        d = generate_comps_analysis([peer_company], "founder").to_dict()
        assert d["summary_metrics"]["ev_to_ebitda"]["median"] == pytest.approx(10.0)
        assert d["detailed_comps"][0]["name"] == "Peer Co"
        assert "message" not in d
