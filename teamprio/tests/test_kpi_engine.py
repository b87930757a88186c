"""
════════════════════════════════════════════════════════════════════════════════════════════════════
TESTS - Utilization KPIs
════════════════════════════════════════════════════════════════════════════════════════════════════
"""

import pytest

from teamprio.prioritization.kpi_engine import (
    UtilizationBand,
    classify_utilization,
    compute_portfolio_kpis,
    compute_team_utilization,
)
from teamprio.prioritization.models import Team
from teamprio.prioritization.orchestrator import prioritize


class TestClassifyUtilization:

    @pytest.mark.parametrize("pct, band", [
        (0.0, UtilizationBand.LOW),
        (49.9, UtilizationBand.LOW),
        (50.0, UtilizationBand.MEDIUM),
        (79.9, UtilizationBand.MEDIUM),
        (80.0, UtilizationBand.HIGH),
        (100.0, UtilizationBand.HIGH),
    ])
    def test_thresholds(self, pct, band):
        assert classify_utilization(10, pct) == band

    def test_zero_capacity_is_idle(self):
        assert classify_utilization(0, 0.0) == UtilizationBand.IDLE


class TestTeamUtilization:
    """Per-team usage after a greedy run."""

    def test_cross_team_backlog(self, two_teams, cross_team_backlog):
        projects, dependencies = cross_team_backlog
        result = prioritize("greedy-with-dependencies", projects, two_teams, dependencies)

        platform, mobile = compute_team_utilization(result, two_teams)

        assert platform.team_name == "Platform"
        assert platform.allocated == 6
        assert platform.remaining == 4
        assert platform.utilization_pct == pytest.approx(60.0)
        assert platform.band == UtilizationBand.MEDIUM
        assert mobile.remaining == 0
        assert mobile.band == UtilizationBand.HIGH
        assert mobile.to_dict()["utilization_pct"] == 100.0

    def test_team_without_capacity(self):
        teams = [Team(id="A", name="A", capacity=0)]
        result = prioritize("sequential", [], teams)

        (usage,) = compute_team_utilization(result, teams)

        assert usage.utilization_pct == 0.0
        assert usage.to_dict()["band"] == "idle"


class TestPortfolioKPIs:

    def test_cross_team_backlog(self, two_teams, cross_team_backlog):
        projects, dependencies = cross_team_backlog
        result = prioritize("greedy-with-dependencies", projects, two_teams, dependencies)

        kpis = compute_portfolio_kpis(result, two_teams)

        assert kpis.total_projects == 5
        assert kpis.actionable_projects == 4
        assert kpis.selected_projects == 3
        assert kpis.total_capacity == 18
        assert kpis.total_allocated == 14
        assert kpis.selected_value == 33
        assert kpis.actionable_value == 39
        assert kpis.selection_rate == pytest.approx(0.75)
        assert kpis.to_dict()["value_capture"] == round(33 / 39, 3)

    def test_empty_portfolio(self):
        kpis = compute_portfolio_kpis(prioritize("sequential", [], []), [])

        assert kpis.selection_rate == 0.0
        assert kpis.value_capture == 0.0
