"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    TEAMPRIO — UTILIZATION KPIs
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Per-team and portfolio indicators derived from a PrioritizationResult.

TEAM KPIs
═════════

    allocated_t     = Σ e_p  over selected p of team t
    remaining_t     = C_t − allocated_t
    utilization_t   = allocated_t / C_t · 100          (0 when C_t = 0)

    band:  idle    C_t = 0
           low     utilization < 50%
           medium  utilization < 80%
           high    otherwise

PORTFOLIO KPIs
══════════════

    selection_rate  = |selected| / |actionable|
    value_capture   = Σ v_p (selected) / Σ v_p (actionable)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from .models import PrioritizationResult, Project, Team, TeamSummary


class UtilizationBand(str, Enum):
    IDLE = "idle"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


LOW_THRESHOLD_PCT = 50.0
HIGH_THRESHOLD_PCT = 80.0


def classify_utilization(capacity: float, utilization_pct: float) -> UtilizationBand:
    if capacity <= 0:
        return UtilizationBand.IDLE
    if utilization_pct < LOW_THRESHOLD_PCT:
        return UtilizationBand.LOW
    if utilization_pct < HIGH_THRESHOLD_PCT:
        return UtilizationBand.MEDIUM
    return UtilizationBand.HIGH


@dataclass
class TeamUtilization:
    """Capacity usage of one team."""
    team_id: str
    team_name: str
    capacity: float
    allocated: float
    value: float

    @property
    def remaining(self) -> float:
        return self.capacity - self.allocated

    @property
    def utilization_pct(self) -> float:
        if self.capacity <= 0:
            return 0.0
        return self.allocated / self.capacity * 100

    @property
    def band(self) -> UtilizationBand:
        return classify_utilization(self.capacity, self.utilization_pct)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'team_id': self.team_id,
            'team_name': self.team_name,
            'capacity': self.capacity,
            'allocated': self.allocated,
            'remaining': self.remaining,
            'value': self.value,
            'utilization_pct': round(self.utilization_pct, 1),
            'band': self.band.value,
        }


@dataclass
class PortfolioKPIs:
    """Totals across all teams."""
    total_projects: int = 0
    actionable_projects: int = 0
    selected_projects: int = 0
    total_capacity: float = 0.0
    total_allocated: float = 0.0
    selected_value: float = 0.0
    actionable_value: float = 0.0

    @property
    def selection_rate(self) -> float:
        if self.actionable_projects == 0:
            return 0.0
        return self.selected_projects / self.actionable_projects

    @property
    def value_capture(self) -> float:
        if self.actionable_value <= 0:
            return 0.0
        return self.selected_value / self.actionable_value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_projects': self.total_projects,
            'actionable_projects': self.actionable_projects,
            'selected_projects': self.selected_projects,
            'total_capacity': self.total_capacity,
            'total_allocated': self.total_allocated,
            'selected_value': self.selected_value,
            'actionable_value': self.actionable_value,
            'selection_rate': round(self.selection_rate, 3),
            'value_capture': round(self.value_capture, 3),
        }


def compute_team_utilization(
    result: PrioritizationResult,
    teams: List[Team],
) -> List[TeamUtilization]:
    """One TeamUtilization per team, in team order."""
    utilization = []
    for team in teams:
        summary = result.team_summaries.get(team.id, TeamSummary())
        utilization.append(TeamUtilization(
            team_id=team.id,
            team_name=team.name,
            capacity=team.numeric_capacity(),
            allocated=summary.allocated,
            value=summary.value,
        ))
    return utilization


def compute_portfolio_kpis(
    result: PrioritizationResult,
    teams: List[Team],
) -> PortfolioKPIs:
    all_projects: List[Project] = result.selected_projects + result.unselected_projects
    actionable = [p for p in all_projects if p.is_actionable]

    return PortfolioKPIs(
        total_projects=len(all_projects),
        actionable_projects=len(actionable),
        selected_projects=len(result.selected_projects),
        total_capacity=sum(t.numeric_capacity() for t in teams),
        total_allocated=sum(s.allocated for s in result.team_summaries.values()),
        selected_value=result.total_value,
        actionable_value=sum(p.numeric_value() for p in actionable),
    )
