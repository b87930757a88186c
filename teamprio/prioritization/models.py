"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    TEAMPRIO — PRIORITIZATION DATA MODEL
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Data model for cross-team backlog prioritization.

DEFINITIONS
═══════════

A TEAM has a finite capacity for the planning round (person-days).

A PROJECT belongs to one team and carries:
- Effort e_p (person-days, may be unset while the user is still editing)
- Value v_p (business value, may be unset)

A DEPENDENCY (s → t) means "s is a prerequisite of t": t can only be
selected if s is selected.

Mathematical Notation:
─────────────────────

    P = {p₁, ..., pₙ}       Projects
    T = {t₁, ..., tₘ}       Teams
    E ⊆ P × P               Dependency edges (source, target)

    team(p)                 Owning team of project p
    C_t                     Capacity of team t

ACTIONABILITY
─────────────

A project is actionable iff effort and value are both set, effort ≥ 0 and
value > 0. Unactionable projects never get selected, and every edge that
touches them is dropped before planning (their dependents become unblocked).

JSON SHAPE
──────────

    Team:       { id, name, capacity }
    Project:    { id, teamId, title, effort | null, value | null,
                  sourceProjectId?, isLinkedCopy? }
    Dependency: { sourceId, targetId }
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# ERRORS
# ════════════════════════════════════════════════════════════════════════════════════════════════════

class InvalidArgument(ValueError):
    """Raised on programming errors such as an unknown planning mode."""
    pass


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# ENUMS
# ════════════════════════════════════════════════════════════════════════════════════════════════════

class PlanningMode(str, Enum):
    """Planner selection."""
    SEQUENTIAL = "sequential"                       # Greedy by value, ignores dependencies
    GREEDY_DEPS = "greedy-with-dependencies"        # Greedy by value/effort over a live frontier
    OPTIMIZED = "optimized"                         # Backtracking or MIP

    @classmethod
    def parse(cls, mode: Any) -> 'PlanningMode':
        """
        Resolve a mode from the enum, its value or the legacy UI tag.

        Raises:
            InvalidArgument: if the mode is not one of the three planners
        """
        if isinstance(mode, cls):
            return mode
        if isinstance(mode, str):
            key = mode.strip().lower()
            for member in cls:
                if member.value == key or member.name.lower() == key:
                    return member
            if key in _LEGACY_MODE_TAGS:
                return _LEGACY_MODE_TAGS[key]
        raise InvalidArgument(f"Unknown mode: {mode!r}")


_LEGACY_MODE_TAGS = {
    "naive": PlanningMode.SEQUENTIAL,
    "naive-deps": PlanningMode.GREEDY_DEPS,
}


class OptimizationStrategy(str, Enum):
    """How the optimized mode searches."""
    AUTO = "auto"                   # Backtracking for small inputs, MIP otherwise
    MIP = "mip"
    BACKTRACKING = "backtracking"


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# HELPERS
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def coerce_number(raw: Any) -> Optional[float]:
    """
    Coerce a user-entered number.

    Returns None for unset, non-numeric or non-finite input; never raises.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        number = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# DOMAIN DATA MODEL
# ════════════════════════════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Team:
    """
    A team with a capacity for the current planning round.

    Attributes:
        id: Unique identifier
        name: Display name (not required to be unique)
        capacity: Person-days available this round
    """
    id: str
    name: str
    capacity: Any = 0.0

    def numeric_capacity(self) -> float:
        """Capacity as a number; anything unusable counts as 0."""
        capacity = coerce_number(self.capacity)
        if capacity is None or capacity < 0:
            return 0.0
        return capacity

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'capacity': self.capacity}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Team':
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            capacity=data.get('capacity', 0),
        )


@dataclass(frozen=True)
class Project:
    """
    A backlog project owned by one team.

    effort and value keep whatever the caller supplied (None, a number, or
    a half-typed string) so the result can be displayed as entered.

    Attributes:
        id: Unique identifier
        team_id: Owning team
        title: Display only
        effort: Person-days required (raw)
        value: Business value (raw)
        source_project_id: For linked copies, the original project
        is_linked_copy: Whether this is a linked copy of another project
    """
    id: str
    team_id: str
    title: str = ""
    effort: Any = None
    value: Any = None
    source_project_id: Optional[str] = None
    is_linked_copy: Optional[bool] = None

    def numeric_effort(self) -> Optional[float]:
        return coerce_number(self.effort)

    def numeric_value(self) -> Optional[float]:
        return coerce_number(self.value)

    @property
    def is_actionable(self) -> bool:
        """Whether the project can ever be selected."""
        effort = self.numeric_effort()
        value = self.numeric_value()
        if effort is None or value is None:
            return False
        return effort >= 0 and value > 0

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'teamId': self.team_id,
            'title': self.title,
            'effort': self.effort,
            'value': self.value,
        }
        if self.source_project_id is not None:
            data['sourceProjectId'] = self.source_project_id
        if self.is_linked_copy is not None:
            data['isLinkedCopy'] = self.is_linked_copy
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Project':
        return cls(
            id=str(data['id']),
            team_id=str(data.get('teamId', data.get('team_id', ''))),
            title=data.get('title', ''),
            effort=data.get('effort'),
            value=data.get('value'),
            source_project_id=data.get('sourceProjectId'),
            is_linked_copy=data.get('isLinkedCopy'),
        )


@dataclass(frozen=True)
class Dependency:
    """source_id is a prerequisite of target_id."""
    source_id: str
    target_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {'sourceId': self.source_id, 'targetId': self.target_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Dependency':
        source = data['sourceId'] if 'sourceId' in data else data['source_id']
        target = data['targetId'] if 'targetId' in data else data['target_id']
        return cls(source_id=str(source), target_id=str(target))


@dataclass
class TeamSummary:
    """Effort and value of the selected projects of one team."""
    allocated: float = 0.0
    value: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {'allocated': self.allocated, 'value': self.value}


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# PLANNER COORDINATE SPACE
# ════════════════════════════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PlanningProject:
    """
    A project as the planners see it.

    Only actionable projects are converted, so value > 0 and effort >= 0.
    dependencies holds prerequisite ids already restricted to the planning set.
    """
    id: str
    team_id: str
    value: float
    effort: float
    dependencies: List[str] = field(default_factory=list)


@dataclass
class PlannerOutcome:
    """Output of a single planner run."""
    sequence: List[str]
    value: float
    planner: str
    solver_status: Optional[str] = None


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# RESULT
# ════════════════════════════════════════════════════════════════════════════════════════════════════

@dataclass
class PrioritizationResult:
    """
    Result of one prioritization run.

    selected_projects follows the planner's output order; unselected_projects
    holds every other input project in input order.
    """
    selected_projects: List[Project]
    unselected_projects: List[Project]
    team_summaries: Dict[str, TeamSummary]

    mode: Optional[PlanningMode] = None
    planner: str = ""
    solver_status: Optional[str] = None

    @property
    def selected_ids(self) -> List[str]:
        return [p.id for p in self.selected_projects]

    @property
    def total_value(self) -> float:
        return sum(s.value for s in self.team_summaries.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'selectedProjects': [p.to_dict() for p in self.selected_projects],
            'unselectedProjects': [p.to_dict() for p in self.unselected_projects],
            'teamSummaries': {tid: s.to_dict() for tid, s in self.team_summaries.items()},
            'mode': self.mode.value if self.mode else None,
            'planner': self.planner,
            'solverStatus': self.solver_status,
            'totalValue': self.total_value,
        }
