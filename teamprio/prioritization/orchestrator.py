"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    TEAMPRIO — PRIORITIZATION ORCHESTRATOR
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Single entry point: prioritize(mode, projects, teams, dependencies).

PIPELINE
════════

    projects, teams, dependencies (caller snapshot, never mutated)
        │
        ├─ (1) coerce effort / value / capacity
        ├─ (2) keep actionable projects (effort ≥ 0, value > 0, both set)
        ├─ (3) team id → capacity
        ├─ (4) edges restricted to actionable projects
        │       (an edge from an unactionable project is dropped, which
        │        unblocks its dependent)
        ├─ (5) planner chosen by PlanningMode
        ├─ (6) selected in planner order, everything else unselected
        └─ (7) per-team summaries, every known team present

The returned Project objects are the caller's own, with effort/value as
entered.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterable, List, Optional

from .. import feature_flags
from .heuristics import plan_greedy_with_dependencies, plan_sequential
from .models import (
    Dependency,
    PlannerOutcome,
    PlanningMode,
    PlanningProject,
    PrioritizationResult,
    Project,
    Team,
    TeamSummary,
)
from .optimal_planner import plan_optimized
from .solver_interface import SolverInterface

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# INPUT NORMALIZATION
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def _as_project(item: Any) -> Project:
    return item if isinstance(item, Project) else Project.from_dict(item)


def _as_team(item: Any) -> Team:
    return item if isinstance(item, Team) else Team.from_dict(item)


def _as_dependency(item: Any) -> Dependency:
    return item if isinstance(item, Dependency) else Dependency.from_dict(item)


def build_team_capacities(teams: List[Team]) -> Dict[str, float]:
    """team id -> numeric capacity."""
    return {team.id: team.numeric_capacity() for team in teams}


def build_planning_projects(
    projects: List[Project],
    dependencies: List[Dependency],
) -> List[PlanningProject]:
    """
    Convert actionable projects to planner nodes.

    Each node's dependencies are the sources of edges that target it, limited
    to actionable sources.
    """
    actionable = [p for p in projects if p.is_actionable]
    actionable_ids = {p.id for p in actionable}

    prerequisites: Dict[str, List[str]] = {pid: [] for pid in actionable_ids}
    for dep in dependencies:
        if dep.target_id in actionable_ids and dep.source_id in actionable_ids:
            if dep.source_id not in prerequisites[dep.target_id]:
                prerequisites[dep.target_id].append(dep.source_id)

    return [
        PlanningProject(
            id=p.id,
            team_id=p.team_id,
            value=p.numeric_value(),
            effort=p.numeric_effort(),
            dependencies=prerequisites[p.id],
        )
        for p in actionable
    ]


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# REASSEMBLY
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def compute_team_summaries(
    selected_projects: List[Project],
    teams: List[Team],
) -> Dict[str, TeamSummary]:
    """Sum effort/value of the selected projects per team id; every team present."""
    summaries = {team.id: TeamSummary() for team in teams}
    for project in selected_projects:
        summary = summaries.get(project.team_id)
        effort = project.numeric_effort()
        value = project.numeric_value()
        if summary is None or effort is None or value is None:
            continue
        summary.allocated += effort
        summary.value += value
    return summaries


def assemble_result(
    outcome: PlannerOutcome,
    projects: List[Project],
    teams: List[Team],
    mode: Optional[PlanningMode] = None,
) -> PrioritizationResult:
    """Split input projects into selected (planner order) and unselected (input order)."""
    by_id: Dict[str, Project] = {}
    for project in projects:
        by_id.setdefault(project.id, project)

    selected: List[Project] = []
    selected_ids = set()
    for project_id in outcome.sequence:
        if project_id in by_id and project_id not in selected_ids:
            selected.append(by_id[project_id])
            selected_ids.add(project_id)

    unselected = [p for p in projects if p.id not in selected_ids]

    return PrioritizationResult(
        selected_projects=selected,
        unselected_projects=unselected,
        team_summaries=compute_team_summaries(selected, teams),
        mode=mode,
        planner=outcome.planner,
        solver_status=outcome.solver_status,
    )


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# ENTRY POINT
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def run_planner(
    mode: PlanningMode,
    team_capacities: Dict[str, float],
    planning_projects: List[PlanningProject],
    settings: feature_flags.PlannerSettings,
    solver: Optional[SolverInterface] = None,
) -> PlannerOutcome:
    """Dispatch to the planner for a mode."""
    if mode == PlanningMode.SEQUENTIAL:
        return plan_sequential(team_capacities, planning_projects)
    if mode == PlanningMode.GREEDY_DEPS:
        return plan_greedy_with_dependencies(team_capacities, planning_projects)
    if mode == PlanningMode.OPTIMIZED:
        return plan_optimized(
            team_capacities,
            planning_projects,
            strategy=settings.optimization_strategy,
            backtracking_max_projects=settings.backtracking_max_projects,
            solver=solver,
            solver_config=settings.solver_config(),
        )
    raise AssertionError(f"Unhandled planning mode: {mode}")


def prioritize(
    mode: Any,
    projects: Iterable[Any],
    teams: Iterable[Any],
    dependencies: Iterable[Any] = (),
    *,
    settings: Optional[feature_flags.PlannerSettings] = None,
    solver: Optional[SolverInterface] = None,
) -> PrioritizationResult:
    """
    Choose which projects each team pursues this round.

    Args:
        mode: PlanningMode, its value, or a legacy tag ("naive", "naive-deps")
        projects: Project objects or dicts in the JSON shape
        teams: Team objects or dicts
        dependencies: Dependency objects or {sourceId, targetId} dicts;
            duplicate and dangling edges are ignored
        settings: Planner settings (default: PlannerFlags)
        solver: MIP solver override for the optimized mode

    Returns:
        PrioritizationResult

    Raises:
        InvalidArgument: unknown mode
    """
    planning_mode = PlanningMode.parse(mode)
    settings = settings or feature_flags.PlannerFlags.get_settings()
    start_time = time.time()

    project_list = [_as_project(p) for p in projects]
    team_list = [_as_team(t) for t in teams]
    dependency_list = [_as_dependency(d) for d in dependencies]

    team_capacities = build_team_capacities(team_list)
    planning_projects = build_planning_projects(project_list, dependency_list)

    outcome = run_planner(planning_mode, team_capacities, planning_projects, settings, solver)
    result = assemble_result(outcome, project_list, team_list, mode=planning_mode)

    logger.info(
        f"Prioritized {len(project_list)} projects ({len(planning_projects)} actionable) "
        f"for {len(team_list)} teams: mode={planning_mode.value} planner={outcome.planner} "
        f"selected={len(result.selected_projects)} value={result.total_value} "
        f"in {time.time() - start_time:.3f}s"
    )
    return result
