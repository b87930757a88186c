"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    TEAMPRIO — OPTIMAL PROJECT SELECTION
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Exact (or near-exact) selection of projects under team capacities and
precedence constraints.

PROBLEM STATEMENT
═════════════════

Given:
- Set of actionable projects P, each with value v_p > 0 and effort e_p ≥ 0
- Owning team team(p) with capacity C_t
- Dependency edges E (s → t: s is a prerequisite of t)

Decide:
- Which projects to select

MATHEMATICAL FORMULATION
════════════════════════

DECISION VARIABLES
──────────────────
    x_p ∈ {0,1}     1 if project p is selected

OBJECTIVE
─────────
    max  Σ_p v_p · x_p

CONSTRAINTS
───────────

(C1) Team capacity:
     Σ_{p : team(p) = t} e_p · x_p ≤ C_t          ∀ t ∈ T

(C2) Precedence:
     x_t − x_s ≤ 0                                ∀ (s, t) ∈ E

(C3) Projects of a team without capacity data:
     x_p = 0

STRATEGIES
══════════

1. BACKTRACKING: include/exclude DFS over a topological order. Exponential,
   kept for small inputs and as a reference for the MIP.
2. MIP: OR-Tools (CBC by default) with a 0.5% relative gap. When the solver
   returns no usable solution the greedy-with-dependencies planner is used
   instead, so the caller always gets a plan.

The selected sequence is emitted in topological order (ties by id).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

from .dependency_graph import restrict_dependencies, topological_sort
from .heuristics import fits, plan_greedy_with_dependencies
from .models import InvalidArgument, OptimizationStrategy, PlannerOutcome, PlanningProject
from .solver_interface import (
    MIPModel,
    SolverConfig,
    SolverInterface,
    SolverResult,
    SolverStatus,
    get_solver,
)

logger = logging.getLogger(__name__)

DEFAULT_BACKTRACKING_MAX_PROJECTS = 20


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# BACKTRACKING
# ════════════════════════════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class _Frame:
    index: int
    value: float
    remaining: Dict[str, float]
    selected: FrozenSet[str]


def plan_backtracking(
    team_capacities: Dict[str, float],
    projects: List[PlanningProject],
    max_projects: int = DEFAULT_BACKTRACKING_MAX_PROJECTS,
) -> PlannerOutcome:
    """
    Exhaustive include/exclude search.

    Each branch gets its own copy of remaining capacity and selected set.
    A project may only be included once all of its dependencies are in the
    branch's selected set. The first assignment reaching the best value wins
    (exclusion is explored before inclusion).

    Args:
        team_capacities: team id -> capacity
        projects: Actionable projects
        max_projects: Refuse larger inputs

    Raises:
        InvalidArgument: if len(projects) > max_projects
    """
    if len(projects) > max_projects:
        raise InvalidArgument(
            f"Backtracking limited to {max_projects} projects, got {len(projects)}"
        )

    order = topological_sort(projects)
    n = len(order)

    best_value = 0.0
    best_selected: FrozenSet[str] = frozenset()

    stack = [_Frame(0, 0.0, dict(team_capacities), frozenset())]
    while stack:
        frame = stack.pop()
        if frame.index == n:
            if frame.value > best_value:
                best_value = frame.value
                best_selected = frame.selected
            continue

        project = order[frame.index]
        deps_satisfied = all(dep in frame.selected for dep in project.dependencies)

        # Pushed first so the skip branch is explored first
        if deps_satisfied and fits(frame.remaining, project):
            remaining = dict(frame.remaining)
            remaining[project.team_id] -= project.effort
            stack.append(_Frame(
                frame.index + 1,
                frame.value + project.value,
                remaining,
                frame.selected | {project.id},
            ))

        stack.append(_Frame(frame.index + 1, frame.value, frame.remaining, frame.selected))

    sequence = [p.id for p in order if p.id in best_selected]
    return PlannerOutcome(sequence=sequence, value=best_value, planner="backtracking")


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# MIP
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def build_mip_model(
    team_capacities: Dict[str, float],
    projects: List[PlanningProject],
) -> MIPModel:
    """Build the binary program (C1)-(C3); one variable per project id."""
    nodes = restrict_dependencies(projects)
    model = MIPModel(name="ProjectSelection")

    for project in nodes:
        model.add_variable(project.id, project.value)
        if project.team_id not in team_capacities:
            model.fixed_to_zero.append(project.id)

    # (C1)
    for team_id, capacity in team_capacities.items():
        coefficients = {p.id: p.effort for p in nodes if p.team_id == team_id}
        if coefficients:
            model.add_constraint(f"cap_{team_id}", coefficients, capacity)

    # (C2)
    for project in nodes:
        for dep_id in project.dependencies:
            model.add_constraint(
                f"dep_{project.id}_requires_{dep_id}",
                {project.id: 1.0, dep_id: -1.0},
                0.0,
            )

    return model


def plan_mip(
    team_capacities: Dict[str, float],
    projects: List[PlanningProject],
    solver: Optional[SolverInterface] = None,
    config: Optional[SolverConfig] = None,
) -> PlannerOutcome:
    """
    Solve the selection MIP, falling back to the greedy planner on failure.

    Args:
        team_capacities: team id -> capacity
        projects: Actionable projects
        solver: Injected solver (default: OR-Tools from config.backend)
        config: Solver configuration

    Returns:
        PlannerOutcome; planner is "mip" on success, "greedy_deps" after fallback
    """
    if not projects:
        return PlannerOutcome(sequence=[], value=0.0, planner="mip", solver_status=SolverStatus.OPTIMAL.value)

    config = config or SolverConfig()
    if solver is None:
        solver = get_solver(config.backend, config)

    model = build_mip_model(team_capacities, projects)

    try:
        result = solver.solve(model)
    except Exception as e:
        logger.error(f"{solver.get_name()} failed: {e}")
        result = SolverResult(status=SolverStatus.ERROR, message=str(e))

    if result.is_success() and not model.is_feasible(result.assignment):
        logger.error(f"{solver.get_name()} returned an assignment that violates the model")
        result = SolverResult(status=SolverStatus.ERROR, message="Infeasible assignment")

    if not result.is_success():
        logger.warning(
            f"MIP status={result.status.value} ({result.message}). "
            f"Falling back to greedy-with-dependencies."
        )
        outcome = plan_greedy_with_dependencies(team_capacities, projects)
        outcome.solver_status = result.status.value
        return outcome

    chosen = set(result.selected())
    order = topological_sort(projects)
    sequence = [p.id for p in order if p.id in chosen]
    value = sum(p.value for p in order if p.id in chosen)

    logger.debug(f"MIP {result.status.value}: value={value}, gap={result.compute_gap()}")
    return PlannerOutcome(
        sequence=sequence,
        value=value,
        planner="mip",
        solver_status=result.status.value,
    )


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# DISPATCH
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def plan_optimized(
    team_capacities: Dict[str, float],
    projects: List[PlanningProject],
    strategy: OptimizationStrategy = OptimizationStrategy.MIP,
    backtracking_max_projects: int = DEFAULT_BACKTRACKING_MAX_PROJECTS,
    solver: Optional[SolverInterface] = None,
    solver_config: Optional[SolverConfig] = None,
) -> PlannerOutcome:
    """
    Maximize total value under capacity and precedence constraints.

    AUTO runs the backtracking search when the input is small enough and
    the MIP otherwise. BACKTRACKING on an input above the limit also goes
    to the MIP, so the caller always gets a plan.
    """
    if strategy == OptimizationStrategy.AUTO:
        if len(projects) <= backtracking_max_projects:
            strategy = OptimizationStrategy.BACKTRACKING
        else:
            strategy = OptimizationStrategy.MIP
    elif strategy == OptimizationStrategy.BACKTRACKING and len(projects) > backtracking_max_projects:
        logger.warning(
            f"Backtracking limited to {backtracking_max_projects} projects, got {len(projects)}. "
            f"Using MIP instead."
        )
        strategy = OptimizationStrategy.MIP

    if strategy == OptimizationStrategy.BACKTRACKING:
        return plan_backtracking(team_capacities, projects, max_projects=backtracking_max_projects)
    return plan_mip(team_capacities, projects, solver=solver, config=solver_config)
