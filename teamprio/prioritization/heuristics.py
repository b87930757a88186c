"""
Teamprio - Greedy Planners
==========================

Two fast planners, no backtracking:

- SEQUENTIAL: sort by value (descending), take whatever still fits the
  owning team's remaining capacity. Ignores dependencies.
- GREEDY_DEPS: keep a frontier of projects whose prerequisites are all
  selected; repeatedly take the best value/effort ratio that fits, then
  unlock its dependents. Stops when nothing on the frontier fits.

Both return a PlannerOutcome whose sequence is the selection order.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List

from .dependency_graph import build_dependents, restrict_dependencies
from .models import PlannerOutcome, PlanningProject

logger = logging.getLogger(__name__)

def value_effort_ratio(effort: float, value: float) -> float:
    """
    Value per unit of effort.

    Zero effort is an infinite ratio, so free projects always come first.
    """
    if effort <= 0:
        return math.inf
    return value / effort


def fits(remaining: Dict[str, float], project: PlanningProject) -> bool:
    """Whether the project's team still has room for it. Unknown teams never fit."""
    if project.team_id not in remaining:
        return False
    return remaining[project.team_id] >= project.effort


def plan_sequential(
    team_capacities: Dict[str, float],
    projects: List[PlanningProject],
) -> PlannerOutcome:
    """
    Greedy by value, ignoring dependencies.

    Args:
        team_capacities: team id -> capacity
        projects: Actionable projects

    Returns:
        PlannerOutcome in selection (value-descending) order
    """
    remaining = dict(team_capacities)
    ordered = sorted(projects, key=lambda p: p.value, reverse=True)

    sequence: List[str] = []
    total_value = 0.0
    for project in ordered:
        if fits(remaining, project):
            remaining[project.team_id] -= project.effort
            sequence.append(project.id)
            total_value += project.value

    return PlannerOutcome(sequence=sequence, value=total_value, planner="sequential")


def plan_greedy_with_dependencies(
    team_capacities: Dict[str, float],
    projects: List[PlanningProject],
) -> PlannerOutcome:
    """
    Greedy by value/effort ratio over the dependency-satisfied frontier.

    The frontier starts with the dependency-free projects in input order;
    unlocked projects are appended in unlock order. Sorting is stable, so
    equal ratios keep frontier order.

    Args:
        team_capacities: team id -> capacity
        projects: Actionable projects

    Returns:
        PlannerOutcome in selection order
    """
    remaining = dict(team_capacities)
    nodes = restrict_dependencies(projects)
    by_id = {p.id: p for p in nodes}
    dependents = build_dependents(nodes)
    pending = {p.id: len(p.dependencies) for p in nodes}

    available = [p for p in nodes if pending[p.id] == 0]

    sequence: List[str] = []
    total_value = 0.0
    while available:
        available.sort(key=lambda p: value_effort_ratio(p.effort, p.value), reverse=True)

        chosen = next((p for p in available if fits(remaining, p)), None)
        if chosen is None:
            break

        sequence.append(chosen.id)
        total_value += chosen.value
        remaining[chosen.team_id] -= chosen.effort
        available.remove(chosen)

        for neighbor in dependents[chosen.id]:
            pending[neighbor] -= 1
            if pending[neighbor] == 0:
                available.append(by_id[neighbor])

    logger.debug(f"Greedy planner selected {len(sequence)}/{len(nodes)} projects, value={total_value}")
    return PlannerOutcome(sequence=sequence, value=total_value, planner="greedy_deps")
