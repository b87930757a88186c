"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    TEAMPRIO — DEPENDENCY GRAPH UTILITIES
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Graph helpers over project dependency edges.

TOPOLOGICAL ORDER (Kahn)
════════════════════════

    indeg(p) = |{ d ∈ deps(p) }|
    ready    = { p : indeg(p) = 0 }              (min-heap on id)
    repeat:  pop p, emit p, indeg(q) -= 1 for every dependent q

Ties are broken by ascending id so identical inputs always give the same
order. Nodes left on a cycle are never emitted.

CYCLE PREVENTION
════════════════

Adding s → t closes a cycle iff t already reaches s along existing
source → target edges. The UI runs this check before creating an edge; the
planners never call it.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Set

from .models import Dependency, PlanningProject

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# PLANNING GRAPH
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def restrict_dependencies(projects: List[PlanningProject]) -> List[PlanningProject]:
    """
    Drop dependency ids that are not in the node set, and duplicates.

    Returns new PlanningProject instances; the inputs are left untouched.
    """
    known_ids = {p.id for p in projects}
    restricted = []
    for project in projects:
        valid: List[str] = []
        for dep_id in project.dependencies:
            if dep_id in known_ids and dep_id != project.id and dep_id not in valid:
                valid.append(dep_id)
        restricted.append(replace(project, dependencies=valid))
    return restricted


def build_dependents(projects: List[PlanningProject]) -> Dict[str, List[str]]:
    """Map project id -> ids of the projects that list it as a dependency."""
    dependents: Dict[str, List[str]] = {p.id: [] for p in projects}
    for project in projects:
        for dep_id in project.dependencies:
            if dep_id in dependents:
                dependents[dep_id].append(project.id)
    return dependents


def topological_sort(projects: List[PlanningProject]) -> List[PlanningProject]:
    """
    Order projects so that each comes after all of its dependencies.

    Args:
        projects: Planning nodes; dangling dependency ids are ignored

    Returns:
        Projects in dependency order, ties by ascending id. Projects caught in
        a cycle are omitted.
    """
    nodes = restrict_dependencies(projects)
    by_id = {p.id: p for p in nodes}
    dependents = build_dependents(nodes)
    indegree = {p.id: len(p.dependencies) for p in nodes}

    ready = [pid for pid, degree in indegree.items() if degree == 0]
    heapq.heapify(ready)

    order: List[PlanningProject] = []
    while ready:
        current = heapq.heappop(ready)
        order.append(by_id[current])
        for neighbor in dependents[current]:
            indegree[neighbor] -= 1
            if indegree[neighbor] == 0:
                heapq.heappush(ready, neighbor)

    if len(order) < len(nodes):
        stuck = sorted(pid for pid, degree in indegree.items() if degree > 0)
        logger.warning(f"Dependency cycle detected; {len(stuck)} projects left unordered: {stuck}")

    return order


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# EDGE QUERIES
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def can_reach(dependencies: Iterable[Dependency], start: str, goal: str) -> bool:
    """Whether goal is reachable from start following source → target edges."""
    successors: Dict[str, List[str]] = {}
    for dep in dependencies:
        successors.setdefault(dep.source_id, []).append(dep.target_id)

    visited: Set[str] = set()
    stack = [start]
    while stack:
        node = stack.pop()
        if node == goal:
            return True
        if node in visited:
            continue
        visited.add(node)
        stack.extend(successors.get(node, []))
    return False


def would_create_cycle(dependencies: Iterable[Dependency], source_id: str, target_id: str) -> bool:
    """
    Check whether adding source → target would close a cycle.

    A self-edge (source == target) is reported as a cycle.
    """
    return can_reach(dependencies, target_id, source_id)


def project_dependencies(dependencies: Iterable[Dependency], project_id: str) -> List[str]:
    """Prerequisite ids of a project."""
    return [dep.source_id for dep in dependencies if dep.target_id == project_id]


def project_dependents(dependencies: Iterable[Dependency], project_id: str) -> List[str]:
    """Ids of the projects that depend on a project."""
    return [dep.target_id for dep in dependencies if dep.source_id == project_id]
