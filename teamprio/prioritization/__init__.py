"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    TEAMPRIO — PRIORITIZATION ENGINE
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Joint prioritization of a shared backlog across teams.

Each team has a capacity for the round; each project has an effort, a value
and possibly prerequisites owned by other teams. The engine picks, per round,
which projects each team pursues so that capacities hold, prerequisites come
first and total value is as high as the chosen mode allows.

This module provides:
1. Data model and JSON interchange
2. Dependency graph utilities (topological order, cycle check)
3. Planners: sequential, greedy-with-dependencies, optimized (MIP / backtracking)
4. The prioritize() orchestrator and utilization KPIs

ARCHITECTURE
════════════

    ┌─────────────────────────────────────────────────────────────────────────┐
    │                          ORCHESTRATOR                                    │
    │      normalize → filter actionable → map teams → plan → reassemble      │
    └──────────────┬───────────────────────┬──────────────────────┬───────────┘
                   │                       │                      │
    ┌──────────────▼─────┐   ┌─────────────▼────────┐   ┌─────────▼──────────┐
    │ heuristics         │   │ heuristics           │   │ optimal_planner    │
    │ • sequential       │   │ • greedy + deps      │   │ • backtracking     │
    │                    │   │                      │   │ • MIP (+ fallback) │
    └────────────────────┘   └─────────────┬────────┘   └─────────┬──────────┘
                                           │                      │
                             ┌─────────────▼──────────────────────▼──────────┐
                             │ dependency_graph      solver_interface         │
                             └────────────────────────────────────────────────┘

Every call is independent: the engine reads a snapshot and returns a new
PrioritizationResult without touching its inputs.
"""

from .models import (
    Dependency,
    InvalidArgument,
    OptimizationStrategy,
    PlannerOutcome,
    PlanningMode,
    PlanningProject,
    PrioritizationResult,
    Project,
    Team,
    TeamSummary,
)
from .dependency_graph import (
    can_reach,
    topological_sort,
    would_create_cycle,
)
from .heuristics import (
    plan_greedy_with_dependencies,
    plan_sequential,
)
from .optimal_planner import (
    build_mip_model,
    plan_backtracking,
    plan_mip,
    plan_optimized,
)
from .solver_interface import (
    ORToolsMIPSolver,
    SolverConfig,
    SolverInterface,
    SolverResult,
    SolverStatus,
    StaticAssignmentSolver,
    get_solver,
)
from .orchestrator import (
    assemble_result,
    compute_team_summaries,
    prioritize,
)

__all__ = [
    # Model
    "Dependency",
    "InvalidArgument",
    "OptimizationStrategy",
    "PlannerOutcome",
    "PlanningMode",
    "PlanningProject",
    "PrioritizationResult",
    "Project",
    "Team",
    "TeamSummary",
    # Graph
    "can_reach",
    "topological_sort",
    "would_create_cycle",
    # Planners
    "plan_sequential",
    "plan_greedy_with_dependencies",
    "plan_backtracking",
    "plan_mip",
    "plan_optimized",
    "build_mip_model",
    # Solvers
    "ORToolsMIPSolver",
    "SolverConfig",
    "SolverInterface",
    "SolverResult",
    "SolverStatus",
    "StaticAssignmentSolver",
    "get_solver",
    # Orchestrator
    "prioritize",
    "assemble_result",
    "compute_team_summaries",
]
