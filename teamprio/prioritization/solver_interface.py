"""
Teamprio - Solver Interface

Abstract interface for the binary integer programs built by the optimized
planner, supporting:
- OR-Tools linear solver with CBC (default)
- OR-Tools linear solver with SCIP
- Static assignments (precomputed solutions, test doubles)

Design Pattern: Strategy + Factory
- Solvers implement a common interface over a solver-neutral MIPModel
- Factory returns the requested backend, or the first one available
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


# ============================================================
# ENUMS AND CONFIG
# ============================================================

class SolverBackend(str, Enum):
    """Available MIP backends."""
    ORTOOLS_CBC = "cbc"
    ORTOOLS_SCIP = "scip"


class SolverStatus(Enum):
    """Solver solution status."""
    OPTIMAL = "optimal"
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    TIMEOUT = "timeout"
    ERROR = "error"
    NOT_SOLVED = "not_solved"


@dataclass
class SolverConfig:
    """Configuration for solver."""
    backend: SolverBackend = SolverBackend.ORTOOLS_CBC

    # Time limits
    time_limit_sec: float = 30.0

    # Quality parameters
    relative_gap: float = 0.005  # 0.5%

    # Parallelism
    num_threads: int = 1

    # Logging
    verbose: bool = False


# ============================================================
# MODEL
# ============================================================

@dataclass
class LinearConstraint:
    """sum(coefficients[name] * x[name]) <= upper_bound"""
    name: str
    coefficients: Dict[str, float]
    upper_bound: float


@dataclass
class MIPModel:
    """
    Solver-neutral binary program.

    Every variable is binary. Variables listed in fixed_to_zero get an upper
    bound of 0.
    """
    name: str
    variables: List[str] = field(default_factory=list)
    objective: Dict[str, float] = field(default_factory=dict)
    constraints: List[LinearConstraint] = field(default_factory=list)
    fixed_to_zero: List[str] = field(default_factory=list)
    maximize: bool = True

    def add_variable(self, name: str, objective_coef: float = 0.0) -> None:
        self.variables.append(name)
        self.objective[name] = objective_coef

    def add_constraint(self, name: str, coefficients: Dict[str, float], upper_bound: float) -> None:
        self.constraints.append(LinearConstraint(name, coefficients, upper_bound))

    def evaluate(self, assignment: Dict[str, int]) -> float:
        """Objective value of an assignment."""
        return sum(coef * assignment.get(name, 0) for name, coef in self.objective.items())

    def is_feasible(self, assignment: Dict[str, int]) -> bool:
        """Check an assignment against every constraint."""
        for name in self.fixed_to_zero:
            if assignment.get(name, 0):
                return False
        for ct in self.constraints:
            lhs = sum(coef * assignment.get(var, 0) for var, coef in ct.coefficients.items())
            if lhs > ct.upper_bound + 1e-9:
                return False
        return True


@dataclass
class SolverResult:
    """Result from solver."""
    status: SolverStatus
    assignment: Dict[str, int] = field(default_factory=dict)
    objective_value: Optional[float] = None
    best_bound: Optional[float] = None

    # Timing
    solve_time_sec: float = 0.0

    # Statistics
    statistics: Dict[str, Any] = field(default_factory=dict)

    # Messages
    message: str = ""

    def is_success(self) -> bool:
        """Check if a solution was found."""
        return self.status in [SolverStatus.OPTIMAL, SolverStatus.FEASIBLE]

    def selected(self) -> List[str]:
        """Variables set to 1."""
        return [name for name, val in self.assignment.items() if val]

    def compute_gap(self) -> Optional[float]:
        """Compute optimality gap."""
        if self.objective_value is None or self.best_bound is None:
            return None
        if self.best_bound == 0:
            return 0.0 if self.objective_value == 0 else float('inf')
        return abs(self.objective_value - self.best_bound) / abs(self.best_bound)


# ============================================================
# ABSTRACT SOLVER INTERFACE
# ============================================================

class SolverInterface(ABC):
    """
    Abstract interface for MIP solvers.

    Implementations handle:
    - Translating a MIPModel to the backend
    - Solving with configured parameters
    - Extracting a 0/1 assignment
    """

    def __init__(self, config: Optional[SolverConfig] = None):
        self.config = config or SolverConfig()

    @abstractmethod
    def solve(self, model: MIPModel) -> SolverResult:
        """
        Solve the model.

        Returns:
            SolverResult with assignment and statistics
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get solver name for logging."""
        pass

    def is_available(self) -> bool:
        """Check if solver is available."""
        return True


# ============================================================
# OR-TOOLS MILP SOLVER
# ============================================================

class ORToolsMIPSolver(SolverInterface):
    """
    OR-Tools linear solver (CBC or SCIP backend).

    Builds one BoolVar per model variable, one row per constraint, and
    solves with the configured relative gap and time limit.
    """

    _BACKEND_IDS = {
        SolverBackend.ORTOOLS_CBC: 'CBC',
        SolverBackend.ORTOOLS_SCIP: 'SCIP',
    }

    def _create_solver(self):
        from ortools.linear_solver import pywraplp
        return pywraplp.Solver.CreateSolver(self._BACKEND_IDS[self.config.backend])

    def solve(self, model: MIPModel) -> SolverResult:
        """Solve using OR-Tools."""
        from ortools.linear_solver import pywraplp

        start_time = time.time()
        solver = self._create_solver()
        if not solver:
            return SolverResult(
                status=SolverStatus.ERROR,
                message=f"Could not create {self.get_name()} solver",
            )

        if self.config.verbose:
            solver.EnableOutput()
        if self.config.num_threads > 1:
            solver.SetNumThreads(self.config.num_threads)
        solver.SetTimeLimit(int(self.config.time_limit_sec * 1000))

        infinity = solver.infinity()
        fixed = set(model.fixed_to_zero)

        # ════════════════════════════════════════════════════════════════════
        # VARIABLES
        # ════════════════════════════════════════════════════════════════════

        x = {}
        for i, name in enumerate(model.variables):
            x[name] = solver.IntVar(0, 0 if name in fixed else 1, f'x_{i}')

        # ════════════════════════════════════════════════════════════════════
        # CONSTRAINTS
        # ════════════════════════════════════════════════════════════════════

        for ct in model.constraints:
            row = solver.Constraint(-infinity, ct.upper_bound, ct.name)
            for name, coef in ct.coefficients.items():
                if name in x:
                    row.SetCoefficient(x[name], coef)

        # ════════════════════════════════════════════════════════════════════
        # OBJECTIVE
        # ════════════════════════════════════════════════════════════════════

        objective = solver.Objective()
        for name, coef in model.objective.items():
            if name in x:
                objective.SetCoefficient(x[name], coef)
        if model.maximize:
            objective.SetMaximization()
        else:
            objective.SetMinimization()

        params = pywraplp.MPSolverParameters()
        params.SetDoubleParam(pywraplp.MPSolverParameters.RELATIVE_MIP_GAP, self.config.relative_gap)

        status = solver.Solve(params)
        solve_time = time.time() - start_time

        status_map = {
            pywraplp.Solver.OPTIMAL: SolverStatus.OPTIMAL,
            pywraplp.Solver.FEASIBLE: SolverStatus.FEASIBLE,
            pywraplp.Solver.INFEASIBLE: SolverStatus.INFEASIBLE,
            pywraplp.Solver.UNBOUNDED: SolverStatus.UNBOUNDED,
            pywraplp.Solver.NOT_SOLVED: SolverStatus.TIMEOUT,
        }
        result_status = status_map.get(status, SolverStatus.ERROR)

        stats = {
            'num_variables': solver.NumVariables(),
            'num_constraints': solver.NumConstraints(),
            'backend': self.config.backend.value,
        }

        if result_status not in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE):
            return SolverResult(
                status=result_status,
                solve_time_sec=solve_time,
                statistics=stats,
                message=f"No solution found. Status: {result_status.value}",
            )

        assignment = {name: int(round(var.solution_value())) for name, var in x.items()}
        logger.debug(
            f"{self.get_name()}: {result_status.value} objective={objective.Value()} "
            f"in {solve_time:.3f}s ({stats['num_variables']} vars, {stats['num_constraints']} rows)"
        )

        return SolverResult(
            status=result_status,
            assignment=assignment,
            objective_value=objective.Value(),
            best_bound=objective.BestBound(),
            solve_time_sec=solve_time,
            statistics=stats,
            message=f"Solution found in {solve_time:.2f}s",
        )

    def get_name(self) -> str:
        return f"OR-Tools MIP ({self._BACKEND_IDS[self.config.backend]})"

    def is_available(self) -> bool:
        try:
            return self._create_solver() is not None
        except ImportError:
            return False


# ============================================================
# STATIC SOLVER
# ============================================================

class StaticAssignmentSolver(SolverInterface):
    """
    Returns a preset answer instead of solving.

    Used for precomputed plans and to exercise the optimized planner against
    known assignments (including failures).
    """

    def __init__(
        self,
        selected: Optional[List[str]] = None,
        status: SolverStatus = SolverStatus.OPTIMAL,
        config: Optional[SolverConfig] = None,
    ):
        super().__init__(config)
        self._selected = set(selected or [])
        self._status = status
        self.calls = 0

    def solve(self, model: MIPModel) -> SolverResult:
        self.calls += 1
        if self._status not in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE):
            return SolverResult(status=self._status, message="Static failure")

        assignment = {name: int(name in self._selected) for name in model.variables}
        return SolverResult(
            status=self._status,
            assignment=assignment,
            objective_value=model.evaluate(assignment),
            message="Static assignment",
        )

    def get_name(self) -> str:
        return "Static assignment"


# ============================================================
# SOLVER FACTORY
# ============================================================

def get_solver(
    backend: SolverBackend = SolverBackend.ORTOOLS_CBC,
    config: Optional[SolverConfig] = None,
) -> SolverInterface:
    """
    Factory function to get a MIP solver.

    Falls back to the other OR-Tools backend when the requested one is not
    compiled into the installed wheel.
    """
    if config is None:
        config = SolverConfig(backend=backend)
    else:
        config = replace(config, backend=backend)

    solver = ORToolsMIPSolver(config)
    if solver.is_available():
        return solver

    for alternative in SolverBackend:
        if alternative == backend:
            continue
        logger.warning(f"{solver.get_name()} not available, trying {alternative.value}")
        candidate = ORToolsMIPSolver(replace(config, backend=alternative))
        if candidate.is_available():
            return candidate

    # Nothing available; solve() will report ERROR and the planner falls back
    return solver


def list_available_solvers() -> List[str]:
    """List all available MIP backends."""
    available = []
    for backend in SolverBackend:
        solver = ORToolsMIPSolver(SolverConfig(backend=backend))
        if solver.is_available():
            available.append(solver.get_name())
    return available
