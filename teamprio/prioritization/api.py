"""
Teamprio - Prioritization API
=============================

Endpoints REST for the prioritization engine.

Endpoints:
- GET  /prioritization/status                    - Module status
- GET  /prioritization/modes                     - Planning modes and solvers
- POST /prioritization/run                       - Prioritize a workspace
- POST /prioritization/dependencies/check-cycle  - Would a new edge close a cycle?
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from .. import __version__, feature_flags
from .dependency_graph import would_create_cycle
from .interchange import CycleCheckRequest, PrioritizeRequest
from .kpi_engine import compute_portfolio_kpis, compute_team_utilization
from .models import InvalidArgument, PlanningMode
from .orchestrator import prioritize
from .solver_interface import list_available_solvers

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/prioritization", tags=["Prioritization"])


@router.get("/status")
async def get_prioritization_status():
    """Get prioritization module status."""
    return {
        "service": "Prioritization Engine",
        "version": __version__,
        "status": "operational",
        "modes": [m.value for m in PlanningMode],
        "settings": feature_flags.PlannerFlags.to_dict(),
    }


@router.get("/modes")
async def get_planning_modes():
    """
    List planning modes.
    """
    return {
        "modes": [
            {
                "id": PlanningMode.SEQUENTIAL.value,
                "name": "Sequential",
                "description": "Greedy by value; ignores dependencies",
                "respects_dependencies": False,
            },
            {
                "id": PlanningMode.GREEDY_DEPS.value,
                "name": "Greedy with dependencies",
                "description": "Greedy by value/effort over dependency-satisfied projects",
                "respects_dependencies": True,
            },
            {
                "id": PlanningMode.OPTIMIZED.value,
                "name": "Optimized",
                "description": "Maximum total value (MIP or backtracking)",
                "respects_dependencies": True,
            },
        ],
        "default": feature_flags.PlannerFlags.get_settings().default_mode.value,
        "solvers": list_available_solvers(),
    }


# Sync handler: FastAPI runs it in the threadpool, solves can take seconds
@router.post("/run")
def run_prioritization(request: PrioritizeRequest) -> Dict[str, Any]:
    """
    Prioritize the projects of a workspace.

    **Modes:**
    - `sequential`: greedy by value (fast, ignores dependencies)
    - `greedy-with-dependencies`: greedy by value/effort, dependency-aware
    - `optimized`: maximum value under capacity and dependency constraints
    """
    settings = feature_flags.PlannerFlags.get_settings()
    mode = request.mode or settings.default_mode
    teams = [t.to_domain() for t in request.teams]

    try:
        result = prioritize(
            mode,
            request.project_list(),
            teams,
            [d.to_domain() for d in request.dependencies],
            settings=settings,
        )
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))

    response = result.to_dict()
    response["utilization"] = [u.to_dict() for u in compute_team_utilization(result, teams)]
    response["kpis"] = compute_portfolio_kpis(result, teams).to_dict()
    return response


@router.post("/dependencies/check-cycle")
async def check_dependency_cycle(request: CycleCheckRequest):
    """Report whether adding sourceId → targetId would create a dependency cycle."""
    dependencies = [d.to_domain() for d in request.dependencies]
    return {
        "sourceId": request.source_id,
        "targetId": request.target_id,
        "wouldCreateCycle": would_create_cycle(dependencies, request.source_id, request.target_id),
    }
