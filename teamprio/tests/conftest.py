"""
Shared fixtures for the teamprio tests.
"""
import pytest
from fastapi.testclient import TestClient

from teamprio.feature_flags import PlannerFlags, PlannerSettings
from teamprio.prioritization.models import Dependency, Project, Team


@pytest.fixture(autouse=True)
def reset_planner_flags():
    """Each test starts from settings read fresh from the environment."""
    PlannerFlags.reset()
    yield
    PlannerFlags.reset()


@pytest.fixture
def settings():
    """Default planner settings (MIP, CBC, 0.5% gap)."""
    return PlannerSettings()


@pytest.fixture(scope="function")
def test_client():
    """FastAPI test client."""
    from teamprio.api import app
    return TestClient(app)


@pytest.fixture
def two_teams():
    """Platform and Mobile teams."""
    return [
        Team(id="T-PLAT", name="Platform", capacity=10),
        Team(id="T-MOB", name="Mobile", capacity=8),
    ]


@pytest.fixture
def cross_team_backlog():
    """
    Backlog where Mobile work depends on Platform work.

    P-API (Platform) is a prerequisite of P-APP (Mobile).
    P-DRAFT has no value yet and is a prerequisite of P-PUSH.
    """
    projects = [
        Project(id="P-API", team_id="T-PLAT", title="Public API", effort=6, value=9),
        Project(id="P-OBS", team_id="T-PLAT", title="Observability", effort=5, value=6),
        Project(id="P-APP", team_id="T-MOB", title="New app", effort=5, value=20),
        Project(id="P-PUSH", team_id="T-MOB", title="Push", effort=3, value=4),
        Project(id="P-DRAFT", team_id="T-MOB", title="Draft idea", effort=2, value=None),
    ]
    dependencies = [
        Dependency(source_id="P-API", target_id="P-APP"),
        Dependency(source_id="P-DRAFT", target_id="P-PUSH"),
    ]
    return projects, dependencies


@pytest.fixture
def sample_import_file():
    """Workspace export in the web app's JSON shape."""
    return {
        "teams": [
            {"id": "t1", "name": "Platform", "capacity": 10},
            {"id": "t2", "name": "Mobile", "capacity": 5},
        ],
        "projects": {
            "p1": {"id": "p1", "teamId": "t1", "title": "Auth service", "effort": 4, "value": 8},
            "p2": {"id": "p2", "teamId": "t2", "title": "Login screen", "effort": 4, "value": 20},
            "p3": {"id": "p3", "teamId": "t2", "title": "Dark mode", "effort": None, "value": 3},
            "p4": {
                "id": "p4", "teamId": "t1", "title": "Login screen", "effort": None, "value": 20,
                "sourceProjectId": "p2", "isLinkedCopy": True,
            },
        },
        "dependencies": [
            {"sourceId": "p1", "targetId": "p2"},
        ],
    }
