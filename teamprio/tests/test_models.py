"""
════════════════════════════════════════════════════════════════════════════════════════════════════
TESTS - Data Model
════════════════════════════════════════════════════════════════════════════════════════════════════
"""

import math

import pytest

from teamprio.prioritization.models import (
    Dependency,
    InvalidArgument,
    PlanningMode,
    Project,
    Team,
    coerce_number,
)


class TestCoerceNumber:

    @pytest.mark.parametrize("raw, expected", [
        (5, 5.0),
        (2.5, 2.5),
        ("7", 7.0),
        (" 3.5 ", 3.5),
        (0, 0.0),
    ])
    def test_numbers(self, raw, expected):
        assert coerce_number(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", True, math.nan, math.inf, "inf", [1]])
    def test_unusable(self, raw):
        assert coerce_number(raw) is None


class TestPlanningMode:

    @pytest.mark.parametrize("raw, mode", [
        ("sequential", PlanningMode.SEQUENTIAL),
        ("greedy-with-dependencies", PlanningMode.GREEDY_DEPS),
        ("OPTIMIZED", PlanningMode.OPTIMIZED),
        ("greedy_deps", PlanningMode.GREEDY_DEPS),
        ("naive", PlanningMode.SEQUENTIAL),
        ("naive-deps", PlanningMode.GREEDY_DEPS),
        (PlanningMode.OPTIMIZED, PlanningMode.OPTIMIZED),
    ])
    def test_parse(self, raw, mode):
        assert PlanningMode.parse(raw) == mode

    @pytest.mark.parametrize("raw", ["random", "", None, 3])
    def test_unknown(self, raw):
        with pytest.raises(InvalidArgument):
            PlanningMode.parse(raw)


class TestProject:

    @pytest.mark.parametrize("effort, value, actionable", [
        (3, 5, True),
        (0, 5, True),
        ("2", "4", True),
        (None, 5, False),
        (3, None, False),
        (3, 0, False),
        (-1, 5, False),
        ("abc", 5, False),
        (math.nan, 5, False),
    ])
    def test_is_actionable(self, effort, value, actionable):
        assert Project(id="p", team_id="t", effort=effort, value=value).is_actionable is actionable

    def test_from_dict_json_shape(self):
        project = Project.from_dict({
            "id": "p4", "teamId": "t1", "title": "Copy", "effort": None, "value": 20,
            "sourceProjectId": "p2", "isLinkedCopy": True,
        })

        assert project.team_id == "t1"
        assert project.source_project_id == "p2"
        assert project.is_linked_copy is True

    def test_to_dict_omits_unset_link(self):
        data = Project(id="p", team_id="t", title="T", effort=1, value=2).to_dict()

        assert data == {"id": "p", "teamId": "t", "title": "T", "effort": 1, "value": 2}


class TestTeamAndDependency:

    @pytest.mark.parametrize("capacity, expected", [(10, 10.0), ("4", 4.0), (-3, 0.0), (None, 0.0), ("x", 0.0)])
    def test_numeric_capacity(self, capacity, expected):
        assert Team(id="t", name="T", capacity=capacity).numeric_capacity() == expected

    def test_dependency_from_dict(self):
        assert Dependency.from_dict({"sourceId": "a", "targetId": "b"}) == Dependency("a", "b")
        assert Dependency.from_dict({"source_id": "a", "target_id": "b"}) == Dependency("a", "b")

    def test_dependency_from_dict_requires_ends(self):
        with pytest.raises(KeyError):
            Dependency.from_dict({"sourceId": "a"})
