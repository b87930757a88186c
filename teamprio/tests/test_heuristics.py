"""
════════════════════════════════════════════════════════════════════════════════════════════════════
TESTS - Greedy Planners
════════════════════════════════════════════════════════════════════════════════════════════════════
"""

import math

from teamprio.prioritization.heuristics import (
    plan_greedy_with_dependencies,
    plan_sequential,
    value_effort_ratio,
)
from teamprio.prioritization.models import PlanningProject


def node(pid, effort, value, deps=(), team="A"):
    return PlanningProject(id=pid, team_id=team, value=value, effort=effort, dependencies=list(deps))


class TestSequentialPlanner:
    """Greedy by value, dependencies ignored."""

    def test_example_capacity_skip(self):
        """P1 fits (5 ≤ 10); P2 needs 8 > 5 remaining and is skipped."""
        outcome = plan_sequential({"A": 10}, [node("P1", 5, 10), node("P2", 8, 9)])

        assert outcome.sequence == ["P1"]
        assert outcome.value == 10
        assert outcome.planner == "sequential"

    def test_order_is_descending_value(self):
        outcome = plan_sequential({"A": 100}, [node("low", 1, 1), node("high", 1, 9), node("mid", 1, 5)])

        assert outcome.sequence == ["high", "mid", "low"]

    def test_skipped_project_does_not_stop_the_scan(self):
        """A later, smaller project still gets taken."""
        outcome = plan_sequential({"A": 10}, [node("big", 20, 50), node("small", 3, 10)])

        assert outcome.sequence == ["small"]

    def test_dependencies_ignored(self):
        outcome = plan_sequential({"A": 10}, [node("pre", 20, 5), node("post", 3, 10, deps=["pre"])])

        assert outcome.sequence == ["post"]

    def test_equal_values_keep_input_order(self):
        outcome = plan_sequential({"A": 2}, [node("first", 2, 5), node("second", 2, 5)])

        assert outcome.sequence == ["first"]

    def test_unknown_team_never_selected(self):
        outcome = plan_sequential({"A": 10}, [node("orphan", 0, 5, team="GONE")])

        assert outcome.sequence == []

    def test_capacity_is_per_team(self):
        projects = [node("a1", 5, 10, team="A"), node("b1", 5, 9, team="B"), node("a2", 5, 8, team="A")]

        outcome = plan_sequential({"A": 5, "B": 5}, projects)

        assert outcome.sequence == ["a1", "b1"]

    def test_fractional_efforts_compared_exactly(self):
        """0.3 - 0.1 leaves slightly less than 0.2, so the second project is rejected."""
        outcome = plan_sequential({"A": 0.3}, [node("small", 0.1, 5), node("large", 0.2, 4)])

        assert outcome.sequence == ["small"]

    def test_input_capacities_untouched(self):
        capacities = {"A": 10}

        plan_sequential(capacities, [node("P1", 5, 10)])

        assert capacities == {"A": 10}


class TestGreedyWithDependencies:
    """Greedy by value/effort over the dependency-satisfied frontier."""

    def test_example_unlocks_dependent(self):
        """P2 has the better ratio but only becomes available once P1 is selected."""
        outcome = plan_greedy_with_dependencies(
            {"A": 10},
            [node("P1", 4, 8), node("P2", 4, 20, deps=["P1"])],
        )

        assert outcome.sequence == ["P1", "P2"]
        assert outcome.value == 28
        assert outcome.planner == "greedy_deps"

    def test_zero_effort_selected_first(self):
        """Effort 0 is an infinite ratio."""
        outcome = plan_greedy_with_dependencies(
            {"A": 10},
            [node("dense", 1, 100), node("free", 0, 1)],
        )

        assert outcome.sequence == ["free", "dense"]

    def test_zero_effort_ties_keep_frontier_order(self):
        projects = [node("z2", 0, 1), node("z1", 0, 5), node("p", 1, 100)]

        first = plan_greedy_with_dependencies({"A": 10}, projects)
        second = plan_greedy_with_dependencies({"A": 10}, projects)

        assert first.sequence == ["z2", "z1", "p"]
        assert first.sequence == second.sequence

    def test_stops_when_nothing_on_frontier_fits(self):
        """No backtracking: 'tail' would fit but stays locked behind 'mid'."""
        outcome = plan_greedy_with_dependencies(
            {"A": 5},
            [node("best", 4, 40), node("mid", 3, 6), node("tail", 1, 1, deps=["mid"])],
        )

        assert outcome.sequence == ["best"]

    def test_skips_non_fitting_project_for_fitting_one(self):
        """The highest ratio that fits is taken, not just the highest ratio."""
        outcome = plan_greedy_with_dependencies(
            {"A": 5},
            [node("huge", 10, 100), node("ok", 5, 10)],
        )

        assert outcome.sequence == ["ok"]

    def test_cross_team_prerequisite(self):
        """A Mobile project unlocks once its Platform prerequisite is taken."""
        projects = [
            node("api", 5, 5, team="PLAT"),
            node("app", 2, 30, deps=["api"], team="MOB"),
        ]

        outcome = plan_greedy_with_dependencies({"PLAT": 5, "MOB": 2}, projects)

        assert outcome.sequence == ["api", "app"]

    def test_dependent_blocked_when_prerequisite_does_not_fit(self):
        projects = [
            node("api", 6, 5, team="PLAT"),
            node("app", 2, 30, deps=["api"], team="MOB"),
        ]

        outcome = plan_greedy_with_dependencies({"PLAT": 5, "MOB": 2}, projects)

        assert outcome.sequence == []

    def test_dangling_dependency_ignored(self):
        outcome = plan_greedy_with_dependencies({"A": 5}, [node("solo", 1, 1, deps=["ghost"])])

        assert outcome.sequence == ["solo"]

    def test_capacity_never_exceeded(self):
        projects = [node(f"p{i}", effort=i % 4 + 1, value=i + 1) for i in range(12)]

        outcome = plan_greedy_with_dependencies({"A": 9}, projects)

        by_id = {p.id: p for p in projects}
        assert sum(by_id[pid].effort for pid in outcome.sequence) <= 9


class TestValueEffortRatio:

    def test_regular_ratio(self):
        assert value_effort_ratio(2, 5) == 2.5

    def test_zero_effort_is_infinite(self):
        assert value_effort_ratio(0, 5) == math.inf
