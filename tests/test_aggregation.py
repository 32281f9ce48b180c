"""
Unit tests for outcome classification and aggregate statistics.
"""
import os
import sys

import pytest

# Add backend source to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend', 'src'))

from domain.models.base import EventType
from domain.models.statistics import AggregateStats, EventResult, Outcome, ScoreTuple, SlotResult
from domain.services.aggregation import (
    aggregate, aggregate_by_category, aggregate_by_event_type, filter_results,
    partition, summarize_results
)
from domain.services.outcome import classify
from test_utils import TestDataFactory as F


class TestClassify:
    """Win/draw/loss verdicts."""

    @pytest.mark.parametrize("ours, theirs, expected", [
        (3, 1, Outcome.WIN),
        (1, 3, Outcome.LOSS),
        (2, 2, Outcome.DRAW),
        (0, 0, Outcome.DRAW),
    ])
    def test_classify(self, ours, theirs, expected):
        assert classify(ScoreTuple(1, ours, theirs)) is expected

    def test_outcome_values(self):
        assert [o.value for o in Outcome] == ["win", "draw", "loss"]
        assert Outcome.WIN.points == 3
        assert Outcome.DRAW.points == 1
        assert Outcome.LOSS.points == 0


class TestAggregate:
    """Global fold over classified outcomes."""

    def test_empty_input(self):
        stats = aggregate([])
        assert stats == AggregateStats()
        assert stats.win_rate == 0
        assert stats.avg_goals_per_game == 0.0

    def test_counts_and_derived_figures(self):
        outcomes = [F.outcome(3, 1), F.outcome(2, 2), F.outcome(0, 1)]
        stats = aggregate(outcomes)

        assert (stats.wins, stats.draws, stats.losses) == (1, 1, 1)
        assert stats.total_games == stats.wins + stats.draws + stats.losses == 3
        assert stats.goals_for == 5
        assert stats.goals_against == 4
        assert stats.goal_difference == 1
        assert stats.points == 3 * stats.wins + stats.draws == 4
        assert stats.win_rate == 33
        assert stats.avg_goals_per_game == 1.7

    def test_win_rate_rounds_half_up(self):
        # 1 of 8 -> 12.5%
        outcomes = [F.outcome(1, 0)] + [F.outcome(0, 1)] * 7
        assert aggregate(outcomes).win_rate == 13

    def test_average_rounds_half_up(self):
        # 5 goals in 4 games -> 1.25
        outcomes = [F.outcome(2, 0), F.outcome(1, 0), F.outcome(1, 0), F.outcome(1, 0)]
        assert aggregate(outcomes).avg_goals_per_game == 1.3

    def test_two_thirds_win_rate(self):
        outcomes = [F.outcome(1, 0), F.outcome(1, 0), F.outcome(0, 0)]
        assert aggregate(outcomes).win_rate == 67

    def test_input_is_not_modified(self):
        outcomes = (F.outcome(1, 0), F.outcome(0, 1))
        before = list(outcomes)
        aggregate(outcomes)
        assert list(outcomes) == before

    def test_add_returns_new_value(self):
        empty = AggregateStats()
        updated = empty.add(F.outcome(2, 0))
        assert empty.total_games == 0
        assert updated.total_games == 1

    def test_aggregates_sum(self):
        first = aggregate([F.outcome(2, 0)])
        second = aggregate([F.outcome(1, 1), F.outcome(0, 3)])
        assert first + second == aggregate([F.outcome(2, 0), F.outcome(1, 1), F.outcome(0, 3)])


class TestPartitions:
    """Per-category and per-event-type aggregates."""

    def setup_method(self):
        self.outcomes = [
            F.outcome(3, 1, event_id="e1", team_number=1, category_id="c1", category_name="A Team"),
            F.outcome(0, 0, event_id="e1", team_number=2, category_id="c2", category_name="B Team"),
            F.outcome(1, 2, event_id="e2", category_id="c2", category_name="B Team",
                      event_type=EventType.FRIENDLY),
            F.outcome(4, 0, event_id="e3", category_id=None, category_name="Club"),
        ]

    def test_category_totals(self):
        categories = aggregate_by_category(self.outcomes)
        by_name = {c.category_name: c.stats for c in categories}

        assert by_name["A Team"].wins == 1
        assert by_name["B Team"].draws == 1
        assert by_name["B Team"].losses == 1
        assert by_name["Club"].goals_for == 4

    def test_categories_ordered_by_games_played(self):
        names = [c.category_name for c in aggregate_by_category(self.outcomes)]
        assert names == ["B Team", "A Team", "Club"]

    def test_synthetic_category_keyed_by_name(self):
        outcomes = [
            F.outcome(1, 0, event_id="e1", category_id=None, category_name="Club"),
            F.outcome(0, 1, event_id="e2", category_id=None, category_name="Club"),
        ]
        categories = aggregate_by_category(outcomes)
        assert len(categories) == 1
        assert categories[0].category_id is None
        assert categories[0].stats.total_games == 2

    def test_global_equals_sum_of_categories(self):
        overall = aggregate(self.outcomes)
        categories = aggregate_by_category(self.outcomes)

        total = AggregateStats()
        for category in categories:
            total = total + category.stats
        assert total == overall

    def test_event_type_partition(self):
        by_type = aggregate_by_event_type(self.outcomes)
        assert list(by_type) == [EventType.FIXTURE, EventType.FRIENDLY]
        assert by_type[EventType.FIXTURE].event_type is EventType.FIXTURE
        assert by_type[EventType.FIXTURE].stats.total_games == 3
        assert by_type[EventType.FRIENDLY].stats.losses == 1

    def test_event_type_category_breakdown(self):
        fixtures = aggregate_by_event_type(self.outcomes)[EventType.FIXTURE]
        by_name = {c.category_name: c.stats for c in fixtures.categories}

        assert set(by_name) == {"A Team", "B Team", "Club"}
        assert by_name["B Team"].total_games == 1
        assert by_name["B Team"].draws == 1

        friendly = aggregate_by_event_type(self.outcomes)[EventType.FRIENDLY]
        assert [c.category_name for c in friendly.categories] == ["B Team"]

    def test_event_type_totals_sum_to_overall(self):
        total = AggregateStats()
        for entry in aggregate_by_event_type(self.outcomes).values():
            total = total + entry.stats
        assert total == aggregate(self.outcomes)

    def test_partition_keeps_first_occurrence_order(self):
        totals = partition(self.outcomes, lambda o: o.event_id)
        assert list(totals) == ["e1", "e2", "e3"]
        assert totals["e1"].total_games == 2

    def test_empty_partitions(self):
        assert aggregate_by_category([]) == []
        assert aggregate_by_event_type([]) == {}


class TestSerialization:
    """Plain-data output of aggregates."""

    def test_aggregate_to_dict(self):
        data = aggregate([F.outcome(2, 1)]).to_dict()
        assert data["wins"] == 1
        assert data["win_rate"] == 100
        assert data["avg_goals_per_game"] == 2.0

    def test_category_to_dict(self):
        data = aggregate_by_category([F.outcome(2, 1)])[0].to_dict()
        assert data["category_id"] == "c1"
        assert data["stats"]["points"] == 3


def listed(event_id, event_type, *slots):
    return EventResult(
        event_id=event_id, date=None, title=event_id, opponent=None, event_type=event_type,
        slots=tuple(
            SlotResult(number, name, ours, theirs, classify(ScoreTuple(number, ours, theirs)))
            for number, (name, ours, theirs) in enumerate(slots, start=1)
        )
    )


class TestResultsSummary:
    """Filtering and totals of listed results."""

    def setup_method(self):
        self.results = [
            listed("e1", EventType.MATCH, ("Lions", 2, 0), ("Tigers", 1, 1)),
            listed("e2", EventType.TOURNAMENT, ("Lions", 0, 3)),
            listed("e3", EventType.MATCH, ("Tigers", 4, 1)),
        ]

    def test_no_filters_keeps_everything(self):
        assert filter_results(self.results) == self.results
        summary = summarize_results(self.results)
        assert (summary.wins, summary.draws, summary.losses, summary.total_games) == (2, 1, 1, 4)

    def test_filter_by_event_type(self):
        assert [r.event_id for r in filter_results(self.results, EventType.MATCH)] == ["e1", "e3"]
        assert filter_results(self.results, EventType.FESTIVAL) == []

    def test_filter_by_category_keeps_whole_events(self):
        lions = filter_results(self.results, category_name="Lions")
        assert [r.event_id for r in lions] == ["e1", "e2"]
        assert len(lions[0].slots) == 2

    def test_category_summary_counts_only_its_slots(self):
        summary = summarize_results(self.results, category_name="Tigers")
        assert (summary.wins, summary.draws, summary.total_games) == (1, 1, 2)
        assert summary.goals_for == 5

    def test_combined_filters(self):
        summary = summarize_results(self.results, EventType.MATCH, "Lions")
        assert summary == AggregateStats.from_counts(wins=1, goals_for=2)

    def test_unknown_category(self):
        assert filter_results(self.results, category_name="Bears") == []
        assert summarize_results(self.results, category_name="Bears") == AggregateStats()
