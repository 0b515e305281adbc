"""
Tests for composite creative scoring
"""
import random

import pytest

from adcreative.services.scoring import (
    calculate_performance_scores,
    rank_performers,
    best_performer,
    worst_performer,
)


def _row(name, impressions, clicks, spend, conversions):
    return {
        "ad_name": name,
        "impressions": impressions,
        "clicks": clicks,
        "spend": spend,
        "conversions": conversions,
    }


class TestCalculatePerformanceScores:

    def test_hand_computed_score(self):
        """1000 impr / 50 clicks / 5 conv / $25 -> 0.4*5 + 0.4*10 + 0.2*2 = 6.4"""
        scores = calculate_performance_scores([_row("Ad A", 1000, 50, 25, 5)])

        score = scores["Ad A"]
        assert score.avg_ctr == pytest.approx(5.0)
        assert score.avg_cpc == pytest.approx(0.5)
        assert score.conversion_rate == pytest.approx(10.0)
        assert score.cpc_score == pytest.approx(2.0)
        assert score.score == pytest.approx(6.4)

    def test_groups_and_sums_by_ad_name(self):
        rows = [
            _row("Ad A", 600, 30, 15, 3),
            _row("Ad A", 400, 20, 10, 2),
            _row("Ad B", 1000, 10, 20, 0),
        ]
        scores = calculate_performance_scores(rows)

        assert set(scores) == {"Ad A", "Ad B"}
        assert scores["Ad A"].total_impressions == 1000
        assert scores["Ad A"].total_clicks == 50
        assert scores["Ad A"].total_spend == pytest.approx(25.0)
        assert scores["Ad A"].total_conversions == 5
        assert scores["Ad A"].score == pytest.approx(6.4)

    def test_zero_impressions_and_clicks_give_zero(self):
        scores = calculate_performance_scores([_row("Ad A", 0, 0, 10, 0)])

        score = scores["Ad A"]
        assert score.avg_ctr == 0
        assert score.avg_cpc == 0
        assert score.conversion_rate == 0
        assert score.cpc_score == 0
        assert score.score == 0

    def test_zero_spend_with_clicks_has_no_cpc_score(self):
        scores = calculate_performance_scores([_row("Ad A", 100, 10, 0, 1)])

        score = scores["Ad A"]
        assert score.avg_cpc == 0
        assert score.cpc_score == 0
        assert score.score == pytest.approx(0.4 * 10 + 0.4 * 10)

    def test_order_independent(self):
        rng = random.Random(7)
        rows = [
            _row(rng.choice(["Ad A", "Ad B", "Ad C"]), rng.randint(100, 5000),
                 rng.randint(0, 100), rng.randint(1, 300), rng.randint(0, 10))
            for _ in range(30)
        ]
        expected = {name: s.score for name, s in calculate_performance_scores(rows).items()}

        for _ in range(5):
            shuffled = rows[:]
            rng.shuffle(shuffled)
            actual = {name: s.score for name, s in calculate_performance_scores(shuffled).items()}
            assert actual.keys() == expected.keys()
            for name in expected:
                assert actual[name] == pytest.approx(expected[name])

    def test_empty_input(self):
        assert calculate_performance_scores([]) == {}

    def test_accepts_orm_rows(self, make_record):
        record = make_record(ad_name="Teal Shirt Ad A")
        scores = calculate_performance_scores([record])
        assert scores["Teal Shirt Ad A"].score == pytest.approx(6.4)


class TestRanking:

    def test_best_and_worst(self):
        scores = calculate_performance_scores([
            _row("Strong", 1000, 50, 25, 5),
            _row("Weak", 1000, 5, 50, 0),
        ])
        assert best_performer(scores)[0] == "Strong"
        assert worst_performer(scores)[0] == "Weak"

    def test_ties_ordered_by_name(self):
        scores = calculate_performance_scores([
            _row("B", 1000, 50, 25, 5),
            _row("A", 1000, 50, 25, 5),
        ])
        assert [name for name, _ in rank_performers(scores)] == ["A", "B"]

    def test_empty_scores(self):
        assert best_performer({}) is None
        assert worst_performer({}) is None
