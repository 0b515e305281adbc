"""
Tests for A/B test setup and lifecycle
"""
from datetime import datetime, timedelta, timezone

import pytest

from adcreative.core.time import utcnow
from adcreative.models import ABTestStatus, AdCreative, GenerationMode
from adcreative.services.ab_test_manager import (
    ABTestManager,
    ABTestNotFoundError,
    ABTestStateError,
)
from adcreative.services.store import Store
from adcreative.services.text_generator import TextGenerationError
from adcreative.services.variation_generator import VariationGenerator

from tests.conftest import FakeTextGenerator


@pytest.fixture
def manager(db_session, text_generator):
    store = Store(db_session)
    return ABTestManager(store, VariationGenerator(store, text_generator))


class TestSetup:

    def test_duration_sets_end_date_exactly(self, manager):
        ab_test = manager.setup_ab_test("adset-1", duration=7)
        assert ab_test.end_date - ab_test.start_date == timedelta(days=7)

    def test_creates_two_exploration_variations(self, manager, text_generator, db_session):
        ab_test = manager.setup_ab_test("adset-1")

        assert ab_test.variation_a_id != ab_test.variation_b_id
        assert ab_test.variation_a.mode == GenerationMode.EXPLORATION
        assert ab_test.variation_b.mode == GenerationMode.EXPLORATION
        assert len(text_generator.calls) == 2
        assert db_session.query(AdCreative).filter(AdCreative.ad_set_id == "adset-1").count() == 2

    def test_defaults(self, manager):
        ab_test = manager.setup_ab_test("adset-1")

        assert ab_test.test_name == "Ad Creative A/B Test"
        assert ab_test.duration == 7
        assert float(ab_test.budget) == 100
        assert ab_test.metrics == ["ctr", "cpc", "conversions"]
        assert ab_test.status == ABTestStatus.ACTIVE
        assert ab_test.completed_at is None

    def test_custom_config(self, manager):
        ab_test = manager.setup_ab_test(
            "adset-1", test_name="Spring test", duration=14, budget=250.5, metrics=["ctr"]
        )

        assert ab_test.test_name == "Spring test"
        assert ab_test.end_date - ab_test.start_date == timedelta(days=14)
        assert float(ab_test.budget) == pytest.approx(250.5)
        assert ab_test.metrics == ["ctr"]

    def test_rejects_non_positive_duration(self, manager):
        with pytest.raises(ValueError):
            manager.setup_ab_test("adset-1", duration=0)

    def test_generation_failure_propagates(self, db_session):
        store = Store(db_session)
        manager = ABTestManager(store, VariationGenerator(store, FakeTextGenerator(fail=True)))

        with pytest.raises(TextGenerationError):
            manager.setup_ab_test("adset-1")


class TestLifecycle:

    def test_refresh_completes_after_end_date(self, manager):
        ab_test = manager.setup_ab_test("adset-1", duration=7)

        manager.refresh_status(ab_test, now=ab_test.end_date)
        assert ab_test.status == ABTestStatus.ACTIVE

        later = ab_test.end_date + timedelta(seconds=1)
        manager.refresh_status(ab_test, now=later)
        assert ab_test.status == ABTestStatus.COMPLETED
        assert ab_test.completed_at == later

    def test_refresh_handles_aware_end_date(self, manager):
        # PostgreSQL drivers may hand back timezone-aware values
        ab_test = manager.setup_ab_test("adset-1", duration=1)
        ab_test.end_date = (utcnow() - timedelta(hours=1)).replace(tzinfo=timezone.utc)

        manager.refresh_status(ab_test)

        assert ab_test.status == ABTestStatus.COMPLETED
        assert ab_test.completed_at.tzinfo is None

    def test_aware_now_is_stored_as_naive_utc(self, manager):
        ab_test = manager.setup_ab_test("adset-1")
        bangkok = timezone(timedelta(hours=7))
        now = datetime(2024, 5, 1, 19, 0, tzinfo=bangkok)

        cancelled = manager.cancel_test(ab_test.id, now=now)

        assert cancelled.completed_at == datetime(2024, 5, 1, 12, 0)

    def test_cancel(self, manager):
        ab_test = manager.setup_ab_test("adset-1")

        cancelled = manager.cancel_test(ab_test.id)

        assert cancelled.status == ABTestStatus.CANCELLED
        assert cancelled.completed_at is not None

    def test_complete(self, manager):
        ab_test = manager.setup_ab_test("adset-1")
        assert manager.complete_test(ab_test.id).status == ABTestStatus.COMPLETED

    def test_terminal_states_reject_transitions(self, manager):
        ab_test = manager.setup_ab_test("adset-1")
        manager.cancel_test(ab_test.id)

        with pytest.raises(ABTestStateError):
            manager.complete_test(ab_test.id)
        with pytest.raises(ABTestStateError):
            manager.cancel_test(ab_test.id)

    def test_cancelled_test_is_not_completed_by_refresh(self, manager):
        ab_test = manager.setup_ab_test("adset-1")
        manager.cancel_test(ab_test.id)

        manager.refresh_status(ab_test, now=ab_test.end_date + timedelta(days=1))
        assert ab_test.status == ABTestStatus.CANCELLED

    def test_missing_test(self, manager):
        with pytest.raises(ABTestNotFoundError):
            manager.cancel_test(999)

    def test_expire_due_tests(self, manager):
        short = manager.setup_ab_test("adset-1", duration=1)
        long = manager.setup_ab_test("adset-2", duration=30)

        completed = manager.expire_due_tests(now=utcnow() + timedelta(days=2))

        assert [t.id for t in completed] == [short.id]
        assert short.status == ABTestStatus.COMPLETED
        assert long.status == ABTestStatus.ACTIVE

    def test_list_tests_refreshes_status(self, manager):
        ab_test = manager.setup_ab_test("adset-1", duration=1)
        manager.setup_ab_test("adset-other")

        tests = manager.list_tests("adset-1", now=utcnow() + timedelta(days=3))

        assert [t.id for t in tests] == [ab_test.id]
        assert tests[0].status == ABTestStatus.COMPLETED
        assert tests[0].variation_a is not None
        assert tests[0].variation_b is not None
