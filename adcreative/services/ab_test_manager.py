"""
A/B test setup and lifecycle

    ACTIVE --(end_date passed / complete)--> COMPLETED
    ACTIVE --(cancel)----------------------> CANCELLED
Terminal states accept no further transitions.
"""
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from adcreative.core.time import as_utc_naive, utcnow
from adcreative.models import ABTest, ABTestStatus, GenerationMode
from adcreative.services.store import Store
from adcreative.services.variation_generator import ProductContext, VariationGenerator

logger = logging.getLogger(__name__)

DEFAULT_TEST_NAME = "Ad Creative A/B Test"
DEFAULT_DURATION_DAYS = 7
DEFAULT_BUDGET = 100
DEFAULT_METRICS = ["ctr", "cpc", "conversions"]


class ABTestNotFoundError(Exception):
    pass


class ABTestStateError(Exception):
    """Transition not allowed from the test's current status"""


class ABTestManager:
    def __init__(self, store: Store, variation_generator: VariationGenerator):
        self.store = store
        self.variation_generator = variation_generator

    def setup_ab_test(
        self,
        ad_set_id: str,
        test_name: str = DEFAULT_TEST_NAME,
        duration: int = DEFAULT_DURATION_DAYS,
        budget=DEFAULT_BUDGET,
        metrics: Optional[List[str]] = None,
        product: Optional[ProductContext] = None,
    ) -> ABTest:
        if duration < 1:
            raise ValueError("duration must be at least 1 day")

        # Two independent exploration draws
        variation_a = self.variation_generator.generate(ad_set_id, GenerationMode.EXPLORATION, product=product)
        variation_b = self.variation_generator.generate(ad_set_id, GenerationMode.EXPLORATION, product=product)

        start_date = utcnow()
        ab_test = self.store.create_ab_test(
            ad_set_id=ad_set_id,
            test_name=test_name,
            variation_a_id=variation_a.creative.id,
            variation_b_id=variation_b.creative.id,
            duration=duration,
            budget=Decimal(str(budget)),
            metrics=list(metrics) if metrics is not None else list(DEFAULT_METRICS),
            status=ABTestStatus.ACTIVE,
            start_date=start_date,
            end_date=start_date + timedelta(days=duration),
        )
        logger.info(f"[ABTestManager] A/B test created: {ab_test.id}")
        return ab_test

    def get_test(self, test_id: int) -> ABTest:
        ab_test = self.store.get_ab_test(test_id)
        if ab_test is None:
            raise ABTestNotFoundError(f"A/B test {test_id} not found")
        return ab_test

    def list_tests(self, ad_set_id: str, now: Optional[datetime] = None) -> List[ABTest]:
        tests = self.store.find_ab_tests(ad_set_id)
        now = now or utcnow()
        for ab_test in tests:
            self.refresh_status(ab_test, now)
        return tests

    # ========================================
    # State transitions
    # ========================================

    def _transition(self, ab_test: ABTest, status: ABTestStatus, at: datetime) -> ABTest:
        if ab_test.is_terminal:
            raise ABTestStateError(
                f"A/B test {ab_test.id} is already {ab_test.status.value}"
            )
        ab_test.status = status
        ab_test.completed_at = at
        logger.info(f"[ABTestManager] A/B test {ab_test.id} -> {status.value}")
        return self.store.save(ab_test)

    def refresh_status(self, ab_test: ABTest, now: Optional[datetime] = None) -> ABTest:
        """Complete an ACTIVE test once its end date has passed"""
        now = as_utc_naive(now or utcnow())
        if ab_test.status == ABTestStatus.ACTIVE and now > as_utc_naive(ab_test.end_date):
            return self._transition(ab_test, ABTestStatus.COMPLETED, now)
        return ab_test

    def complete_test(self, test_id: int, now: Optional[datetime] = None) -> ABTest:
        return self._transition(self.get_test(test_id), ABTestStatus.COMPLETED, as_utc_naive(now or utcnow()))

    def cancel_test(self, test_id: int, now: Optional[datetime] = None) -> ABTest:
        return self._transition(self.get_test(test_id), ABTestStatus.CANCELLED, as_utc_naive(now or utcnow()))

    def expire_due_tests(self, now: Optional[datetime] = None) -> List[ABTest]:
        """Complete every ACTIVE test past its end date"""
        now = as_utc_naive(now or utcnow())
        due = self.store.find_active_ab_tests(ending_before=now)
        return [self._transition(ab_test, ABTestStatus.COMPLETED, now) for ab_test in due]
