"""
Explore/exploit controller for ad creatives (epsilon-greedy bandit)

Each call re-derives its context from stored performance history:
    no history          -> explore (cold start)
    rng < exploration   -> explore: new creative, exploration mode
    otherwise           -> exploit: optimize the best composite score
"""
import logging
import random
from dataclasses import dataclass
from typing import Optional

from adcreative.core.config import settings
from adcreative.models import BanditAction, GenerationMode
from adcreative.services.scoring import calculate_performance_scores, best_performer
from adcreative.services.store import Store
from adcreative.services.variation_generator import (
    PerformanceContext, ProductContext, VariationGenerator, VariationResult,
)

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    action: BanditAction
    variation: VariationResult
    exploration_rate: float
    learning_rate: float

    @property
    def mode(self) -> GenerationMode:
        return self.variation.mode


def _check_rate(name: str, value: float) -> float:
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be between 0 and 1, got {value}")
    return value


class BanditDecisionEngine:
    """
    Decides per ad set whether to explore or exploit.

    rng: any object with a random() -> float in [0, 1); inject a seeded
    random.Random for reproducible decisions.
    """

    def __init__(
        self,
        store: Store,
        variation_generator: VariationGenerator,
        rng: Optional[random.Random] = None,
        history_limit: Optional[int] = None,
    ):
        self.store = store
        self.variation_generator = variation_generator
        self.rng = rng or random.Random()
        self.history_limit = history_limit or settings.OPTIMIZER_HISTORY_LIMIT

    def optimize(
        self,
        ad_set_id: str,
        exploration_rate: Optional[float] = None,
        learning_rate: Optional[float] = None,
        product: Optional[ProductContext] = None,
    ) -> OptimizationResult:
        if exploration_rate is None:
            exploration_rate = settings.DEFAULT_EXPLORATION_RATE
        if learning_rate is None:
            learning_rate = settings.DEFAULT_LEARNING_RATE
        exploration_rate = _check_rate("exploration_rate", exploration_rate)
        # Reserved: accepted and reported, not used by scoring or selection
        learning_rate = _check_rate("learning_rate", learning_rate)

        records = self.store.find_performance_for_ad_set(ad_set_id, limit=self.history_limit)

        if not records:
            logger.info(f"[Bandit] No performance data for {ad_set_id}. Using exploration mode.")
            return self._explore(ad_set_id, exploration_rate, learning_rate, product)

        scores = calculate_performance_scores(records)

        if self.rng.random() < exploration_rate:
            logger.info(f"[Bandit] Exploration mode for {ad_set_id}: generating new ad variation")
            return self._explore(ad_set_id, exploration_rate, learning_rate, product)

        ad_name, score = best_performer(scores)
        logger.info(
            f"[Bandit] Exploitation mode for {ad_set_id}: optimizing '{ad_name}' (score {score.score:.2f})"
        )
        variation = self.variation_generator.generate(
            ad_set_id,
            GenerationMode.OPTIMIZATION,
            context=PerformanceContext(ad_name=ad_name, score=score),
            product=product,
        )
        return OptimizationResult(
            action=BanditAction.EXPLOIT,
            variation=variation,
            exploration_rate=exploration_rate,
            learning_rate=learning_rate,
        )

    def _explore(self, ad_set_id, exploration_rate, learning_rate, product) -> OptimizationResult:
        variation = self.variation_generator.generate(
            ad_set_id, GenerationMode.EXPLORATION, product=product
        )
        return OptimizationResult(
            action=BanditAction.EXPLORE,
            variation=variation,
            exploration_rate=exploration_rate,
            learning_rate=learning_rate,
        )
