"""
AdCreativeOptimizer - wires the optimizer components around one Store
"""
import random
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from adcreative.core.time import utcnow
from adcreative.models import AdCreative, AdPerformanceRecord, GenerationMode
from adcreative.services.ab_test_manager import ABTestManager
from adcreative.services.bandit import BanditDecisionEngine, OptimizationResult
from adcreative.services.meta_insights import PerformanceSource
from adcreative.services.performance_ingestor import PerformanceIngestor
from adcreative.services.recommendations import OptimizationRecommendation, RecommendationEngine
from adcreative.services.response_parser import ResponseParser
from adcreative.services.scoring import calculate_performance_scores
from adcreative.services.store import Store
from adcreative.services.text_generator import TextGenerator
from adcreative.services.variation_generator import ProductContext, VariationGenerator, VariationResult


class AdCreativeOptimizer:
    """Entry point used by the API and scheduled jobs"""

    def __init__(
        self,
        db: Session,
        text_generator: TextGenerator,
        performance_source: Optional[PerformanceSource] = None,
        rng: Optional[random.Random] = None,
        parser: Optional[ResponseParser] = None,
        simulated_source: Optional[PerformanceSource] = None,
    ):
        self.store = Store(db)
        self.variations = VariationGenerator(self.store, text_generator, parser=parser)
        self.bandit = BanditDecisionEngine(self.store, self.variations, rng=rng)
        self.ab_tests = ABTestManager(self.store, self.variations)
        self.recommender = RecommendationEngine(self.store)
        self.ingestor = PerformanceIngestor(
            self.store, source=performance_source, simulated_source=simulated_source
        )

    def ingest_performance(self, ad_account_id: str, date_range: str = "last_30d") -> List[AdPerformanceRecord]:
        return self.ingestor.ingest_performance_data(ad_account_id, date_range)

    def optimize(
        self,
        ad_set_id: str,
        exploration_rate: Optional[float] = None,
        learning_rate: Optional[float] = None,
        product: Optional[ProductContext] = None,
    ) -> OptimizationResult:
        return self.bandit.optimize(ad_set_id, exploration_rate, learning_rate, product=product)

    def generate_variation(
        self,
        ad_set_id: str,
        mode: GenerationMode = GenerationMode.EXPLORATION,
        product: Optional[ProductContext] = None,
    ) -> VariationResult:
        return self.variations.generate(ad_set_id, GenerationMode(mode), product=product)

    def setup_ab_test(self, ad_set_id: str, **test_config):
        return self.ab_tests.setup_ab_test(ad_set_id, **test_config)

    def get_recommendations(self, ad_set_id: str) -> OptimizationRecommendation:
        return self.recommender.get_optimization_recommendations(ad_set_id)

    def get_performance(self, ad_set_id: str, days: int = 30) -> List[AdPerformanceRecord]:
        since = utcnow() - timedelta(days=days)
        return self.store.find_performance_for_ad_set(ad_set_id, since=since)

    def get_performance_summary(self, ad_set_id: str, days: int = 30) -> List[dict]:
        """Grouped totals per ad name with composite scores"""
        since = utcnow() - timedelta(days=days)
        groups = self.store.group_performance_by_ad_name(ad_set_id, since=since)
        scores = calculate_performance_scores(groups)
        return [
            {**group, **scores[group["ad_name"]].to_dict()}
            for group in groups
        ]

    def get_creatives(self, ad_set_id: str) -> List[AdCreative]:
        return self.store.find_creatives(ad_set_id)

    def get_ab_tests(self, ad_set_id: str):
        return self.ab_tests.list_tests(ad_set_id)
