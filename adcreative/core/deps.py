"""
Dependency injection for FastAPI
"""
import random
from functools import lru_cache
from typing import Generator, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from adcreative.core.config import settings
from adcreative.core.database import SessionLocal
from adcreative.services.meta_insights import MetaInsightsClient, PerformanceSource
from adcreative.services.optimizer import AdCreativeOptimizer
from adcreative.services.text_generator import ChatCompletionsTextGenerator, TextGenerator


def get_db() -> Generator:
    """Get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache()
def get_text_generator() -> TextGenerator:
    """Shared text generator (one pooled HTTP client per process)"""
    return ChatCompletionsTextGenerator()


@lru_cache()
def get_performance_source() -> Optional[PerformanceSource]:
    """Meta insights client, or None when no credentials are configured"""
    if not settings.META_ACCESS_TOKEN:
        return None
    return MetaInsightsClient()


def get_rng() -> random.Random:
    return random.Random()


def get_optimizer(
    db: Session = Depends(get_db),
    text_generator: TextGenerator = Depends(get_text_generator),
    performance_source: Optional[PerformanceSource] = Depends(get_performance_source),
    rng: random.Random = Depends(get_rng),
) -> AdCreativeOptimizer:
    return AdCreativeOptimizer(
        db,
        text_generator=text_generator,
        performance_source=performance_source,
        rng=rng,
    )


def close_clients():
    """Close cached HTTP clients (application shutdown)"""
    if get_text_generator.cache_info().currsize:
        generator = get_text_generator()
        if hasattr(generator, "close"):
            generator.close()
    if get_performance_source.cache_info().currsize:
        source = get_performance_source()
        if source is not None:
            source.close()
