"""
Shared fixtures: in-memory SQLite session, fake collaborators, record factory.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker

from adcreative.core.database import Base, build_engine
from adcreative.core.time import utcnow
from adcreative.models import AdPerformanceRecord, PerformanceSourceType
from adcreative.services.text_generator import GeneratedText, TextGenerationError, TextGenerator


SAMPLE_GENERATED_TEXT = """Headline: Feel the Teal
Ad Copy: Soft cotton tees for every day.
Built to last.
Call-to-Action: Shop Now
Visual Direction: Bright studio shot
Target Audience: Women 18-35
Hypothesis: Color-first messaging lifts CTR"""


class FakeTextGenerator(TextGenerator):
    """Returns canned text and remembers every call"""

    def __init__(self, text: str = SAMPLE_GENERATED_TEXT, fail: bool = False):
        self.text = text
        self.fail = fail
        self.calls = []

    def generate(self, prompt, model=None, max_tokens=1000, temperature=0.7, system_prompt=None):
        self.calls.append({
            "prompt": prompt,
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if self.fail:
            raise TextGenerationError("All text generation providers failed")
        return GeneratedText(text=self.text, provider="fake", model=model or "fake-model")


class FixedRandom:
    """random.Random stand-in that always draws the same value"""

    def __init__(self, value: float):
        self.value = value
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        return self.value


@pytest.fixture
def db_session():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def text_generator():
    return FakeTextGenerator()


@pytest.fixture
def make_record(db_session):
    """Insert an AdPerformanceRecord with derived rates"""

    def _make(
        ad_name="Teal Shirt Ad A",
        impressions=1000,
        clicks=50,
        spend="25.00",
        conversions=5,
        ad_set_id=None,
        days_ago=0,
        ctr=None,
        cpc=None,
    ):
        spend = Decimal(str(spend))
        record = AdPerformanceRecord(
            ad_name=ad_name,
            ad_set_id=ad_set_id,
            impressions=impressions,
            clicks=clicks,
            spend=spend,
            conversions=conversions,
            ctr=Decimal(str(ctr)) if ctr is not None else (
                Decimal(clicks) / Decimal(impressions) * 100 if impressions else Decimal("0")
            ),
            cpc=Decimal(str(cpc)) if cpc is not None else (
                spend / Decimal(clicks) if clicks else Decimal("0")
            ),
            cpm=spend / Decimal(impressions) * 1000 if impressions else Decimal("0"),
            source=PerformanceSourceType.SIMULATED,
            performance_data={"ad_name": ad_name},
            recorded_at=utcnow() - timedelta(days=days_ago),
        )
        db_session.add(record)
        db_session.commit()
        return record

    return _make
