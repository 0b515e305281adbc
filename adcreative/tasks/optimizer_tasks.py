"""
Scheduled optimizer jobs
- Performance ingestion for configured ad accounts
- Completion of A/B tests past their end date
"""
import logging
from typing import Dict, List, Optional

from adcreative.core.config import settings
from adcreative.core.database import SessionLocal
from adcreative.core.deps import get_performance_source, get_text_generator
from adcreative.services.optimizer import AdCreativeOptimizer

logger = logging.getLogger(__name__)


def ingest_performance_for_accounts(
    ad_account_ids: Optional[List[str]] = None,
    date_range: Optional[str] = None,
) -> Dict[str, int]:
    """Ingest performance for each account; one failing account does not stop the rest"""
    ad_account_ids = ad_account_ids if ad_account_ids is not None else settings.INGEST_AD_ACCOUNT_IDS
    date_range = date_range or settings.INGEST_DATE_RANGE

    results: Dict[str, int] = {}
    db = SessionLocal()
    try:
        optimizer = AdCreativeOptimizer(
            db,
            text_generator=get_text_generator(),
            performance_source=get_performance_source(),
        )
        for ad_account_id in ad_account_ids:
            try:
                records = optimizer.ingest_performance(ad_account_id, date_range)
                results[ad_account_id] = len(records)
            except Exception:
                db.rollback()
                logger.exception(f"[ingest_performance_for_accounts] Failed for {ad_account_id}")
                continue
    finally:
        db.close()

    logger.info(f"[ingest_performance_for_accounts] Ingested {sum(results.values())} records for {len(results)} accounts")
    return results


def complete_expired_ab_tests() -> int:
    """Complete every ACTIVE A/B test whose end date has passed"""
    db = SessionLocal()
    try:
        optimizer = AdCreativeOptimizer(db, text_generator=get_text_generator())
        completed = optimizer.ab_tests.expire_due_tests()
    finally:
        db.close()

    if completed:
        logger.info(f"[complete_expired_ab_tests] Completed {len(completed)} A/B tests")
    return len(completed)
