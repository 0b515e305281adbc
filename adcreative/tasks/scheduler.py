"""
Background task scheduler using APScheduler
"""
import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from adcreative.core.config import settings

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler: Optional[BackgroundScheduler] = None


def start_scheduler():
    """Initialize and start the scheduler"""
    global scheduler
    
    if scheduler is not None:
        return
    
    scheduler = BackgroundScheduler()
    
    # ============================================
    # Performance ingestion
    # ============================================
    if settings.INGEST_AD_ACCOUNT_IDS:
        scheduler.add_job(
            func=ingest_performance_job,
            trigger=IntervalTrigger(minutes=settings.INGEST_INTERVAL_MINUTES),
            id="ingest_performance",
            name="Ingest ad performance for configured accounts",
            replace_existing=True,
        )
    
    # ============================================
    # A/B test lifecycle
    # ============================================
    scheduler.add_job(
        func=complete_ab_tests_job,
        trigger=IntervalTrigger(minutes=settings.AB_TEST_SWEEP_INTERVAL_MINUTES),
        id="complete_ab_tests",
        name="Complete A/B tests past their end date",
        replace_existing=True,
    )
    
    scheduler.start()
    logger.info(f"Scheduler started with {len(scheduler.get_jobs())} jobs")


def stop_scheduler():
    """Stop the scheduler"""
    global scheduler
    
    if scheduler is not None:
        scheduler.shutdown(wait=False)
        scheduler = None
        logger.info("Scheduler stopped")


# ============================================
# Job Functions
# ============================================

def ingest_performance_job():
    """Job: ingest performance for configured ad accounts"""
    from adcreative.tasks.optimizer_tasks import ingest_performance_for_accounts
    
    try:
        ingest_performance_for_accounts()
    except Exception:
        logger.exception("Error in ingest_performance_job")


def complete_ab_tests_job():
    """Job: complete expired A/B tests"""
    from adcreative.tasks.optimizer_tasks import complete_expired_ab_tests
    
    try:
        complete_expired_ab_tests()
    except Exception:
        logger.exception("Error in complete_ab_tests_job")
