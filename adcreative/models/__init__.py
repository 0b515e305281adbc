"""
Database models for the Ad Creative Optimizer
"""
from adcreative.models.base import Base, OptimizerModel, TimestampMixin
from adcreative.models.enums import (
    GenerationMode, CreativeStatus, ABTestStatus, PerformanceSourceType, BanditAction
)

from adcreative.models.performance import AdPerformanceRecord
from adcreative.models.creative import AdCreative
from adcreative.models.ab_test import ABTest


__all__ = [
    # Base
    "Base", "OptimizerModel", "TimestampMixin",
    
    # Enums
    "GenerationMode", "CreativeStatus", "ABTestStatus", "PerformanceSourceType",
    "BanditAction",
    
    # Performance
    "AdPerformanceRecord",
    
    # Creatives
    "AdCreative",
    
    # A/B tests
    "ABTest",
]
