"""
Declarative base for optimizer tables

Audit columns use database server time. Domain timestamps (recorded_at,
generated_at, start/end dates) are naive UTC set by the application.
"""
from sqlalchemy import Column, DateTime, func

from adcreative.core.database import Base


class TimestampMixin:
    """created_at / updated_at maintained by the database"""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class OptimizerModel(Base, TimestampMixin):
    __abstract__ = True
