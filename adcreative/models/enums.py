"""
Enums for database models
"""
import enum


class GenerationMode(str, enum.Enum):
    """How a creative variation was produced"""
    EXPLORATION = "exploration"      # Try something new
    OPTIMIZATION = "optimization"    # Build on the best performer


class CreativeStatus(str, enum.Enum):
    """Creative status; publishing flows may promote a DRAFT"""
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    ARCHIVED = "ARCHIVED"


class ABTestStatus(str, enum.Enum):
    """A/B test lifecycle: ACTIVE -> COMPLETED | CANCELLED"""
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PerformanceSourceType(str, enum.Enum):
    """Where a performance record came from"""
    META = "meta"
    SIMULATED = "simulated"


class BanditAction(str, enum.Enum):
    """Outcome of an explore/exploit decision"""
    EXPLORE = "explore"
    EXPLOIT = "exploit"
