# Core module - config, database, logging
from adcreative.core.config import settings
from adcreative.core.database import Base, SessionLocal
