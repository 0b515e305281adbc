"""
Database initialization script
Creates the database (PostgreSQL) and all tables
"""
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine, text

from adcreative.core.config import settings
from adcreative.core.database import engine, Base
import adcreative.models  # noqa: F401  register models


def create_database():
    """Create the database if it doesn't exist"""
    if not settings.database_url.startswith("postgresql"):
        print("ℹ️ Not a PostgreSQL URL, skipping database creation")
        return

    postgres_url = f"postgresql://{settings.POSTGRES_USER}:{settings.POSTGRES_PWD}@{settings.POSTGRES_HOST}:{settings.POSTGRES_PORT}/postgres"
    temp_engine = create_engine(postgres_url, isolation_level="AUTOCOMMIT")

    with temp_engine.connect() as conn:
        result = conn.execute(
            text("SELECT 1 FROM pg_database WHERE datname = :name"),
            {"name": settings.POSTGRES_DB},
        )
        exists = result.fetchone() is not None

        if not exists:
            conn.execute(text(f'CREATE DATABASE "{settings.POSTGRES_DB}"'))
            print(f"✅ Created database: {settings.POSTGRES_DB}")
        else:
            print(f"ℹ️ Database already exists: {settings.POSTGRES_DB}")

    temp_engine.dispose()


def create_tables():
    """Create all tables"""
    print("Creating tables...")
    Base.metadata.create_all(bind=engine)
    print("✅ All tables created successfully")


def main():
    print("=" * 50)
    print(f"{settings.APP_NAME} - Database Initialization")
    print("=" * 50)

    try:
        print("\n📦 Step 1: Creating database...")
        create_database()

        print("\n📋 Step 2: Creating tables...")
        create_tables()

        print("\n" + "=" * 50)
        print("✅ Database initialization completed!")
        print("=" * 50)

    except Exception as e:
        print(f"\n❌ Initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
