"""Database setup script."""

from adintel.database import engine, Base
from adintel.config import settings
import adintel.models  # noqa: F401  registers the tables

if __name__ == "__main__":
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Database setup complete!")
    print("\nConfiguration:")
    print(f"  Environment: {settings.environment}")
    print(f"  API Port: {settings.api_port}")
    print(f"  Database: {settings.database_url}")
    print(f"  Free tier analyses: {settings.free_tier_analysis_limit}")
