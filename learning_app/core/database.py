from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker

from learning_app.core.config import settings


def build_database_url(url: str) -> str:
    """Rewrite sync driver URLs to their async equivalents."""
    url = url.replace("postgresql://", "postgresql+asyncpg://")
    url = url.replace("postgresql+psycopg://", "postgresql+asyncpg://")
    if url.startswith("sqlite://"):
        url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


database_url = build_database_url(settings.DATABASE_URL)

engine_kwargs = {
    "pool_pre_ping": True,
    "echo": settings.ENVIRONMENT == "development" and settings.LOG_LEVEL == "DEBUG",
}
if database_url.startswith("postgresql+asyncpg://"):
    # Disable prepared statement caching (required behind pgbouncer)
    engine_kwargs["connect_args"] = {
        "statement_cache_size": 0,
        "prepared_statement_cache_size": 0,
    }

# Create async SQLAlchemy engine
engine = create_async_engine(database_url, **engine_kwargs)

# Create async SessionLocal class
SessionLocal = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

# Create Base class for models
Base = declarative_base()


# Dependency to get async DB session
async def get_db():
    """
    Dependency function to get async database session.
    Yields a database session and closes it after use.
    """
    async with SessionLocal() as session:
        yield session
