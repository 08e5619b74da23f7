"""
Database engine and session factory
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import MetaData
from typing import Any, Dict
import os
import ssl
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

from charmemo.core.config import Settings


class Base(DeclarativeBase):
    """SQLAlchemy Base class"""
    metadata = MetaData(
        naming_convention={
            "ix": "ix_%(column_0_label)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s"
        }
    )


def to_async_url(database_url: str) -> str:
    """Map a plain database URL onto its async driver"""
    if database_url.startswith("sqlite:"):
        return database_url.replace("sqlite:", "sqlite+aiosqlite:", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    return database_url


def _split_ssl_params(url: str) -> tuple[str, Dict[str, Any]]:
    """Strip libpq sslmode/ssl query params, which asyncpg rejects, into connect_args"""
    parts = urlsplit(url)
    query_items = parse_qsl(parts.query, keep_blank_values=True)
    sslmode = next((v for (k, v) in query_items if k.lower() == "sslmode"), None)
    ssl_param = next((v for (k, v) in query_items if k.lower() == "ssl"), None)
    query_filtered = [(k, v) for (k, v) in query_items if k.lower() not in ("sslmode", "ssl")]
    engine_url = urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query_filtered), parts.fragment))

    ssl_required = False
    ssl_verify = False
    if ssl_param is not None:
        v = str(ssl_param).strip().lower()
        if v in ("1", "true", "yes", "on", "require"):
            ssl_required = True
    if sslmode is not None:
        v = str(sslmode).strip().lower()
        # libpq semantics: require/prefer encrypt without verifying, verify-* verify
        if v in ("require", "prefer"):
            ssl_required = True
            ssl_verify = False
        elif v in ("verify-ca", "verify-full"):
            ssl_required = True
            ssl_verify = True
        elif v in ("disable", "allow"):
            ssl_required = False

    connect_args: Dict[str, Any] = {}
    if ssl_required:
        ctx = ssl.create_default_context()
        if not ssl_verify:
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = ctx
    return engine_url, connect_args


def ensure_sqlite_dir(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database"""
    path = url.split(":///", 1)[-1] if ":///" in url else ""
    if not path or path.startswith(":memory:"):
        return
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build the async engine for the configured DATABASE_URL"""
    url = to_async_url(settings.DATABASE_URL)
    if url.startswith("sqlite"):
        ensure_sqlite_dir(url)
        return create_async_engine(url, echo=settings.DEBUG, future=True)

    engine_url, connect_args = _split_ssl_params(url)
    return create_async_engine(
        engine_url,
        echo=settings.DEBUG,
        future=True,
        pool_pre_ping=True,
        pool_recycle=300,
        connect_args=connect_args,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory handed to the data service"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables (development and tests)"""
    # registers every table on Base.metadata
    import charmemo.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

