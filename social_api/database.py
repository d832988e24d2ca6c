from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from social_api.config import settings
from social_api.middleware import install_query_counter

# One engine (and connection pool) per process. Tests swap the
# dependencies below rather than this object.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

install_query_counter(engine)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Hand the shared session factory to routes that own their unit of work.

    The toggle service opens, commits and closes its own transaction, so
    it needs the factory rather than a request-scoped session.
    """
    return async_session


async def get_db():
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
