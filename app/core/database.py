from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from app.core.config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

# Sessions keep loaded rows usable after commit (no lazy refresh on a closed connection)
AsyncSessionLocal = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


# One session per request; the context manager closes it on every exit path
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


# Every table declared on Base is picked up by metadata.create_all and alembic
class Base(DeclarativeBase):
    pass
