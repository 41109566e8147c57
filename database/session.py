# database/session.py

import uuid
from datetime import datetime
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)
from sqlalchemy.orm import declarative_base

from config import Settings


Base = declarative_base()

# --- SQLAlchemy Models ---

class DocumentEntity(Base):
    __tablename__ = "documents"
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    filename = Column(String, nullable=False, index=True)  # The original filename
    stored_name = Column(String, nullable=False)  # Name on disk
    url = Column(String, nullable=False)
    text = Column(Text, nullable=False, default="")
    uploaded_at = Column(DateTime, default=datetime.utcnow, index=True)

class ChatTurnEntity(Base):
    __tablename__ = "chat_turns"
    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String, nullable=True, index=True)
    user_message = Column(Text, nullable=False)
    assistant_message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)


# ============= Engine / Session Factory =============

def create_engine(settings: Settings) -> AsyncEngine:
    """Build the async engine from settings."""
    options = {"echo": False, "pool_pre_ping": True}
    if not settings.DATABASE_URL.startswith("sqlite"):
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )
    return create_async_engine(settings.DATABASE_URL, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_models(engine: AsyncEngine) -> None:
    """Create tables if they don't exist"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ============= Dependencies =============

async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Provide database session for FastAPI dependency injection"""
    session_factory: async_sessionmaker = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
