# infrastructure/repositories.py
"""Database repository implementations"""
import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.interfaces import IChatRepository, IDocumentRepository
from core.domain import ChatTurn, Document, PersistenceError
from database.session import ChatTurnEntity, DocumentEntity
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

class SQLDocumentRepository(IDocumentRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, db_doc: Optional[DocumentEntity]) -> Optional[Document]:
        """Converts an SQLAlchemy entity to a domain model."""
        if db_doc is None:
            return None
        return Document(
            id=db_doc.id, # type: ignore
            filename=db_doc.filename, # type: ignore
            stored_name=db_doc.stored_name, # type: ignore
            url=db_doc.url, # type: ignore
            text=db_doc.text or "", # type: ignore
            uploaded_at=db_doc.uploaded_at, # type: ignore
        )

    async def find_recent(self, limit: int) -> List[Document]:
        result = await self.session.execute(
            select(DocumentEntity)
            .order_by(DocumentEntity.uploaded_at.desc())
            .limit(limit)
        )
        docs = [self._to_domain(doc) for doc in result.scalars().all()]
        return [d for d in docs if d is not None]

    async def insert(self, document: Document) -> Document:
        db_doc = DocumentEntity(
            id=document.id,
            filename=document.filename,
            stored_name=document.stored_name,
            url=document.url,
            text=document.text or "",
        )
        if document.uploaded_at is not None:
            db_doc.uploaded_at = document.uploaded_at
        self.session.add(db_doc)
        await self.session.commit()
        await self.session.refresh(db_doc)
        logger.info(f"Created document {document.id} ({document.filename}) in database")

        result = self._to_domain(db_doc)
        assert result is not None, "Created document should never be None"
        return result

    async def find_by_name(self, filename: str) -> Optional[Document]:
        result = await self.session.execute(
            select(DocumentEntity).where(DocumentEntity.filename == filename).limit(1)
        )
        return self._to_domain(result.scalar_one_or_none())


class SQLChatRepository(IChatRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, entity: ChatTurnEntity) -> ChatTurn:
        return ChatTurn(
            id=entity.id, # type: ignore
            session_id=entity.session_id, # type: ignore
            user_message=entity.user_message, # type: ignore
            assistant_message=entity.assistant_message, # type: ignore
            created_at=entity.created_at, # type: ignore
        )

    async def insert(self, turn: ChatTurn) -> int:
        entity = ChatTurnEntity(
            session_id=turn.session_id,
            user_message=turn.user_message,
            assistant_message=turn.assistant_message,
        )
        if turn.created_at is not None:
            entity.created_at = turn.created_at
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity.id # type: ignore

    async def update(self, turn_id: int, assistant_message: str) -> None:
        entity = await self.session.get(ChatTurnEntity, turn_id)
        if entity is None:
            raise PersistenceError(f"Chat turn {turn_id} not found")
        entity.assistant_message = assistant_message # type: ignore
        await self.session.commit()

    async def find_by_session(self, session_id: str, limit: int = 200) -> List[ChatTurn]:
        """Ascending by creation time; id breaks ties between equal timestamps."""
        result = await self.session.execute(
            select(ChatTurnEntity)
            .where(ChatTurnEntity.session_id == session_id)
            .order_by(ChatTurnEntity.created_at.asc(), ChatTurnEntity.id.asc())
            .limit(limit)
        )
        return [self._to_domain(turn) for turn in result.scalars().all()]
