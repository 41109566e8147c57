# api/schemas.py
from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List

from core.domain import ChatTurn, Document, DocumentRef


class ErrorResponse(BaseModel):
    error: str
    reply: Optional[str] = None

class DocumentItem(BaseModel):
    id: str
    filename: str
    stored_name: str
    url: str
    text: str = ""
    uploaded_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, doc: Document) -> "DocumentItem":
        return cls(
            id=doc.id,
            filename=doc.filename,
            stored_name=doc.stored_name,
            url=doc.url,
            text=doc.text,
            uploaded_at=doc.uploaded_at,
        )

class UploadResponse(BaseModel):
    ok: bool = True
    doc: DocumentItem

class DocumentsListResponse(BaseModel):
    ok: bool = True
    docs: List[DocumentItem]

class SourceDocument(BaseModel):
    filename: str
    url: str

    @classmethod
    def from_domain(cls, ref: DocumentRef) -> "SourceDocument":
        return cls(filename=ref.filename, url=ref.url)

class ChatResponse(BaseModel):
    ok: bool = True
    reply: str
    docs: List[SourceDocument]

class ChatTurnItem(BaseModel):
    id: int
    session_id: Optional[str] = None
    user_message: str
    assistant_message: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, turn: ChatTurn) -> "ChatTurnItem":
        return cls(
            id=turn.id,  # type: ignore[arg-type]
            session_id=turn.session_id,
            user_message=turn.user_message,
            assistant_message=turn.assistant_message,
            created_at=turn.created_at,
        )

class HistoryResponse(BaseModel):
    ok: bool = True
    chats: List[ChatTurnItem]
