# api/endpoints.py
"""
API endpoints for the support chat backend.

Admin upload requires the X-Admin-Key header. Chat and history are open.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import verify_admin_key
from api.errors import BadRequestError, PayloadTooLargeError, ServiceError
from api.schemas import (
    ChatResponse,
    ChatTurnItem,
    DocumentItem,
    DocumentsListResponse,
    HistoryResponse,
    SourceDocument,
    UploadResponse,
)
from config import Settings, settings as app_settings
from core.domain import Attachment, InvalidRequestError, PersistenceError
from database.session import get_db
from services.chat_service import FALLBACK_REPLY, ChatService
from services.factory import get_chat_service, get_ingestion_service, get_settings
from services.ingestion_service import IngestionService
from utils.common import guess_mime_type

logger = logging.getLogger(app_settings.LOGGER_NAME)

router = APIRouter(prefix="/api")
health_router = APIRouter()


async def _read_upload(file: UploadFile, settings: Settings) -> bytes:
    """Read an upload fully, enforcing MAX_FILE_SIZE."""
    if file.size and file.size > settings.MAX_FILE_SIZE:
        max_mb = settings.MAX_FILE_SIZE // 1024 // 1024
        raise PayloadTooLargeError(f"file too large (max {max_mb}MB)")
    content = await file.read()
    if len(content) > settings.MAX_FILE_SIZE:
        max_mb = settings.MAX_FILE_SIZE // 1024 // 1024
        raise PayloadTooLargeError(f"file too large (max {max_mb}MB)")
    return content


# ---------- Admin upload ----------
@router.post(
    "/admin/upload",
    response_model=UploadResponse,
    dependencies=[Depends(verify_admin_key)],
)
async def upload_document(
    file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings),
    ingestion: IngestionService = Depends(get_ingestion_service),
) -> UploadResponse:
    if file is None or not file.filename:
        raise BadRequestError("no file provided")

    content = await _read_upload(file, settings)
    try:
        document = await ingestion.ingest(content, file.filename)
    except Exception as e:
        logger.exception(f"Upload of '{file.filename}' failed: {e}")
        raise ServiceError("upload failed")

    return UploadResponse(doc=DocumentItem.from_domain(document))


# ---------- List documents ----------
@router.get("/admin/docs", response_model=DocumentsListResponse)
async def list_documents(
    settings: Settings = Depends(get_settings),
    ingestion: IngestionService = Depends(get_ingestion_service),
) -> DocumentsListResponse:
    try:
        documents = await ingestion.list_recent(settings.DOCUMENTS_LIST_LIMIT)
    except Exception as e:
        logger.exception(f"Listing documents failed: {e}")
        raise ServiceError("failed")
    return DocumentsListResponse(docs=[DocumentItem.from_domain(d) for d in documents])


# ---------- Chat history ----------
@router.get("/history/{session_id}", response_model=HistoryResponse)
async def get_history(
    session_id: str,
    settings: Settings = Depends(get_settings),
    chat_service: ChatService = Depends(get_chat_service),
) -> HistoryResponse:
    try:
        turns = await chat_service.history(session_id, limit=settings.HISTORY_LIMIT)
    except Exception as e:
        logger.exception(f"History lookup for session {session_id!r} failed: {e}")
        raise ServiceError("history failed")
    return HistoryResponse(chats=[ChatTurnItem.from_domain(t) for t in turns])


# ---------- Chat ----------
@router.post("/chat", response_model=ChatResponse)
async def chat(
    message: Optional[str] = Form(None),
    session_id: Optional[str] = Form(None, alias="sessionId"),
    file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    attachment = None
    if file is not None and file.filename:
        content = await _read_upload(file, settings)
        attachment = Attachment(
            filename=file.filename,
            mime_type=guess_mime_type(file.filename, file.content_type or ""),
            data=content,
        )

    try:
        result = await chat_service.handle(message, session_id, attachment)
    except InvalidRequestError:
        raise BadRequestError("message or file required")
    except PersistenceError as e:
        logger.error(f"Chat persistence failed: {e}")
        raise ServiceError("persistence_failed", reply=FALLBACK_REPLY)

    if result.degraded:
        raise ServiceError("chat_failed", reply=result.reply)

    return ChatResponse(
        reply=result.reply,
        docs=[SourceDocument.from_domain(ref) for ref in result.docs],
    )


# ---------- Health Check ----------
@health_router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Liveness plus database reachability."""
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "ok"}
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {"status": "unhealthy", "database": "error", "error": str(e)}
