# services/factory.py
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends, Request

from config import Settings
from core.interfaces import (
    IChatRepository, ICompletionService, IDocumentRepository,
    IFileStorage, ITextExtractor
)
from database.session import get_db
from infrastructure.repositories import SQLChatRepository, SQLDocumentRepository
from services.chat_service import ChatService
from services.context_assembler import ContextAssembler
from services.ingestion_service import IngestionService

# Process-wide components are built once in the lifespan and kept on app.state

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_file_storage(request: Request) -> IFileStorage:
    return request.app.state.file_storage

def get_text_extractor(request: Request) -> ITextExtractor:
    return request.app.state.text_extractor

def get_completion_service(request: Request) -> ICompletionService:
    return request.app.state.completion_service

# Request-scoped repositories

def get_document_repository(session: AsyncSession = Depends(get_db)) -> IDocumentRepository:
    """Create document repository with injected session."""
    return SQLDocumentRepository(session)

def get_chat_repository(session: AsyncSession = Depends(get_db)) -> IChatRepository:
    """Create chat history repository with injected session."""
    return SQLChatRepository(session)

# Services

def get_chat_service(
    settings: Settings = Depends(get_settings),
    document_repo: IDocumentRepository = Depends(get_document_repository),
    chat_repo: IChatRepository = Depends(get_chat_repository),
    extractor: ITextExtractor = Depends(get_text_extractor),
    completion: ICompletionService = Depends(get_completion_service),
) -> ChatService:
    """
    Create the chat service with full dependency injection.

    Both repositories share the request's session. Override individual
    providers via app.dependency_overrides for testing.
    """
    return ChatService(
        document_repo=document_repo,
        chat_repo=chat_repo,
        assembler=ContextAssembler(extractor, excerpt_chars=settings.DOCUMENT_EXCERPT_CHARS),
        completion=completion,
        corpus_limit=settings.RETRIEVAL_CORPUS_LIMIT,
        top_k=settings.RETRIEVAL_TOP_K,
    )

def get_ingestion_service(
    document_repo: IDocumentRepository = Depends(get_document_repository),
    file_storage: IFileStorage = Depends(get_file_storage),
    extractor: ITextExtractor = Depends(get_text_extractor),
) -> IngestionService:
    return IngestionService(
        document_repo=document_repo,
        file_storage=file_storage,
        extractor=extractor,
    )
