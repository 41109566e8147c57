"""Shared fixtures and fakes for the chat backend tests."""

from pathlib import Path
from typing import AsyncGenerator, Dict, List, Optional, Sequence

import pytest

from config import Settings
from core.domain import (
    ChatTurn,
    CompletionError,
    Document,
    ExtractionError,
    ExtractionResult,
    PersistenceError,
    PromptPart,
)
from core.interfaces import (
    IChatRepository,
    ICompletionService,
    IDocumentRepository,
    ITextExtractor,
)
from database.session import create_engine, create_session_factory, init_models


class FakeCompletionService(ICompletionService):
    """Records every call; returns `reply` or raises `error`."""

    def __init__(self, reply: str = "Here is your answer.", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[List[PromptPart]] = []

    async def complete(self, parts: Sequence[PromptPart]) -> str:
        self.calls.append(list(parts))
        if self.error is not None:
            raise self.error
        return self.reply


class FakeExtractor(ITextExtractor):
    """Returns a fixed text for every file; empty text means extraction failed."""

    def __init__(self, text: str = ""):
        self.text = text
        self.calls: List[str] = []

    async def extract_result(self, data: bytes, filename: str) -> ExtractionResult:
        self.calls.append(filename)
        if not self.text:
            return ExtractionResult(error=ExtractionError(f"No text found in {filename}"))
        return ExtractionResult(text=self.text)


class InMemoryDocumentRepository(IDocumentRepository):
    def __init__(self, documents: Optional[List[Document]] = None):
        # newest first, like find_recent
        self.documents: List[Document] = list(documents or [])
        self.fail_reads = False

    async def find_recent(self, limit: int) -> List[Document]:
        if self.fail_reads:
            raise RuntimeError("database unavailable")
        return self.documents[:limit]

    async def insert(self, document: Document) -> Document:
        self.documents.insert(0, document)
        return document

    async def find_by_name(self, filename: str) -> Optional[Document]:
        return next((d for d in self.documents if d.filename == filename), None)


class InMemoryChatRepository(IChatRepository):
    def __init__(self):
        self.turns: Dict[int, ChatTurn] = {}
        self.inserts = 0
        self.updates = 0
        self.fail_insert = False
        self.fail_update = False

    async def insert(self, turn: ChatTurn) -> int:
        if self.fail_insert:
            raise RuntimeError("insert failed")
        self.inserts += 1
        turn.id = len(self.turns) + 1
        self.turns[turn.id] = turn
        return turn.id

    async def update(self, turn_id: int, assistant_message: str) -> None:
        if self.fail_update:
            raise RuntimeError("update failed")
        if turn_id not in self.turns:
            raise PersistenceError(f"Chat turn {turn_id} not found")
        self.updates += 1
        self.turns[turn_id].assistant_message = assistant_message

    async def find_by_session(self, session_id: str, limit: int = 200) -> List[ChatTurn]:
        return [t for t in self.turns.values() if t.session_id == session_id][:limit]


def make_document(filename: str, text: str, doc_id: Optional[str] = None) -> Document:
    return Document(
        id=doc_id or filename,
        filename=filename,
        stored_name=filename,
        url=f"/uploads/{filename}",
        text=text,
    )


@pytest.fixture
def document_factory():
    return make_document


@pytest.fixture
def completion() -> FakeCompletionService:
    return FakeCompletionService()


@pytest.fixture
def failing_completion() -> FakeCompletionService:
    return FakeCompletionService(error=CompletionError("GEMINI_API_KEY not configured"))


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def document_repo() -> InMemoryDocumentRepository:
    return InMemoryDocumentRepository()


@pytest.fixture
def chat_repo() -> InMemoryChatRepository:
    return InMemoryChatRepository()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway database and uploads directory."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        UPLOADS_DIR=str(tmp_path / "uploads"),
        LOG_FILE_PATH=str(tmp_path / "log" / "test.log"),
        ADMIN_KEY="admin-secret",
        GEMINI_API_KEY=None,
        SEED_DEMO_DOCUMENT=False,
    )


@pytest.fixture
async def session_factory(test_settings: Settings) -> AsyncGenerator:
    engine = create_engine(test_settings)
    await init_models(engine)
    yield create_session_factory(engine)
    await engine.dispose()
