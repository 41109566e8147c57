# services/ingestion_service.py
import logging
import os
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from config import settings
from core.domain import Document
from core.interfaces import IDocumentRepository, IFileStorage, ITextExtractor
from utils.common import sanitize_filename

logger = logging.getLogger(settings.LOGGER_NAME)


class IngestionService:
    """Stores uploaded files and records them, with their text, in the document store."""

    def __init__(
        self,
        document_repo: IDocumentRepository,
        file_storage: IFileStorage,
        extractor: ITextExtractor,
    ):
        self.document_repo = document_repo
        self.file_storage = file_storage
        self.extractor = extractor

    async def ingest(self, data: bytes, original_name: str) -> Document:
        """
        Save the file, extract its text and insert a Document.

        Unsupported or unreadable files are still ingested with empty text.
        """
        doc_id = str(uuid4())
        stored_name = f"{doc_id}{Path(sanitize_filename(original_name)).suffix.lower()}"

        await self.file_storage.save(data, stored_name)
        text = await self.extractor.extract(data, original_name)
        if not text:
            logger.warning(f"Ingesting '{original_name}' without extracted text")

        document = Document(
            id=doc_id,
            filename=original_name,
            stored_name=stored_name,
            url=self.file_storage.public_url(stored_name),
            text=text,
        )
        return await self.document_repo.insert(document)

    async def list_recent(self, limit: int = 50) -> List[Document]:
        return await self.document_repo.find_recent(limit)

    async def ensure_demo_document(self, local_path: str) -> Optional[Document]:
        """
        Insert a placeholder record for `local_path` unless one already exists.

        Returns the new document, or None when it was already present.
        """
        filename = os.path.basename(local_path)
        if await self.document_repo.find_by_name(filename):
            return None

        document = await self.document_repo.insert(
            Document(
                id=str(uuid4()),
                filename=filename,
                stored_name=filename,
                url=local_path,
                text="",
            )
        )
        logger.info(f"Demo document created: {filename}")
        return document
