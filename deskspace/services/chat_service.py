"""Document chat: answers a message grounded in the documents it references.

One turn:
  1. resolve referenced ids (unknown ids are dropped)
  2. persist the user message with a snapshot of the document names
  3. build the prompt from the system instruction, the last few messages
     and the new message
  4. fetch stored blobs concurrently and attach them to the final user turn;
     failed fetches are listed in one note instead of aborting the turn
  5. use the vision model only when something was attached
  6. completion failures become an assistant message describing the failure
  7. persist and return both messages
"""

import base64
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..exceptions import ExternalServiceError, PartialFailure, ServiceFailure, ValidationError
from ..models import Document, DocMessage
from ..repositories.document_repository import DocumentRepository, DocMessageRepository
from .blob_fetcher import BlobFetcher
from .llm_client import CompletionClient

logger = logging.getLogger(__name__)

MAX_FETCH_WORKERS = 8

SYSTEM_PROMPT = (
    "You are a helpful assistant inside a personal desktop workspace. "
    "The user may attach PDF documents to their message. "
    "Answer using the attached documents when they are relevant and say so "
    "when they do not contain the answer. Keep answers concise."
)

FAILURE_REPLIES = {
    ServiceFailure.NOT_CONFIGURED: (
        "The AI service is not configured, so I can't answer right now. "
        "Set a completion model in the server configuration and try again."
    ),
    ServiceFailure.UNREACHABLE: (
        "I couldn't reach the AI service. Please check the connection and try again in a moment."
    ),
    ServiceFailure.RATE_LIMITED: (
        "The AI service is receiving too many requests right now. Please wait a little and try again."
    ),
    ServiceFailure.OTHER: (
        "Something went wrong while generating a response. Please try again."
    ),
}


@dataclass
class _Attachments:
    parts: List[Dict[str, Any]] = field(default_factory=list)
    name_only: List[str] = field(default_factory=list)
    failed: List[PartialFailure] = field(default_factory=list)

    @property
    def failed_names(self) -> List[str]:
        return [f.name for f in self.failed]


def failure_notice(names: List[str]) -> str:
    return "Note: I could not load these documents: " + ", ".join(names) + "."


class ChatService:
    """Sends document chat turns and reads the history."""

    def __init__(
        self,
        db: Session,
        llm: Optional[CompletionClient] = None,
        fetcher: Optional[BlobFetcher] = None,
    ):
        self.db = db
        self.llm = llm or CompletionClient.from_settings(settings)
        self.fetcher = fetcher or BlobFetcher(
            timeout=settings.document_fetch_timeout, max_bytes=settings.max_upload_bytes
        )
        self.doc_repo = DocumentRepository(db)
        self.message_repo = DocMessageRepository(db)

    def list_messages(self) -> List[DocMessage]:
        return self.message_repo.list_all()

    def send(self, content: str, referenced_doc_ids: Optional[List[str]] = None) -> Tuple[DocMessage, DocMessage]:
        """Run one chat turn. Returns ``(user_message, assistant_message)``.

        Never raises for completion or fetch failures; those end up in the
        assistant message instead.
        """
        content = (content or "").strip()
        if not content:
            raise ValidationError("Message cannot be empty", field="content")

        documents = self.doc_repo.get_many(referenced_doc_ids or [])
        names = [d.name for d in documents]
        document_id = documents[0].id if len(documents) == 1 else None

        user_message = self.message_repo.create(
            "user", content, document_id=document_id, referenced_docs=names or None
        )
        self.db.commit()

        history = self.message_repo.recent(settings.chat_history_window, exclude_id=user_message.id)
        attachments = self._collect_attachments(documents)
        messages = self._build_messages(history, content, attachments)

        try:
            reply = self.llm.complete(messages, vision=bool(attachments.parts))
        except ExternalServiceError as e:
            logger.warning("Chat completion failed", extra={"category": e.category.value})
            reply = FAILURE_REPLIES[e.category]

        if attachments.failed:
            reply = f"{reply.rstrip()}\n\n{failure_notice(attachments.failed_names)}"

        ai_message = self.message_repo.create(
            "assistant", reply, document_id=document_id, referenced_docs=names or None
        )
        self.db.commit()
        return user_message, ai_message

    # ------------------------------------------------------------------
    # Prompt building
    # ------------------------------------------------------------------

    def _collect_attachments(self, documents: List[Document]) -> _Attachments:
        """Fetch every stored blob concurrently; one failure never cancels the others."""
        result = _Attachments()
        fetchable = [d for d in documents if d.file_url]
        result.name_only = [d.name for d in documents if not d.file_url]
        if not fetchable:
            return result

        fetched: Dict[str, bytes] = {}
        with ThreadPoolExecutor(max_workers=min(len(fetchable), MAX_FETCH_WORKERS)) as executor:
            futures = {executor.submit(self.fetcher.fetch, d.file_url): d for d in fetchable}
            for future in as_completed(futures):
                doc = futures[future]
                try:
                    fetched[doc.id] = future.result()
                except Exception as e:
                    logger.warning(
                        "Document fetch failed",
                        extra={"document_id": doc.id, "error": str(e)},
                    )
                    result.failed.append(PartialFailure(doc.name, str(e)))

        # Keep the user's reference order rather than completion order.
        for doc in fetchable:
            if doc.id in fetched:
                result.parts.append(_file_part(doc, fetched[doc.id]))
        order = {d.name: i for i, d in enumerate(fetchable)}
        result.failed.sort(key=lambda f: order.get(f.name, len(order)))
        return result

    def _build_messages(
        self,
        history: List[DocMessage],
        content: str,
        attachments: _Attachments,
    ) -> List[Dict[str, Any]]:
        messages: List[Dict[str, Any]] = [{"role": "system", "content": SYSTEM_PROMPT}]
        for message in history:
            role = "assistant" if message.role == "assistant" else "user"
            messages.append({"role": role, "content": message.content})

        text = content
        if attachments.name_only:
            text += "\n\nReferenced documents (not attached): " + ", ".join(attachments.name_only)
        if attachments.failed:
            text += (
                "\n\nThe following referenced documents could not be loaded: "
                + ", ".join(attachments.failed_names)
            )

        if attachments.parts:
            messages.append({"role": "user", "content": [{"type": "text", "text": text}, *attachments.parts]})
        else:
            messages.append({"role": "user", "content": text})
        return messages


def _file_part(document: Document, data: bytes) -> Dict[str, Any]:
    encoded = base64.b64encode(data).decode("ascii")
    return {
        "type": "file",
        "file": {
            "filename": document.original_name or f"{document.name}.pdf",
            "file_data": f"data:application/pdf;base64,{encoded}",
        },
    }
