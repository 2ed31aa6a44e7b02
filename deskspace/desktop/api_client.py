"""HTTP client for the Deskspace REST API, used by desktop front ends.

``AssistantUnavailable`` is raised for a 503 from the assistant so callers
can tell "the assistant is down" apart from an answer saying it doesn't know.
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional

import httpx

logger = logging.getLogger(__name__)


class NoteRef(NamedTuple):
    folder_id: str
    item_id: str


class ApiError(Exception):
    """Non-2xx response carrying the server's structured error body."""

    def __init__(self, status_code: int, error: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.error = error
        self.message = message
        self.details = details or {}
        super().__init__(f"{status_code} {error}: {message}")

    @property
    def field(self) -> Optional[str]:
        return self.details.get("field")


class AssistantUnavailable(ApiError):
    pass


class DesktopClient:
    """Thin wrapper over ``httpx.Client``; returns decoded JSON (camelCase keys)."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 30.0, client: Optional[httpx.Client] = None):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "DesktopClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # -- Folders -------------------------------------------------------------

    def list_folders(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/folders")

    def create_folder(self, name: str, x: int = 0, y: int = 0) -> Dict[str, Any]:
        return self._request("POST", "/api/folders", json={"name": name, "x": x, "y": y})

    def update_folder(self, folder_id: str, **fields: Any) -> Dict[str, Any]:
        return self._request("PUT", f"/api/folders/{folder_id}", json=fields)

    def rename_folder(self, folder_id: str, name: str) -> Dict[str, Any]:
        return self.update_folder(folder_id, name=name)

    def delete_folder(self, folder_id: str) -> None:
        self._request("DELETE", f"/api/folders/{folder_id}")

    # -- Folder items --------------------------------------------------------

    def list_items(self, folder_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/api/folders/{folder_id}/items")

    def create_note(self, folder_id: str, name: str, content: str = "", x: int = 0, y: int = 0) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"/api/folders/{folder_id}/items/note",
            json={"name": name, "content": content, "x": x, "y": y},
        )

    def create_bookmark(self, folder_id: str, name: str, url: str, x: int = 0, y: int = 0) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"/api/folders/{folder_id}/items/bookmark",
            json={"name": name, "url": url, "x": x, "y": y},
        )

    def upload_file(
        self,
        folder_id: str,
        filename: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        x: int = 0,
        y: int = 0,
    ) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"/api/folders/{folder_id}/items/file",
            files={"file": (filename, data, content_type)},
            data={"x": str(x), "y": str(y)},
        )

    def update_item(self, folder_id: str, item_id: str, **fields: Any) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/folders/{folder_id}/items/{item_id}", json=fields)

    def delete_item(self, folder_id: str, item_id: str) -> None:
        self._request("DELETE", f"/api/folders/{folder_id}/items/{item_id}")

    def save_note(self, note: NoteRef, content: str) -> None:
        """Autosave callback: ``NoteAutosaver(client.save_note)``."""
        self.update_item(note.folder_id, note.item_id, content=content)

    # -- Documents and chat --------------------------------------------------

    def list_documents(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/documents")

    def upload_document(self, filename: str, data: bytes) -> Dict[str, Any]:
        return self._request(
            "POST", "/api/documents/upload", files={"file": (filename, data, "application/pdf")}
        )

    def chat_history(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/chat/messages")

    def send_chat(self, content: str, referenced_doc_ids: Optional[List[str]] = None) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/api/chat/send",
            json={"content": content, "referencedDocIds": referenced_doc_ids or []},
        )

    # -- Assistant -----------------------------------------------------------

    def ask(self, question: str) -> str:
        """Ask the assistant. Raises AssistantUnavailable when it cannot answer."""
        return self._request("POST", "/api/clippy/ask", json={"question": question})["answer"]

    def update_context(self) -> str:
        return self._request("POST", "/api/clippy/update-context")["message"]

    # -- Internals -----------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._client.request(method, path, **kwargs)
        if response.status_code >= 400:
            raise self._error(response)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _error(response: httpx.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        error = body.get("error") or "HTTP_ERROR"
        message = body.get("message") or response.reason_phrase
        details = body.get("details") or {}
        logger.debug("API error", extra={"status_code": response.status_code, "error": error})
        cls = AssistantUnavailable if response.status_code == 503 else ApiError
        return cls(response.status_code, error, message, details)
