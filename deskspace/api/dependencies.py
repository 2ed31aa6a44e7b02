"""FastAPI dependencies for collaborators held on ``app.state``."""

from typing import Optional

from fastapi import Request

from ..services.blob_fetcher import BlobFetcher
from ..services.llm_client import CompletionClient
from ..services.object_storage import ObjectStorage


def get_storage(request: Request) -> Optional[ObjectStorage]:
    return getattr(request.app.state, "storage", None)


def get_llm(request: Request) -> CompletionClient:
    return request.app.state.llm


def get_fetcher(request: Request) -> BlobFetcher:
    return request.app.state.fetcher
