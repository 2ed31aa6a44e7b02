"""Document chat API."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.document import ChatSendRequest, ChatSendResponse, DocMessageResponse
from ..services.blob_fetcher import BlobFetcher
from ..services.chat_service import ChatService
from ..services.llm_client import CompletionClient
from .dependencies import get_fetcher, get_llm

router = APIRouter(prefix="/api/chat", tags=["chat"])


def get_chat_service(
    db: Session = Depends(get_db),
    llm: CompletionClient = Depends(get_llm),
    fetcher: BlobFetcher = Depends(get_fetcher),
) -> ChatService:
    return ChatService(db, llm=llm, fetcher=fetcher)


@router.get("/messages", response_model=List[DocMessageResponse])
def list_messages(service: ChatService = Depends(get_chat_service)):
    return service.list_messages()


@router.post("/send", response_model=ChatSendResponse)
def send_message(data: ChatSendRequest, service: ChatService = Depends(get_chat_service)):
    """Send one message. Completion failures come back as the assistant message."""
    user_message, ai_message = service.send(data.content, data.referenced_doc_ids)
    return ChatSendResponse(
        user_message=DocMessageResponse.model_validate(user_message),
        ai_message=DocMessageResponse.model_validate(ai_message),
    )
