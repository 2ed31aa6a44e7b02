"""Assistant ("Clippy") API.

A 503 means the assistant could not answer; an answer saying the data does
not contain the information is a normal 200.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import Database, get_database, get_db
from ..schemas.assistant import AskRequest, AskResponse, UpdateContextResponse
from ..services.assistant_service import AssistantService
from ..services.llm_client import CompletionClient
from .dependencies import get_llm

router = APIRouter(prefix="/api/clippy", tags=["assistant"])


def get_assistant_service(
    db: Session = Depends(get_db),
    database: Database = Depends(get_database),
    llm: CompletionClient = Depends(get_llm),
) -> AssistantService:
    return AssistantService(db, database, llm=llm)


@router.post("/ask", response_model=AskResponse)
def ask(data: AskRequest, service: AssistantService = Depends(get_assistant_service)):
    return service.ask(data.question)


@router.post("/update-context", response_model=UpdateContextResponse)
def update_context(service: AssistantService = Depends(get_assistant_service)):
    """Rebuild the cached workspace summary the assistant answers from."""
    return UpdateContextResponse(message=service.update_context())
