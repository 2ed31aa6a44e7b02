"""The desktop assistant: plan, execute, answer.

The planner picks query operations from a fixed catalogue, the executor runs
them concurrently with per-query failure isolation, and the answerer writes a
reply grounded only in the executed results and the cached context snapshot.

The context snapshot is refreshed only when ``update_context`` is called.
"""

import json
import logging
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..database import Database
from ..exceptions import AssistantUnavailableError, ExternalServiceError, PartialFailure, ValidationError
from ..repositories.context_repository import ContextRepository
from ..repositories.document_repository import DocumentRepository, DocMessageRepository
from ..repositories.folder_repository import FolderRepository, FolderItemRepository
from ..repositories.mailing_list_repository import MailingListRepository
from ..schemas.assistant import AskResponse, QueryPlan
from .entity_queries import QUERY_OPERATIONS, describe_operations, folder_item_dict
from .llm_client import CompletionClient

logger = logging.getLogger(__name__)

MAX_QUERY_WORKERS = 5

PLANNER_PROMPT = """You plan data lookups for an assistant that lives on a personal desktop workspace.

Available query operations:
{operations}

Pick the operations whose results are needed to answer the user's question.
If none of them can help, return an empty list and explain why in "reasoning".

Respond with JSON only, in this exact shape:
{{"queries": ["operationName", ...], "reasoning": "short explanation"}}"""

ANSWER_PROMPT = (
    "You are Clippy, a friendly assistant on the user's desktop workspace. "
    "Answer the question using ONLY the data provided below. "
    "If the data does not contain the answer, say clearly that you don't know "
    "based on the available data. Never invent folders, files, documents or people. "
    "Keep answers short."
)

CONTEXT_PROMPT = (
    "Summarise the following snapshot of a personal desktop workspace into one dense "
    "paragraph an assistant can use later: folders and what they contain, documents and "
    "their topics, recent chat themes and mailing lists. Include names and counts."
)

NO_PLAN_REASONING = "None of the available data sources can answer this question."


def strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```(?:json)?\s*\n?", "", text)
        text = re.sub(r"\n?```\s*$", "", text)
    return text


def parse_plan(raw: str) -> QueryPlan:
    """Parse planner output, tolerating fences and slightly broken JSON.

    Unknown operation names are dropped. Output that is not a JSON object
    becomes an empty plan.
    """
    from json_repair import repair_json

    try:
        data = json.loads(repair_json(strip_code_fence(raw)) or "null")
    except ValueError:
        data = None
    if not isinstance(data, dict):
        logger.warning("Planner returned unparseable output", extra={"raw": raw[:200]})
        return QueryPlan(queries=[], reasoning="I couldn't work out which data to look at for this question.")

    queries: List[str] = []
    for name in data.get("queries") or []:
        if not isinstance(name, str):
            continue
        if name not in QUERY_OPERATIONS:
            logger.warning("Planner chose unknown query operation", extra={"operation": name})
            continue
        if name not in queries:
            queries.append(name)

    reasoning = data.get("reasoning")
    return QueryPlan(queries=queries, reasoning=reasoning if isinstance(reasoning, str) else "")


class AssistantService:
    """Answers natural-language questions about the workspace."""

    def __init__(self, db: Session, database: Database, llm: Optional[CompletionClient] = None):
        self.db = db
        self.database = database
        self.llm = llm or CompletionClient.from_settings(settings)
        self.context_repo = ContextRepository(db)

    def ask(self, question: str) -> AskResponse:
        question = (question or "").strip()
        if not question:
            raise ValidationError("Question cannot be empty", field="question")

        plan = self.plan(question)
        snapshot = self.context_repo.get_current()
        context = snapshot.context_data if snapshot else None

        if not plan.queries and not context:
            return AskResponse(answer=plan.reasoning or NO_PLAN_REASONING)

        results = self.execute(plan) if plan.queries else {}
        return AskResponse(answer=self.answer(question, results, context))

    def plan(self, question: str) -> QueryPlan:
        messages = [
            {"role": "system", "content": PLANNER_PROMPT.format(operations=describe_operations())},
            {"role": "user", "content": question},
        ]
        raw = self._complete(messages, temperature=0.0)
        plan = parse_plan(raw)
        logger.info("Assistant plan", extra={"queries": plan.queries})
        return plan

    def execute(self, plan: QueryPlan) -> Dict[str, Any]:
        """Run the planned queries concurrently, each in its own session.

        A failing query is recorded as ``{"error": ...}`` under its name.
        """
        results: Dict[str, Any] = {}
        names = [n for n in plan.queries if n in QUERY_OPERATIONS]
        if not names:
            return results

        with ThreadPoolExecutor(max_workers=min(len(names), MAX_QUERY_WORKERS)) as executor:
            futures = {executor.submit(self._run_query, name): name for name in names}
            for future in as_completed(futures):
                name = futures[future]
                try:
                    results[name] = future.result()
                except Exception as e:
                    logger.warning("Assistant query failed", extra={"operation": name, "error": str(e)})
                    results[name] = PartialFailure(name, str(e)).to_dict()

        # Plan order, so the answer prompt is deterministic.
        return {name: results[name] for name in names}

    def answer(self, question: str, results: Dict[str, Any], context: Optional[str] = None) -> str:
        parts = [f"Question: {question}"]
        if results:
            parts.append("Query results:\n" + json.dumps(results, indent=2, default=str))
        else:
            parts.append("Query results: none")
        if context:
            parts.append(f"Workspace summary (may be out of date):\n{context}")

        messages = [
            {"role": "system", "content": ANSWER_PROMPT},
            {"role": "user", "content": "\n\n".join(parts)},
        ]
        return self._complete(messages).strip()

    def update_context(self) -> str:
        """Rebuild the cached workspace summary. Heavy; call on demand only."""
        snapshot = self._collect_snapshot()
        messages = [
            {"role": "system", "content": CONTEXT_PROMPT},
            {"role": "user", "content": json.dumps(snapshot, indent=2, default=str)},
        ]
        summary = self._complete(messages).strip()

        self.context_repo.upsert(summary)
        self.db.commit()
        logger.info(
            "Context snapshot updated",
            extra={"folders": len(snapshot["folders"]), "documents": len(snapshot["documents"])},
        )
        return "Context updated successfully"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_query(self, name: str) -> Any:
        with self.database.session() as db:
            return QUERY_OPERATIONS[name].run(db)

    def _collect_snapshot(self) -> Dict[str, Any]:
        preview = settings.context_doc_preview_chars
        items_by_folder: Dict[str, List[Dict[str, Any]]] = {}
        for item in FolderItemRepository(self.db).list_all():
            items_by_folder.setdefault(item.folder_id, []).append(folder_item_dict(item))

        return {
            "folders": [
                {"name": f.name, "items": items_by_folder.get(f.id, [])}
                for f in FolderRepository(self.db).list_all()
            ],
            "documents": [
                {"name": d.name, "originalName": d.original_name, "contentPreview": (d.content or "")[:preview]}
                for d in DocumentRepository(self.db).list_all()
            ],
            "recentChatMessages": [
                {"role": m.role, "content": m.content}
                for m in DocMessageRepository(self.db).recent(settings.context_message_window)
            ],
            "mailingLists": [
                {"name": m.name, "emails": list(m.emails or [])}
                for m in MailingListRepository(self.db).list_all()
            ],
        }

    def _complete(self, messages: List[Dict[str, Any]], temperature: Optional[float] = None) -> str:
        try:
            return self.llm.complete(messages, temperature=temperature)
        except ExternalServiceError as e:
            raise AssistantUnavailableError(
                "The assistant is unavailable right now. " + e.message, category=e.category
            ) from e
