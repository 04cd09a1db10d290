"""
Schedule generation pipeline.

classify -> fetch candidates -> build prompts -> call model -> parse -> assemble.
Everything up to the finished schedule degrades instead of failing: a dead
store means no library context, a dead model means the library fallback.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.supabase_store import SupabaseClient

from ._prompt_builders import build_prompts
from .catalog import fetch_candidates, fetch_library_summary, wants_library_summary
from .classifier import SCHEDULING_KEYWORDS, is_scheduling_request
from .config import MAX_CATALOG_LIMIT, PromptDefaults
from .exceptions import InvalidRequestError, ModelUnavailableError
from .models import GeneratedSchedule, ScheduleRequest
from .openai_client import OpenAIClient
from .response_parser import parse_model_output
from .timeline import assemble
from .workspace import ScheduleWorkspace

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """A finished schedule and how it was produced."""
    schedule: GeneratedSchedule
    degraded: bool
    message: str
    notes: str = ""


def summary_message(schedule: GeneratedSchedule, degraded: bool, notes: str = "") -> str:
    """Assistant text shown above a generated schedule."""
    if degraded:
        return (
            f"I couldn't get a usable answer from the scheduling assistant, so here is a starter "
            f"schedule from the first tracks in your library ({len(schedule.items)} items, "
            f"{schedule.total_duration_display}). Edit it before airing."
        )

    message = (
        f"Here's your schedule \"{schedule.title}\": {len(schedule.items)} items, "
        f"{schedule.total_duration_display} total."
    )
    if notes:
        message += f"\n\n{notes}"
    return message


class ScheduleGenerator:
    """Turns chat messages into timed schedules."""

    def __init__(
        self,
        store: SupabaseClient,
        model: OpenAIClient,
        workspace: Optional[ScheduleWorkspace] = None,
        prompt_defaults: Optional[PromptDefaults] = None,
        catalog_limit: int = MAX_CATALOG_LIMIT,
        model_timeout_seconds: Optional[float] = None,
        keywords=SCHEDULING_KEYWORDS,
    ):
        """
        Args:
            store: Store client for catalog reads
            model: Model client exposing complete() and chat_reply()
            workspace: Registry receiving each generated schedule
            prompt_defaults: Placeholders for missing hints
            catalog_limit: Candidate rows to read (<= 1000)
            model_timeout_seconds: Bound on the model call
            keywords: Scheduling keyword set for the classifier
        """
        self.store = store
        self.model = model
        self.workspace = workspace if workspace is not None else ScheduleWorkspace()
        self.prompt_defaults = prompt_defaults or PromptDefaults()
        self.catalog_limit = catalog_limit
        self.model_timeout_seconds = model_timeout_seconds
        self.keywords = keywords

    async def generate(self, request: ScheduleRequest) -> GenerationResult:
        """
        Generate a schedule for one request. Never fails on store or model problems.

        Args:
            request: Validated schedule request

        Returns:
            GenerationResult (degraded when the library fallback was used)
        """
        logger.info(f"Generating schedule for: {request.instructions[:80]!r}")

        candidates = await fetch_candidates(self.store, self.catalog_limit)
        system_prompt, user_prompt = build_prompts(request, candidates, self.prompt_defaults)

        text: Optional[str]
        try:
            text = await self.model.complete(system_prompt, user_prompt, self.model_timeout_seconds)
        except ModelUnavailableError as e:
            logger.warning(f"Model unavailable, using library fallback: {e}")
            text = None

        selection = parse_model_output(text, candidates)
        schedule = assemble(selection)

        return GenerationResult(
            schedule=schedule,
            degraded=selection.degraded,
            message=summary_message(schedule, selection.degraded, selection.notes),
            notes=selection.notes,
        )

    async def handle_message(self, message: str, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Answer one chat message.

        Scheduling messages produce a schedule envelope (registered in the
        workspace); anything else gets a plain chat reply, with a library
        snapshot attached when the message asks about playlists or stats.

        Raises:
            InvalidRequestError: Empty message
            ModelUnavailableError: Chat reply failed (scheduling never raises this)
        """
        if not isinstance(message, str) or not message.strip():
            raise InvalidRequestError("Please describe what kind of show you want")

        if not is_scheduling_request(message, self.keywords):
            library_summary = None
            if wants_library_summary(message):
                library_summary = await fetch_library_summary(self.store)
            reply = await self.model.chat_reply(message, context, library_summary)
            return {"message": reply}

        request = ScheduleRequest.from_message(message, context)
        result = await self.generate(request)
        session = self.workspace.register(result.schedule, degraded=result.degraded)

        return {
            "message": result.message,
            "type": "schedule",
            "schedule": result.schedule.to_dict(),
            "scheduleId": session.schedule_id,
            "degraded": result.degraded,
        }
