"""Show Scheduler - FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional, Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field

from src.logger import setup_logging
from src.supabase_store import SupabaseClient

from .config import SchedulerConfig
from .exceptions import (
    InvalidEditError,
    InvalidRequestError,
    ModelUnavailableError,
    PersistenceError,
    ScheduleItemNotFoundError,
    ScheduleNotFoundError,
)
from .generator import ScheduleGenerator
from .openai_client import OpenAIClient
from .workspace import ScheduleWorkspace

logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    """Chat message with optional schedule hints."""

    message: str = ""
    context: Optional[Dict[str, Any]] = None


class ItemEditRequest(BaseModel):
    """Fields to change on a schedule item. Omitted fields are left alone."""

    title: Optional[str] = None
    artist: Optional[str] = None
    duration: Optional[Union[str, float]] = None
    notes: Optional[str] = None


class PersistResponse(BaseModel):
    playlist_id: Any = Field(serialization_alias="playlistId")
    name: str
    entry_count: int = Field(serialization_alias="entryCount")


def _chat_error_status(error: ModelUnavailableError) -> int:
    if error.status_code in (401, 429):
        return error.status_code
    return 502


def create_app(
    generator: Optional[ScheduleGenerator] = None,
    store: Optional[SupabaseClient] = None,
) -> FastAPI:
    """Build the API.

    Without arguments the generator, store and model client are created from
    the environment at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        owned_store = None
        if app.state.generator is None:
            config = SchedulerConfig.from_environment()
            logger.info(f"Starting show scheduler with {config!r}")
            owned_store = SupabaseClient(config.to_store_config())
            app.state.store = owned_store
            app.state.generator = ScheduleGenerator(
                store=owned_store,
                model=OpenAIClient(
                    api_key=config.openai_api_key,
                    model=config.openai_model,
                    timeout_seconds=config.model_timeout_seconds,
                ),
                workspace=ScheduleWorkspace(
                    ttl_seconds=config.workspace_ttl_seconds,
                    max_sessions=config.workspace_max_sessions,
                ),
                prompt_defaults=config.prompt_defaults,
                catalog_limit=config.catalog_limit,
                model_timeout_seconds=config.model_timeout_seconds,
            )
        yield
        if owned_store is not None:
            await owned_store.close()

    app = FastAPI(
        title="Show Scheduler",
        description="Natural-language radio show schedule generation",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.generator = generator
    app.state.store = store if store is not None else (generator.store if generator else None)

    def workspace(request: Request) -> ScheduleWorkspace:
        return request.app.state.generator.workspace

    @app.get("/health")
    async def health(request: Request):
        """Health check endpoint. The service stays up when the store is down."""
        store_client = request.app.state.store
        store_ok = store_client is not None and await store_client.ping()
        return {"status": "ok", "store": "ok" if store_ok else "unavailable"}

    @app.post("/schedule/generate")
    async def generate_schedule(body: GenerateRequest, request: Request):
        """Generate a schedule, or answer a general question."""
        try:
            return await request.app.state.generator.handle_message(body.message, body.context)
        except InvalidRequestError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except ModelUnavailableError as e:
            logger.error(f"Chat reply failed: {e}")
            raise HTTPException(
                status_code=_chat_error_status(e), detail=f"Failed to generate AI response: {e}"
            )

    @app.get("/schedules/{schedule_id}")
    async def get_schedule(schedule_id: str, request: Request):
        try:
            session = workspace(request).get(schedule_id)
        except ScheduleNotFoundError:
            raise HTTPException(status_code=404, detail=f"Schedule not found: {schedule_id}")
        return {
            "scheduleId": session.schedule_id,
            "state": session.state.value,
            "degraded": session.degraded,
            "schedule": session.schedule.to_dict(),
        }

    @app.patch("/schedules/{schedule_id}/items/{item_id}")
    async def edit_item(schedule_id: str, item_id: str, body: ItemEditRequest, request: Request):
        fields = body.model_dump(exclude_unset=True)
        try:
            item = workspace(request).edit_item(schedule_id, item_id, fields)
        except ScheduleNotFoundError:
            raise HTTPException(status_code=404, detail=f"Schedule not found: {schedule_id}")
        except ScheduleItemNotFoundError:
            raise HTTPException(status_code=404, detail=f"Item not found: {item_id}")
        except InvalidEditError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return item.to_dict()

    @app.delete("/schedules/{schedule_id}/items/{item_id}")
    async def delete_item(schedule_id: str, item_id: str, request: Request):
        try:
            removed = workspace(request).delete_item(schedule_id, item_id)
        except ScheduleNotFoundError:
            raise HTTPException(status_code=404, detail=f"Schedule not found: {schedule_id}")
        except ScheduleItemNotFoundError:
            raise HTTPException(status_code=404, detail=f"Item not found: {item_id}")
        return {"deleted": removed}

    @app.get("/schedules/{schedule_id}/export")
    async def export_schedule(schedule_id: str, request: Request):
        try:
            filename, document = workspace(request).export(schedule_id)
        except ScheduleNotFoundError:
            raise HTTPException(status_code=404, detail=f"Schedule not found: {schedule_id}")
        return Response(
            content=document,
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.post("/schedules/{schedule_id}/playlist")
    async def save_as_playlist(schedule_id: str, request: Request):
        try:
            result = await workspace(request).persist(schedule_id, request.app.state.store)
        except ScheduleNotFoundError:
            raise HTTPException(status_code=404, detail=f"Schedule not found: {schedule_id}")
        except PersistenceError as e:
            raise HTTPException(status_code=502, detail=f"Could not save schedule: {e}")
        return PersistResponse(
            playlist_id=result.playlist_id, name=result.name, entry_count=result.entry_count
        ).model_dump(by_alias=True)

    return app
