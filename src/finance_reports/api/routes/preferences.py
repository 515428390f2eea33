import asyncio
import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from finance_reports.api.dependencies import get_visibility
from finance_reports.api.schemas import VisibilityResponse
from finance_reports.core import settings
from finance_reports.domain.visibility import AmountVisibility

router = APIRouter()


def _event(hidden: bool) -> str:
    return f"data: {json.dumps({'hidden': hidden})}\n\n"


@router.get("/api/preferences/visibility", response_model=VisibilityResponse)
async def get_amount_visibility(
    visibility: Annotated[AmountVisibility, Depends(get_visibility)],
) -> VisibilityResponse:
    return VisibilityResponse(hidden=visibility.is_hidden())


@router.post("/api/preferences/visibility/toggle", response_model=VisibilityResponse)
async def toggle_amount_visibility(
    visibility: Annotated[AmountVisibility, Depends(get_visibility)],
) -> VisibilityResponse:
    return VisibilityResponse(hidden=visibility.toggle())


@router.get("/api/preferences/visibility/stream")
async def stream_amount_visibility(
    request: Request,
    visibility: Annotated[AmountVisibility, Depends(get_visibility)],
) -> StreamingResponse:
    loop = asyncio.get_running_loop()
    changes: asyncio.Queue[bool] = asyncio.Queue()

    def on_change(hidden: bool) -> None:
        loop.call_soon_threadsafe(changes.put_nowait, hidden)

    unsubscribe = visibility.subscribe(on_change)

    async def generate() -> Any:
        try:
            yield _event(visibility.is_hidden())
            while not await request.is_disconnected():
                try:
                    hidden = await asyncio.wait_for(
                        changes.get(), timeout=settings.SSE_KEEPALIVE_SECONDS
                    )
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                yield _event(hidden)
        finally:
            unsubscribe()

    return StreamingResponse(generate(), media_type="text/event-stream", headers=settings.SSE_HEADERS)
