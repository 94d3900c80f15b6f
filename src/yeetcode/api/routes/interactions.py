"""Discord interactions endpoint."""

from fastapi import APIRouter, Request, Response
from starlette.concurrency import run_in_threadpool

from ..services.interaction_service import InteractionService

router = APIRouter(tags=["interactions"])


@router.post("/", summary="Receive a signed Discord interaction")
async def receive_interaction(request: Request) -> Response:
    """Hand the raw request to the interaction pipeline and write its outcome."""
    service: InteractionService = request.app.state.interaction_service
    body = await request.body()
    # The pipeline makes blocking HTTP calls, keep it off the event loop.
    outcome = await run_in_threadpool(service.handle, request.headers, body)
    if outcome.body is None:
        return Response(status_code=outcome.status_code)
    return Response(content=outcome.body, status_code=outcome.status_code, media_type="application/json")
