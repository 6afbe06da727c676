from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from scambait.api.auth import require_api_key
from scambait.api.normalize import normalize_honeypot_payload
from scambait.api.schemas import ErrorResponse, FinishRequest, HoneypotRequest, HoneypotResponse
from scambait.core.orchestrator import finish_session, handle_event
from scambait.core.scenarios import Scenario, ScenarioError
from scambait.observability.logging import log
from scambait.store.session_repo import SessionNotFound

router = APIRouter()

COMPAT_POST_PATHS = (
    "/api/honeypot",     # primary
    "/honeypot",         # common alias
    "/detect",           # evaluator example path style
    "/api/detect",
)


def error_response(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=detail).model_dump())


def _validation_detail(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "invalid request"


async def _handle_honeypot(request: Request, payload: Any):
    if payload is None:
        try:
            payload = await request.json()
        except ValueError:
            payload = None

    if isinstance(payload, str):
        payload = {"message": payload}
    if not isinstance(payload, dict):
        log("request_rejected", reason="not_an_object")
        return error_response(400, "request body must be a JSON object")

    try:
        req = HoneypotRequest.model_validate(normalize_honeypot_payload(payload))
    except ValidationError as e:
        detail = _validation_detail(e)
        log("request_rejected", reason="validation", detail=detail)
        return error_response(400, detail)

    out = await run_in_threadpool(handle_event, req)
    return HoneypotResponse.of(out["reply"])


# ---------------------------------------------------------------------------
# POST endpoints: one turn per request
# ---------------------------------------------------------------------------
for _path in COMPAT_POST_PATHS:
    @router.post(
        _path,
        response_model=HoneypotResponse,
        responses={400: {"model": ErrorResponse}},
        dependencies=[Depends(require_api_key)],
    )
    async def honeypot_post(request: Request, payload: Any = Body(None)):  # type: ignore
        return await _handle_honeypot(request, payload)


@router.post(
    "/api/sessions/{session_id}/finish",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    dependencies=[Depends(require_api_key)],
)
async def finish(session_id: str, body: Optional[FinishRequest] = None):
    """Close the session: final report, plus its score when a scenario is supplied."""
    scenario = None
    if body is not None and body.scenario is not None:
        try:
            scenario = Scenario.from_dict(body.scenario)
        except ScenarioError as e:
            log("request_rejected", reason="bad_scenario", sessionId=session_id, detail=str(e))
            return error_response(400, str(e))

    notes = body.agentNotes if body is not None else None
    try:
        out = await run_in_threadpool(finish_session, session_id, notes, scenario)
    except SessionNotFound:
        return error_response(404, f"unknown session {session_id}")
    return {"status": "success", **out}


@router.get("/ping", dependencies=[Depends(require_api_key)])
async def ping():
    return {
        "status": "success",
        "reply": "Honeypot API is running. Send a POST request with {sessionId, message, conversationHistory, metadata}.",
    }
