from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.middleware.cors import CORSMiddleware

from scambait.api.routes import error_response, router
from scambait.observability.logging import log
from scambait.settings import settings

app = FastAPI(title="Scam-bait Honeypot API")

origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Honeypot API is running. Use /health and POST /api/honeypot (or /detect).",
    }


@app.get("/health")
def health():
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Every failure leaves as the same error envelope; internal detail goes to
# `error`, never into a conversational reply.
# ---------------------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    log("request_rejected", reason="unparseable_body", path=request.url.path)
    return error_response(400, "malformed request body")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def universal_exception_handler(request: Request, exc: Exception):
    log("unhandled_error", path=request.url.path, error=type(exc).__name__, detail=str(exc)[:200])
    return error_response(500, str(exc) or type(exc).__name__)
