import time
import traceback
import uuid
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.exceptions import ValidationError
from app.api.file_validation import max_file_sizes
from app.api.routers import chat, conversations, documents, extract
from app.api.services import Services, ServicesFactory
from app.auth.exceptions import AuthenticationError, AuthorizationError, AuthProviderError
from app.config.settings import Settings
from app.documents.exceptions import ConversationNotFoundError, DocumentNotFoundError
from app.extraction.exceptions import NoExtractorAvailableError
from app.extraction.models import CONTENT_TYPES, ContentFamily
from app.generation.exceptions import GenerationError
from app.ingestion.exceptions import MetadataPersistError
from app.logging.logger import Log
from app.ratelimit.exceptions import RateLimitExceededError
from app.ratelimit.limiter import RateLimiters
from app.storage.exceptions import StorageError

API_VERSION = "v1"


def create_app(settings: Settings, services: Services | None = None) -> FastAPI:
    """Build the HTTP application around already constructed services."""
    app = FastAPI(title="Document Extraction API", version=API_VERSION)
    app.state.settings = settings
    app.state.services = services or ServicesFactory.create(settings)
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    _register_middleware(app, settings)
    _register_exception_handlers(app, settings)

    app.include_router(extract.router)
    app.include_router(documents.router)
    app.include_router(chat.router)
    app.include_router(conversations.router)
    _register_info_routes(app, settings)
    return app


def _register_middleware(app: FastAPI, settings: Settings) -> None:
    @app.middleware("http")
    async def global_rate_limit(request: Request, call_next):
        ip = request.client.host if request.client else "unknown"
        limiters: RateLimiters = request.app.state.services.rate_limiters
        if not limiters.allow(RateLimiters.GLOBAL, ip):
            Log.warning("Global rate limit exceeded", ip=ip, path=request.url.path)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Rate limit exceeded",
                    "message": "Too many requests from this IP, please try again later.",
                },
            )
        return await call_next(request)

    # Registered last so it wraps every other middleware.
    @app.middleware("http")
    async def request_logging(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.monotonic()
        try:
            response = await call_next(request)
        except Exception as exc:
            response = _server_error(request, exc, "An unexpected error occurred", settings)
        response.headers["X-Request-ID"] = request_id
        Log.info(
            "Request completed",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return response


def _error_response(
    status_code: int,
    error: str,
    message: str,
    headers: dict[str, str] | None = None,
    **extra: object,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, **extra},
        headers=headers,
    )


def _server_error(
    request: Request, exc: Exception, message: str, settings: Settings
) -> JSONResponse:
    Log.error(
        "Request failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    extra: dict[str, object] = {}
    if settings.is_development:
        extra["traceback"] = traceback.format_exception(exc)
    return _error_response(500, "Internal server error", message, **extra)


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(ValidationError)
    def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
        return _error_response(400, "Validation failed", str(exc), details=exc.details)

    @app.exception_handler(RequestValidationError)
    def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
                "message": error.get("msg", ""),
            }
            for error in exc.errors()
        ]
        return _error_response(400, "Validation failed", "Invalid request", details=details)

    @app.exception_handler(NoExtractorAvailableError)
    def handle_unsupported(request: Request, exc: NoExtractorAvailableError) -> JSONResponse:
        return _error_response(
            400,
            "Unsupported file type",
            "Please upload a PDF, DOC, DOCX, TXT, or image file",
        )

    @app.exception_handler(AuthenticationError)
    def handle_authentication(request: Request, exc: AuthenticationError) -> JSONResponse:
        return _error_response(
            401, "Unauthorized", str(exc), headers={"WWW-Authenticate": "Bearer"}
        )

    @app.exception_handler(AuthorizationError)
    def handle_authorization(request: Request, exc: AuthorizationError) -> JSONResponse:
        return _error_response(403, "Forbidden", str(exc))

    @app.exception_handler(DocumentNotFoundError)
    @app.exception_handler(ConversationNotFoundError)
    def handle_not_found(request: Request, exc: Exception) -> JSONResponse:
        return _error_response(404, "Not found", str(exc))

    @app.exception_handler(RateLimitExceededError)
    def handle_rate_limit(request: Request, exc: RateLimitExceededError) -> JSONResponse:
        return _error_response(
            429,
            "Rate limit exceeded",
            str(exc),
            headers={"Retry-After": str(exc.retry_after_seconds)},
            retryAfter=exc.retry_after_seconds,
        )

    @app.exception_handler(AuthProviderError)
    def handle_auth_provider(request: Request, exc: AuthProviderError) -> JSONResponse:
        Log.error("Auth provider failure", error=str(exc))
        return _error_response(503, "Service unavailable", "Authentication service unavailable")

    @app.exception_handler(StorageError)
    def handle_storage(request: Request, exc: StorageError) -> JSONResponse:
        return _server_error(request, exc, "Storage operation failed", settings)

    @app.exception_handler(MetadataPersistError)
    def handle_metadata(request: Request, exc: MetadataPersistError) -> JSONResponse:
        return _server_error(request, exc, "Failed to save document", settings)

    @app.exception_handler(GenerationError)
    def handle_generation(request: Request, exc: GenerationError) -> JSONResponse:
        return _server_error(request, exc, "Failed to generate response", settings)

    @app.exception_handler(StarletteHTTPException)
    def handle_http(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return _error_response(404, "Not found", f"Route {request.url.path} not found")
        return _error_response(exc.status_code, "Request failed", str(exc.detail))


def _register_info_routes(app: FastAPI, settings: Settings) -> None:
    @app.get("/")
    def root() -> dict[str, object]:
        return {
            "message": "Text Extraction Microservices API",
            "version": API_VERSION,
            "environment": settings.app_env,
            "storage": settings.storage_backend,
            "timestamp": _now_iso(),
            "endpoints": {
                "/extract": "POST - Upload file for text extraction",
                "/api/conversations": "Conversation management endpoints",
                "/api/chat": "Chat and AI interaction endpoints",
                "/api/documents": "Document management endpoints",
                "/health": "GET - Health check",
                "/supported-formats": "GET - List supported file formats",
            },
        }

    @app.get("/health")
    def health(request: Request) -> dict[str, object]:
        return {
            "status": "healthy",
            "uptime": round(time.monotonic() - request.app.state.started_at, 3),
            "timestamp": _now_iso(),
            "storage": settings.storage_backend,
            "services": {
                "pdf": "online",
                "doc": "online",
                "ocr": "online",
                "storage": "online",
            },
            "version": API_VERSION,
            "environment": settings.app_env,
        }

    @app.get("/supported-formats")
    def supported_formats() -> dict[str, object]:
        sizes = max_file_sizes(settings)
        return {
            "formats": {
                "pdf": list(CONTENT_TYPES[ContentFamily.PDF]),
                "documents": [
                    *CONTENT_TYPES[ContentFamily.DOCUMENT],
                    *CONTENT_TYPES[ContentFamily.TEXT],
                ],
                "images": list(CONTENT_TYPES[ContentFamily.IMAGE]),
            },
            "maxFileSizes": {
                "pdf": sizes[ContentFamily.PDF],
                "documents": sizes[ContentFamily.DOCUMENT],
                "images": sizes[ContentFamily.IMAGE],
            },
        }


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
