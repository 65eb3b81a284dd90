"""HTTP endpoint for resume field extraction."""

from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from resume_extractor.config import Settings
from resume_extractor.exceptions import ResumeExtractorError
from resume_extractor.handler import ResumeExtractionService
from resume_extractor.logger import Timer, get_logger, reset_request_id, set_request_id

logger = get_logger(__name__)

RESUME_FIELD = "resume"
REQUEST_ID_HEADER = "X-Request-ID"
CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type, x-request-id"
CORS_ALLOW_METHODS = "POST, OPTIONS"
CORS_MAX_AGE = "600"

router = APIRouter()


def get_extraction_service(request: Request) -> ResumeExtractionService:
    return request.app.state.extraction_service


def error_response(
    status_code: int, message: str, headers: Optional[dict] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": message}, headers=headers
    )


def is_preflight(request: Request) -> bool:
    return (
        request.method == "OPTIONS"
        and "origin" in request.headers
        and "access-control-request-method" in request.headers
    )


def preflight_response(request: Request) -> Response:
    """Empty 204 allowing any origin and whatever headers the browser asks for."""
    requested_headers = request.headers.get("access-control-request-headers")
    return Response(
        status_code=204,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
            "Access-Control-Allow-Headers": requested_headers or CORS_ALLOW_HEADERS,
            "Access-Control-Max-Age": CORS_MAX_AGE,
        },
    )


@router.options("/resume-parse", include_in_schema=False)
async def resume_parse_options() -> Response:
    # CORS preflights are answered by the preflight middleware before reaching here
    return Response(status_code=204)


@router.post("/resume-parse")
async def parse_resume_upload(
    request: Request,
    service: ResumeExtractionService = Depends(get_extraction_service),
):
    """Extract full name, email and phone from an uploaded resume."""
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        return error_response(400, "Content-Type must be multipart/form-data")

    try:
        async with request.form() as form:
            upload = form.get(RESUME_FIELD)
            if not isinstance(upload, UploadFile):
                return error_response(400, "Missing resume file.")

            file_name = upload.filename or ""
            file_bytes = await upload.read()

            with Timer("resume_parse") as timer:
                result = await service.extract(
                    file_bytes=file_bytes,
                    file_name=file_name,
                    mime_type=upload.content_type,
                )
    except (ResumeExtractorError, StarletteHTTPException):
        raise
    except Exception as exc:
        logger.exception(
            "Resume parse failed unexpectedly",
            extra_data={"error_type": type(exc).__name__, "error": str(exc)},
        )
        return error_response(500, str(exc) or "Internal server error")

    logger.info(
        "Resume parsed",
        extra_data={
            "file_name": file_name,
            "source": result.source.value,
            "total_time_ms": timer.get_elapsed_ms(),
        },
    )
    return {"result": result.fields.to_dict()}


async def handle_extractor_error(request: Request, exc: ResumeExtractorError) -> JSONResponse:
    logger.warning(
        "Resume parse rejected",
        extra_data={
            "path": request.url.path,
            "kind": exc.kind,
            "status_code": exc.status_code,
            "error": exc.message,
        },
    )
    return error_response(exc.status_code, exc.message)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(
        "Request rejected",
        extra_data={
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
            "error": exc.detail,
        },
    )
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[ResumeExtractionService] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Service settings. If None, loaded from the environment.
        service: Extraction service. If None, built from settings.
    """
    settings = settings or Settings()
    if service is None:
        service = ResumeExtractionService(
            model_config=settings.to_model_config(),
            extractor_config=settings.to_extractor_config(),
        )

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.state.settings = settings
    app.state.extraction_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def answer_preflight(request: Request, call_next):
        if is_preflight(request):
            return preflight_response(request)
        return await call_next(request)

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        request_id, token = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    app.add_exception_handler(ResumeExtractorError, handle_extractor_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.include_router(router)

    @app.get("/")
    def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
        }

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app
