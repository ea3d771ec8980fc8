import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse

from summarizer.errors import SummarizerError
from summarizer.fetcher import WebsiteFetcher
from summarizer.http_logging import configure_logging, install_http_logging
from summarizer.openai_client import OpenAIClient
from summarizer.schemas import HealthResponse, SummarizeRequest, SummarizeResponse
from summarizer.service import SummaryService

logger = logging.getLogger(__name__)

METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed. Use POST."
INVALID_BODY_MESSAGE = "Invalid request body."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

configure_logging()

app = FastAPI(title="Website Summarizer")
install_http_logging(app)


@lru_cache(maxsize=1)
def get_openai_client() -> OpenAIClient:
    return OpenAIClient()


@lru_cache(maxsize=1)
def get_fetcher() -> WebsiteFetcher:
    return WebsiteFetcher()


def get_summary_service(
    openai_client: OpenAIClient = Depends(get_openai_client),
    fetcher: WebsiteFetcher = Depends(get_fetcher),
) -> SummaryService:
    return SummaryService(openai_client, fetcher)


def error_response(
    message: str, status_code: int, headers: Optional[dict[str, str]] = None
) -> JSONResponse:
    body = SummarizeResponse(success=False, error=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected malformed body on %s: %s", request.url.path, exc.errors())
    return error_response(INVALID_BODY_MESSAGE, 400)


@app.get("/healthz", response_model=HealthResponse)
async def healthz():
    return HealthResponse()


@app.post(
    "/api/summarize",
    response_model=SummarizeResponse,
    response_model_exclude_none=True,
)
async def summarize(
    req: SummarizeRequest, service: SummaryService = Depends(get_summary_service)
):
    try:
        if req.stream:
            chunks = await service.stream(req)
            return StreamingResponse(chunks, media_type="text/plain; charset=utf-8")

        return await service.summarize(req)
    except SummarizerError as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:  # pragma: no cover - unexpected failures
        logger.exception("Unexpected error in summarize API")
        return error_response(UNEXPECTED_ERROR_MESSAGE, 500)


@app.api_route(
    "/api/summarize",
    methods=["GET", "HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def summarize_wrong_method():
    return error_response(METHOD_NOT_ALLOWED_MESSAGE, 405, headers={"Allow": "POST"})
