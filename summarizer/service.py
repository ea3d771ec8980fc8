import logging
from collections.abc import AsyncIterator
from typing import NamedTuple
from urllib.parse import urlparse

from summarizer.errors import ExtractionError, InputError, ProviderError
from summarizer.extractor import ExtractedContent, extract_content, has_meaningful_text
from summarizer.fetcher import WebsiteFetcher
from summarizer.openai_client import OpenAIClient, stream_completion
from summarizer.prompts import Prompt, build_prompt, temperature_for
from summarizer.schemas import SummarizeRequest, SummarizeResponse

logger = logging.getLogger(__name__)

BROCHURE_TITLE = "Marketing Brochure"

URL_REQUIRED_MESSAGE = "URL is required."
INVALID_URL_MESSAGE = "Invalid URL. Please provide a valid HTTPS URL."
BROCHURE_CONTENT_REQUIRED_MESSAGE = "Existing content is required for brochure generation."
EXTRACTION_ERROR_MESSAGE = "Unable to extract meaningful content from the website."
GENERATION_ERROR_MESSAGE = "Failed to generate summary. Please try again later."


class PreparedCompletion(NamedTuple):
    prompt: Prompt
    temperature: float
    title: str


def is_valid_https_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme == "https" and bool(parsed.netloc)


class SummaryService:
    """Runs one summarize request: validate, acquire content, build, dispatch."""

    def __init__(self, openai_client: OpenAIClient, fetcher: WebsiteFetcher) -> None:
        self._openai_client = openai_client
        self._fetcher = fetcher

    def validate(self, req: SummarizeRequest) -> None:
        if req.brochure:
            if not (req.existing_content or "").strip():
                raise InputError(BROCHURE_CONTENT_REQUIRED_MESSAGE)
        elif not req.url:
            raise InputError(URL_REQUIRED_MESSAGE)

        if req.url and not is_valid_https_url(req.url):
            raise InputError(INVALID_URL_MESSAGE)

        self._openai_client.ensure_configured()

    async def prepare(self, req: SummarizeRequest) -> PreparedCompletion:
        """Validate the request and build the prompt; nothing is sent to the model yet."""
        self.validate(req)
        temperature = temperature_for(req.mode)

        if req.brochure:
            prompt = build_prompt(req.mode, True, BROCHURE_TITLE, req.existing_content or "")
            return PreparedCompletion(prompt, temperature, BROCHURE_TITLE)

        content = await self.acquire_content(req.url or "")
        prompt = build_prompt(req.mode, False, content.title, content.text)
        return PreparedCompletion(prompt, temperature, content.title)

    async def acquire_content(self, url: str) -> ExtractedContent:
        html = await self._fetcher.fetch(url)
        content = extract_content(html)
        if not has_meaningful_text(content):
            logger.info("Only %d characters extracted from %s", len(content.text), url)
            raise ExtractionError(EXTRACTION_ERROR_MESSAGE)
        return content

    async def summarize(self, req: SummarizeRequest) -> SummarizeResponse:
        prepared = await self.prepare(req)
        try:
            summary = await self._openai_client.run_completion(
                prepared.prompt, temperature=prepared.temperature, stream=False
            )
        except ProviderError as exc:
            logger.warning("Completion failed: %s", exc.message)
            raise ProviderError(GENERATION_ERROR_MESSAGE) from exc
        return SummarizeResponse(success=True, summary=summary, website_title=prepared.title)

    async def stream(self, req: SummarizeRequest) -> AsyncIterator[str]:
        """Prepare eagerly so input, fetch and extraction errors raise before any byte is sent."""
        prepared = await self.prepare(req)
        return stream_completion(self._openai_client, prepared.prompt, prepared.temperature)
