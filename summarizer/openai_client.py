import json
import logging
import os
from collections.abc import AsyncIterator
from typing import Optional

import httpx

from summarizer.errors import ConfigError, ProviderError
from summarizer.prompts import Prompt

logger = logging.getLogger(__name__)

OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
MAX_TOKENS = 1000

MISSING_KEY_MESSAGE = "OpenAI API key is not configured."
# Sent in-band once a streamed body has started; there is no other error channel.
STREAM_ERROR_MARKER = "\n\n[Error: Failed to generate summary. Please try again later.]"


def _parse_stream_event(line: str) -> Optional[list[str]]:
    """Return the content fragments in one SSE line, or ``None`` at ``[DONE]``.

    Keep-alives and lines that are not JSON carry no fragments. An ``error``
    event or a payload that is not an object raises ``ProviderError``.
    """
    data = line[len("data:"):].strip() if line.startswith("data:") else line.strip()
    if not data:
        return []
    if data == "[DONE]":
        return None
    try:
        payload = json.loads(data)
    except json.JSONDecodeError:
        return []

    if not isinstance(payload, dict):
        raise ProviderError("Unexpected OpenAI stream event")
    if "error" in payload:
        error = payload["error"]
        detail = error.get("message") if isinstance(error, dict) else error
        raise ProviderError(f"OpenAI stream reported an error: {detail}")

    choices = payload.get("choices") or []
    if not isinstance(choices, list):
        raise ProviderError("Unexpected OpenAI stream event")
    fragments = []
    for choice in choices:
        delta = choice.get("delta") if isinstance(choice, dict) else None
        content = delta.get("content") if isinstance(delta, dict) else None
        if content:
            fragments.append(str(content))
    return fragments


class OpenAIStreamWrapper:
    """Single-pass view over a streamed completion; closes the connection when done."""

    def __init__(self, response: httpx.Response, client: httpx.AsyncClient) -> None:
        self._response = response
        self._client = client

    async def aiter_text(self) -> AsyncIterator[str]:
        try:
            async for line in self._response.aiter_lines():
                fragments = _parse_stream_event(line)
                if fragments is None:
                    return
                for fragment in fragments:
                    yield fragment
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise ProviderError("OpenAI stream was interrupted.") from exc
        finally:
            await self._response.aclose()
            await self._client.aclose()


class OpenAIClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.base_url = (base_url or os.getenv("OPENAI_BASE_URL") or OPENAI_BASE_URL).rstrip("/")
        self._transport = transport
        self._timeout = timeout

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise ConfigError(MISSING_KEY_MESSAGE)

    async def run_completion(
        self, prompt: Prompt, *, temperature: float, stream: bool = False
    ):
        """Send one chat completion request.

        Returns the completion text, or an ``OpenAIStreamWrapper`` when
        ``stream`` is set. Failures are not retried.
        """
        self.ensure_configured()
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self._resolve_model(),
            "messages": self._build_messages(prompt),
            "max_tokens": MAX_TOKENS,
            "temperature": temperature,
            "stream": stream,
        }

        if stream:
            headers["Accept"] = "text/event-stream"
            client, response = await self._open_stream(headers=headers, payload=payload)
            return OpenAIStreamWrapper(response, client)

        data = await self._request(headers=headers, payload=payload)

        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list):
            raise ProviderError("Unexpected OpenAI response format")

        text = []
        for choice in choices:
            if not isinstance(choice, dict):
                continue
            message = choice.get("message")
            if isinstance(message, dict):
                content_piece = message.get("content")
                if content_piece:
                    text.append(str(content_piece))

        summary = "".join(text).strip()
        if not summary:
            raise ProviderError("Empty response from OpenAI")
        return summary

    async def _request(self, *, headers: dict[str, str], payload: dict):
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(self.completions_url, headers=headers, json=payload)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as exc:
                raise ProviderError(self._format_error(exc.response.status_code)) from exc
            except httpx.RequestError as exc:
                raise ProviderError("Unable to reach OpenAI API.") from exc
            except ValueError as exc:
                raise ProviderError("Unexpected OpenAI response format") from exc

    async def _open_stream(self, *, headers: dict[str, str], payload: dict):
        client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        try:
            request = client.build_request(
                "POST", self.completions_url, headers=headers, json=payload
            )
            response = await client.send(request, stream=True)
        except httpx.RequestError as exc:
            await client.aclose()
            raise ProviderError("Unable to reach OpenAI API.") from exc

        if response.is_error:
            await response.aclose()
            await client.aclose()
            raise ProviderError(self._format_error(response.status_code))
        return client, response

    def _format_error(self, status_code: int) -> str:
        if status_code in (401, 403):
            return "OpenAI API rejected the API key. Check the key and its permissions."
        if status_code == 429:
            return "OpenAI API rate limit exceeded. Please try again shortly."
        if 500 <= status_code < 600:
            return "OpenAI API is currently unavailable. Please retry later."
        return "Unexpected OpenAI API error."

    def _resolve_model(self) -> str:
        return os.getenv("OPENAI_MODEL", DEFAULT_MODEL)

    def _build_messages(self, prompt: Prompt):
        return [
            {"role": "system", "content": prompt.system},
            {"role": "user", "content": prompt.user},
        ]


async def stream_completion(
    client: OpenAIClient, prompt: Prompt, temperature: float
) -> AsyncIterator[str]:
    """Yield completion fragments in arrival order.

    A provider failure, before or after the first fragment, ends the stream
    with ``STREAM_ERROR_MARKER`` instead of raising.
    """
    try:
        response = await client.run_completion(prompt, temperature=temperature, stream=True)
        async for chunk in response.aiter_text():
            yield chunk
    except ProviderError as exc:
        logger.warning("Streaming completion failed: %s", exc.message)
        yield STREAM_ERROR_MARKER
