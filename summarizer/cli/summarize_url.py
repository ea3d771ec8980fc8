import argparse
import asyncio
import sys
from typing import Optional

from summarizer.errors import SummarizerError
from summarizer.fetcher import WebsiteFetcher
from summarizer.http_logging import configure_logging
from summarizer.openai_client import OpenAIClient
from summarizer.prompts import MODE_SYSTEM_PROMPTS
from summarizer.schemas import SummarizeRequest
from summarizer.service import SummaryService


def build_service(api_key: Optional[str] = None) -> SummaryService:
    return SummaryService(OpenAIClient(api_key=api_key), WebsiteFetcher())


async def summarize_url(
    service: SummaryService, url: str, mode: str, stream: bool, brochure: bool
) -> None:
    # A brochure needs a summary to work from, so it is always a second pass.
    if stream and not brochure:
        chunks = await service.stream(SummarizeRequest(url=url, mode=mode, stream=True))
        async for chunk in chunks:
            sys.stdout.write(chunk)
            sys.stdout.flush()
        sys.stdout.write("\n")
        return

    result = await service.summarize(SummarizeRequest(url=url, mode=mode))
    if not brochure:
        print(f"# {result.website_title}\n")
        print(result.summary)
        return

    brochure_req = SummarizeRequest(
        brochure=True, existing_content=result.summary, stream=stream
    )
    if stream:
        async for chunk in await service.stream(brochure_req):
            sys.stdout.write(chunk)
            sys.stdout.flush()
        sys.stdout.write("\n")
        return

    brochure_result = await service.summarize(brochure_req)
    print(f"# {brochure_result.website_title}\n")
    print(brochure_result.summary)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Summarize a website with an LLM")
    parser.add_argument("url", help="HTTPS URL of the page to summarize")
    parser.add_argument(
        "--mode",
        choices=sorted(MODE_SYSTEM_PROMPTS),
        default="normal",
        help="Tone of the summary",
    )
    parser.add_argument(
        "--stream",
        action="store_true",
        help="Print the summary as it is generated",
    )
    parser.add_argument(
        "--brochure",
        action="store_true",
        help="Turn the summary into a marketing brochure",
    )
    parser.add_argument(
        "--api-key",
        help="OpenAI API key; defaults to the OPENAI_API_KEY environment variable",
    )

    args = parser.parse_args(argv)
    configure_logging()

    service = build_service(args.api_key)
    try:
        asyncio.run(
            summarize_url(service, args.url, args.mode, args.stream, args.brochure)
        )
    except SummarizerError as exc:
        raise SystemExit(f"Error: {exc.message}") from exc


if __name__ == "__main__":
    main()
