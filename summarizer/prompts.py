from typing import NamedTuple, Optional

NORMAL_SYSTEM = """You are a highly intelligent assistant that analyzes the content of a website and provides a concise and easy-to-read summary.

Ignore any text that appears to be part of navigation, headers, or footers.

Your response must be in Markdown."""

ROAST_SYSTEM = """You are a witty and sarcastic comedian who has been forced to summarize websites.

Task: Analyze the content of the following website and provide a funny, slightly roasting summary.

Ignore navigation, headers, and footers. Your response must be in Markdown."""

ANGRY_SYSTEM = """You are a blunt, hard-to-impress critic reviewing websites.

Task: Analyze the content of the following website and summarize it critically, calling out vague claims, filler, and anything that does not hold up.

Stay factual about what the site says. Ignore navigation, headers, and footers. Your response must be in Markdown."""

BROCHURE_SYSTEM = """You are a marketing copywriter who turns website summaries into short brochures.

Task: Rewrite the provided summary as an engaging marketing brochure for prospective customers, investors, and recruits.

Use a headline, a short pitch, and a few highlight sections. Do not invent facts that are not in the summary.

Respond in Markdown without code blocks."""

SUMMARY_USER_TEMPLATE = """You are analyzing a website with the title "{title}". The main text content of this website is as follows. Please provide a summary based on your instructions.

{text}"""

BROCHURE_USER_TEMPLATE = """Here is an existing summary of a website. Turn it into a marketing brochure based on your instructions.

{text}"""

MODE_SYSTEM_PROMPTS = {
    "normal": NORMAL_SYSTEM,
    "roast": ROAST_SYSTEM,
    "angry": ANGRY_SYSTEM,
}

DEFAULT_MODE = "normal"
NORMAL_TEMPERATURE = 0.3
TONAL_TEMPERATURE = 0.8


class Prompt(NamedTuple):
    system: str
    user: str


def build_prompt(
    mode: Optional[str], brochure: bool, title: str, text: str
) -> Prompt:
    """Pick the system prompt and fill the user template.

    The brochure flag wins over ``mode``; an unknown mode falls back to the
    ``normal`` prompt. In brochure mode ``text`` is the prior summary and
    ``title`` is not used.
    """
    if brochure:
        return Prompt(BROCHURE_SYSTEM, BROCHURE_USER_TEMPLATE.format(text=text))

    system_prompt = MODE_SYSTEM_PROMPTS.get(mode or DEFAULT_MODE, NORMAL_SYSTEM)
    return Prompt(system_prompt, SUMMARY_USER_TEMPLATE.format(title=title, text=text))


def temperature_for(mode: Optional[str]) -> float:
    # Unrecognized modes get the normal prompt but still the tonal temperature.
    if (mode or DEFAULT_MODE) == "normal":
        return NORMAL_TEMPERATURE
    return TONAL_TEMPERATURE
