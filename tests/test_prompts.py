import pytest

from summarizer.prompts import (
    ANGRY_SYSTEM,
    BROCHURE_SYSTEM,
    NORMAL_SYSTEM,
    ROAST_SYSTEM,
    build_prompt,
    temperature_for,
)


@pytest.mark.parametrize(
    ("mode", "expected"),
    [
        ("normal", NORMAL_SYSTEM),
        ("roast", ROAST_SYSTEM),
        ("angry", ANGRY_SYSTEM),
        ("poetic", NORMAL_SYSTEM),
        (None, NORMAL_SYSTEM),
    ],
)
def test_build_prompt_selects_system_prompt_by_mode(mode, expected):
    prompt = build_prompt(mode, False, "Title", "Body")

    assert prompt.system == expected


def test_build_prompt_embeds_title_and_text():
    prompt = build_prompt("normal", False, "Acme", "We sell anvils.")

    assert '"Acme"' in prompt.user
    assert prompt.user.endswith("We sell anvils.")


def test_build_prompt_brochure_takes_precedence_over_mode():
    prompt = build_prompt("roast", True, "Acme", "Prior summary")

    assert prompt.system == BROCHURE_SYSTEM
    assert "Prior summary" in prompt.user
    assert "Acme" not in prompt.user


def test_build_prompt_is_deterministic():
    assert build_prompt("angry", False, "T", "X") == build_prompt("angry", False, "T", "X")


@pytest.mark.parametrize(
    ("mode", "expected"),
    [("normal", 0.3), (None, 0.3), ("roast", 0.8), ("angry", 0.8), ("other", 0.8)],
)
def test_temperature_for_mode(mode, expected):
    assert temperature_for(mode) == expected
