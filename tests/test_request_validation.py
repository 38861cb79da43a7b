from __future__ import annotations

import pytest

from modules.imaging.envelope import Failure, Success
from modules.imaging.validation import parse_generation_request, parse_save_request


def test_generation_defaults_applied():
    parsed = parse_generation_request({"prompt": "a red fox"})

    assert isinstance(parsed, Success)
    req = parsed.value
    assert (req.size, req.quality, req.style, req.n) == ("1024x1024", "standard", "vivid", 1)


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"prompt": ""},
        {"prompt": "p", "n": 0},
        {"prompt": "p", "n": 11},
        {"prompt": "p", "size": "512x512"},
        {"prompt": "p", "quality": "ultra"},
        {"prompt": "p", "style": "sketch"},
    ],
)
def test_generation_rejects_invalid_arguments(raw):
    parsed = parse_generation_request(raw)

    assert isinstance(parsed, Failure)
    assert parsed.kind == "invalid_input"
    assert parsed.message.startswith("Invalid arguments: ")


def test_generation_error_names_the_field():
    parsed = parse_generation_request({"prompt": "p", "n": 11})

    assert isinstance(parsed, Failure)
    assert "n:" in parsed.message


def test_save_accepts_camel_case_wire_names():
    parsed = parse_save_request(
        {"urls": ["http://x/1.png"], "prompt": "p", "revisedPrompts": ["rp"], "outputDir": "/tmp/out"}
    )

    assert isinstance(parsed, Success)
    assert parsed.value.revised_prompts == ["rp"]
    assert parsed.value.output_dir == "/tmp/out"


def test_save_requires_urls_and_prompt():
    parsed = parse_save_request({"prompt": "p"})

    assert isinstance(parsed, Failure)
    assert "urls" in parsed.message
