from __future__ import annotations

import json

import mcp.types as types
import pytest

from modules.imaging.generation import ImageGenerator
from modules.imaging.models import GeneratedImage
from modules.imaging.persistence import ImageSaver
from services.api.config import get_settings
from services.mcp.server import SERVER_NAME, ToolCallError, build_server, mcp_tools, run_tool


class DummyProvider:
    def __init__(self) -> None:
        self.calls = 0

    def generate(self, request):  # type: ignore[no-untyped-def]
        self.calls += 1
        return [GeneratedImage("http://x/1.png", "rp")]


class DummyFetcher:
    def fetch(self, url: str) -> bytes:
        return b"img"


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _saver() -> ImageSaver:
    return ImageSaver(fetcher=DummyFetcher(), clock=lambda: 1)


def test_mcp_tools_carry_schemas():
    tools = {t.name: t for t in mcp_tools()}

    assert set(tools) == {"image_generation", "save_generated_images"}
    assert tools["image_generation"].inputSchema["properties"]["size"]["default"] == "1024x1024"
    assert tools["image_generation"].title == "Generate Images with DALL-E 3"
    assert tools["save_generated_images"].title == "Save Generated Images"


def test_run_tool_success_returns_json_text():
    gen = ImageGenerator(api_key="sk-test", provider=DummyProvider())

    blocks = run_tool("image_generation", {"prompt": "p"}, generator=gen, saver=_saver())

    assert len(blocks) == 1
    assert json.loads(blocks[0].text) == {"urls": ["http://x/1.png"], "revised_prompts": ["rp"]}


def test_run_tool_failure_raises_with_envelope_message(tmp_path):
    blocker = tmp_path / "f"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(ToolCallError) as ei:
        run_tool(
            "save_generated_images",
            {"urls": ["http://x/1.png"], "prompt": "p", "outputDir": str(blocker / "d")},
            generator=ImageGenerator(api_key=None),
            saver=_saver(),
        )
    assert str(ei.value).startswith("Failed to save images: ")


@pytest.mark.asyncio
async def test_server_call_tool_round_trip():
    provider = DummyProvider()
    server = build_server(
        generator_factory=lambda: ImageGenerator(api_key="sk-test", provider=provider), saver=_saver()
    )
    assert server.name == SERVER_NAME

    handler = server.request_handlers[types.CallToolRequest]
    req = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name="image_generation", arguments={"prompt": "a red fox"}),
    )
    result = await handler(req)

    assert result.root.isError is False
    assert json.loads(result.root.content[0].text)["urls"] == ["http://x/1.png"]
    assert provider.calls == 1


@pytest.mark.asyncio
async def test_server_reports_missing_key_as_error_result():
    provider = DummyProvider()
    server = build_server(generator_factory=lambda: ImageGenerator(api_key=None, provider=provider), saver=_saver())

    handler = server.request_handlers[types.CallToolRequest]
    req = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name="image_generation", arguments={"prompt": "a red fox"}),
    )
    result = await handler(req)

    assert result.root.isError is True
    assert "OpenAI API key is not available" in result.root.content[0].text
    assert provider.calls == 0
