from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException
from prometheus_client import Counter

from modules.imaging.envelope import to_call_tool_result
from modules.imaging.errors import ConfigurationError
from modules.imaging.generation import ImageGenerator
from modules.imaging.persistence import ImageSaver
from modules.imaging.tools import IMAGE_GENERATION, SAVE_GENERATED_IMAGES, list_tools
from services.api.config import get_settings
from services.api.metrics import REGISTRY
from services.api.schemas.tools import (
    CallToolResponse,
    ErrorResponse,
    GenerationRequest,
    SaveRequest,
    ToolListResponse,
    ToolOut,
)


router = APIRouter(prefix="", tags=["tools"])

_TOOL_CALLS = Counter(
    "ig_api_tool_calls", "Tool invocations by tool and outcome", ["tool", "outcome"], registry=REGISTRY
)


def get_generator() -> ImageGenerator:
    return ImageGenerator.from_settings(get_settings())


def get_saver() -> ImageSaver:
    return ImageSaver(default_dir=get_settings().output_dir)


@router.get("/tools", response_model=ToolListResponse)
def tools_list() -> ToolListResponse:
    return ToolListResponse(tools=[ToolOut(**t.as_dict()) for t in list_tools()])


@router.post(
    f"/tools/{IMAGE_GENERATION}",
    response_model=CallToolResponse,
    responses={422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def image_generation(
    req: GenerationRequest = Body(
        openapi_examples={
            "fox": {
                "summary": "Two vivid images",
                "value": {"prompt": "a red fox", "n": 2, "size": "1024x1024", "quality": "standard", "style": "vivid"},
            }
        }
    ),
    generator: ImageGenerator = Depends(get_generator),
) -> CallToolResponse:
    try:
        result = generator.generate(req)
    except ConfigurationError as exc:
        _TOOL_CALLS.labels(tool=IMAGE_GENERATION, outcome="configuration_error").inc()
        raise HTTPException(status_code=503, detail={"code": exc.kind, "message": str(exc)})
    _TOOL_CALLS.labels(tool=IMAGE_GENERATION, outcome="error" if result.is_error else "ok").inc()
    return CallToolResponse(**to_call_tool_result(result))


@router.post(
    f"/tools/{SAVE_GENERATED_IMAGES}",
    response_model=CallToolResponse,
    responses={422: {"model": ErrorResponse}},
)
def save_generated_images(
    req: SaveRequest = Body(
        openapi_examples={
            "pair": {
                "summary": "Save two images",
                "value": {
                    "urls": ["http://x/1.png", "http://x/2.png"],
                    "prompt": "A Red Fox!!",
                    "outputDir": "/tmp/out",
                },
            }
        }
    ),
    saver: ImageSaver = Depends(get_saver),
) -> CallToolResponse:
    result = saver.save(req)
    _TOOL_CALLS.labels(tool=SAVE_GENERATED_IMAGES, outcome="error" if result.is_error else "ok").inc()
    return CallToolResponse(**to_call_tool_result(result))
