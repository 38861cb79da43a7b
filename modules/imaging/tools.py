from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .envelope import Failure, Success
from .generation import ImageGenerator
from .persistence import ImageSaver
from .validation import parse_generation_request, parse_save_request


IMAGE_GENERATION = "image_generation"
SAVE_GENERATED_IMAGES = "save_generated_images"


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    title: str
    description: str
    input_schema: dict[str, Any]
    version: str = "1.0.0"

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "version": self.version,
            "inputSchema": self.input_schema,
        }


IMAGE_GENERATION_TOOL = ToolDescriptor(
    name=IMAGE_GENERATION,
    title="Generate Images with DALL-E 3",
    description="Generate images using OpenAI's DALL-E 3 model based on text prompts",
    input_schema={
        "type": "object",
        "properties": {
            "prompt": {"type": "string", "minLength": 1, "description": "The text prompt to generate an image from"},
            "size": {
                "type": "string",
                "enum": ["1024x1024", "1024x1792", "1792x1024"],
                "default": "1024x1024",
                "description": "The size of the generated image",
            },
            "quality": {
                "type": "string",
                "enum": ["standard", "hd"],
                "default": "standard",
                "description": "The quality of the generated image",
            },
            "style": {
                "type": "string",
                "enum": ["vivid", "natural"],
                "default": "vivid",
                "description": "The style of the generated image",
            },
            "n": {
                "type": "integer",
                "minimum": 1,
                "maximum": 10,
                "default": 1,
                "description": "The number of images to generate",
            },
        },
        "required": ["prompt"],
    },
)

SAVE_IMAGES_TOOL = ToolDescriptor(
    name=SAVE_GENERATED_IMAGES,
    title="Save Generated Images",
    description=(
        "Save generated images from URLs to local filesystem. The outputDir parameter should be the full "
        "absolute path to the target directory (e.g., /Users/username/path/to/directory). The directory is "
        "created if it does not exist; when omitted, images go to an 'images' directory under the server's "
        "working directory."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "urls": {"type": "array", "items": {"type": "string"}, "description": "Array of image URLs to save"},
            "prompt": {"type": "string", "description": "The original prompt used to generate the images"},
            "revisedPrompts": {
                "type": "array",
                "items": {"type": ["string", "null"]},
                "description": "Optional array of revised prompts from DALL-E, index-aligned with urls",
            },
            "outputDir": {
                "type": "string",
                "description": "Full absolute path to the directory where images should be saved",
            },
        },
        "required": ["urls", "prompt"],
    },
)

TOOLS: dict[str, ToolDescriptor] = {t.name: t for t in (IMAGE_GENERATION_TOOL, SAVE_IMAGES_TOOL)}


def list_tools() -> list[ToolDescriptor]:
    return list(TOOLS.values())


def call_tool(
    name: str,
    arguments: Mapping[str, Any] | None,
    *,
    generator: ImageGenerator,
    saver: ImageSaver,
) -> Success[Any] | Failure:
    """Validate ``arguments`` for the named tool and run it.

    Returns the operation's result; ``ConfigurationError`` from the generator is not
    caught here.
    """
    if name == IMAGE_GENERATION:
        parsed = parse_generation_request(arguments)
        if isinstance(parsed, Failure):
            return parsed
        return generator.generate(parsed.value)
    if name == SAVE_GENERATED_IMAGES:
        parsed = parse_save_request(arguments)
        if isinstance(parsed, Failure):
            return parsed
        return saver.save(parsed.value)
    return Failure(f"Unknown tool: {name}", kind="not_found")
