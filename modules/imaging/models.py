from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


ImageSize = Literal["1024x1024", "1024x1792", "1792x1024"]
ImageQuality = Literal["standard", "hd"]
ImageStyle = Literal["vivid", "natural"]


class GenerationRequest(BaseModel):
    prompt: str = Field(min_length=1, description="The text prompt to generate an image from")
    size: ImageSize = Field(default="1024x1024", description="The size of the generated image")
    quality: ImageQuality = Field(default="standard", description="The quality of the generated image")
    style: ImageStyle = Field(default="vivid", description="The style of the generated image")
    n: int = Field(default=1, ge=1, le=10, description="The number of images to generate")


@dataclass(frozen=True)
class GeneratedImage:
    url: str
    revised_prompt: str | None = None


class GenerationResult(BaseModel):
    urls: list[str] = Field(default_factory=list)
    revised_prompts: list[str | None] = Field(default_factory=list)

    @classmethod
    def from_images(cls, images: list[GeneratedImage]) -> "GenerationResult":
        return cls(urls=[i.url for i in images], revised_prompts=[i.revised_prompt for i in images])


class SaveRequest(BaseModel):
    # Wire names are camelCase; python callers may use either form.
    model_config = ConfigDict(populate_by_name=True)

    urls: list[str] = Field(description="Array of image URLs to save")
    prompt: str = Field(description="The original prompt used to generate the images")
    revised_prompts: list[str | None] | None = Field(
        default=None, alias="revisedPrompts", description="Optional array of revised prompts, index-aligned with urls"
    )
    output_dir: str | None = Field(
        default=None,
        alias="outputDir",
        description="Full absolute path to the directory where images should be saved. Created if missing.",
    )


class SaveResult(BaseModel):
    saved_paths: list[str] = Field(default_factory=list)
    message: str
