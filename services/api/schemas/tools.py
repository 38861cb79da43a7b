from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from modules.imaging.models import GenerationRequest, GenerationResult, SaveRequest, SaveResult


class ToolOut(BaseModel):
    name: str
    title: str
    description: str
    version: str
    inputSchema: dict[str, Any] = Field(default_factory=dict)


class ToolListResponse(BaseModel):
    tools: list[ToolOut] = Field(default_factory=list)


class TextContent(BaseModel):
    type: str = "text"
    text: str


class CallToolResponse(BaseModel):
    content: list[TextContent] = Field(default_factory=list)
    isError: bool = False
    structuredContent: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict | None = None


__all__ = [
    "CallToolResponse",
    "ErrorResponse",
    "GenerationRequest",
    "GenerationResult",
    "SaveRequest",
    "SaveResult",
    "TextContent",
    "ToolListResponse",
    "ToolOut",
]
