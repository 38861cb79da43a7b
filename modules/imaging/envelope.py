from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel


T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_error(self) -> bool:
        return False


@dataclass(frozen=True)
class Failure:
    message: str
    kind: str = "internal"

    @property
    def is_error(self) -> bool:
        return True


def _payload(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def to_call_tool_result(result: Success[Any] | Failure) -> dict[str, Any]:
    """Render a result as the tool envelope: one text block plus an ``isError`` flag.

    Successful payloads are serialized to compact JSON text; failures carry their
    message verbatim.
    """
    if isinstance(result, Failure):
        return {"content": [{"type": "text", "text": result.message}], "isError": True}
    payload = _payload(result.value)
    return {
        "content": [{"type": "text", "text": json.dumps(payload, ensure_ascii=False, separators=(",", ":"))}],
        "isError": False,
        "structuredContent": payload,
    }
