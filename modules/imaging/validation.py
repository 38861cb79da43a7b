from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from .envelope import Failure, Success
from .errors import RequestValidationError
from .models import GenerationRequest, SaveRequest


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "request"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def _parse(model: type[BaseModel], raw: Mapping[str, Any] | None) -> Success[Any] | Failure:
    try:
        return Success(model.model_validate(dict(raw or {})))
    except ValidationError as exc:
        return Failure(f"Invalid arguments: {_describe(exc)}", kind=RequestValidationError.kind)


def parse_generation_request(raw: Mapping[str, Any] | None) -> Success[GenerationRequest] | Failure:
    return _parse(GenerationRequest, raw)


def parse_save_request(raw: Mapping[str, Any] | None) -> Success[SaveRequest] | Failure:
    return _parse(SaveRequest, raw)
