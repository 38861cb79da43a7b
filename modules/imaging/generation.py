from __future__ import annotations

import sys
from typing import Any, Protocol

from .envelope import Failure, Success
from .errors import ConfigurationError, ProviderError
from .models import GeneratedImage, GenerationRequest, GenerationResult


DEFAULT_MODEL = "dall-e-3"


class ImageProvider(Protocol):
    """Interface for text-to-image providers.

    Implementations make exactly one upstream call per ``generate`` and return images in
    the order the provider reported them.
    """

    def generate(self, request: GenerationRequest) -> list[GeneratedImage]:
        ...


class OpenAIImageProvider:
    def __init__(self, *, api_key: str, model: str = DEFAULT_MODEL, base_url: str | None = None, client: Any = None) -> None:
        if client is None:
            from openai import OpenAI  # lazy import

            client = OpenAI(api_key=api_key, base_url=base_url)
        self._client = client
        self.model = model

    def generate(self, request: GenerationRequest) -> list[GeneratedImage]:
        response = self._client.images.generate(
            model=self.model,
            prompt=request.prompt,
            n=request.n,
            size=request.size,
            quality=request.quality,
            style=request.style,
        )
        data = getattr(response, "data", None)
        if data is None:
            raise ProviderError("provider response contained no image data")
        images: list[GeneratedImage] = []
        for i, item in enumerate(data):
            url = getattr(item, "url", None)
            if not url:
                raise ProviderError(f"provider response item {i} has no url")
            images.append(GeneratedImage(url=url, revised_prompt=getattr(item, "revised_prompt", None)))
        return images


class ImageGenerator:
    """Generation adapter: credential check, one provider call, response mapping.

    The credential is fixed at construction. ``provider`` may be injected (tests, other
    backends); otherwise an OpenAI provider is built on first use.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        base_url: str | None = None,
        provider: ImageProvider | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._provider = provider

    @classmethod
    def from_settings(cls, settings: Any, provider: ImageProvider | None = None) -> "ImageGenerator":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            provider=provider,
        )

    def _get_provider(self) -> ImageProvider:
        if not self._api_key:
            raise ConfigurationError("OpenAI API key is not available")
        if self._provider is None:
            self._provider = OpenAIImageProvider(api_key=self._api_key, model=self._model, base_url=self._base_url)
        return self._provider

    def generate(self, request: GenerationRequest) -> Success[GenerationResult] | Failure:
        provider = self._get_provider()  # ConfigurationError propagates to the host
        print(f"[gen] request n={request.n} size={request.size} quality={request.quality} style={request.style}", file=sys.stderr)
        try:
            images = provider.generate(request)
        except Exception as exc:  # noqa: BLE001
            print(f"[gen] failed: {exc}", file=sys.stderr)
            return Failure(f"Image generation failed: {exc}", kind=ProviderError.kind)
        print(f"[gen] done images={len(images)}", file=sys.stderr)
        return Success(GenerationResult.from_images(images))
