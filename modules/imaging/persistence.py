from __future__ import annotations

import json
import re
import sys
import time
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path
from typing import Callable, Protocol, Sequence

from .envelope import Failure, Success
from .errors import DownloadError, ImagingError, StorageError
from .models import SaveRequest, SaveResult


IMAGE_EXTENSION = ".png"
PROMPT_PREFIX_LEN = 30
_UNSAFE = re.compile(r"[^a-zA-Z0-9]")


class Fetcher(Protocol):
    def fetch(self, url: str) -> bytes:
        ...


class UrllibFetcher:
    """Download an http(s) URL into memory. Other schemes, non-2xx responses and transport errors raise DownloadError."""

    schemes = frozenset({"http", "https"})

    def fetch(self, url: str) -> bytes:
        if urllib.parse.urlsplit(url).scheme.lower() not in self.schemes:
            raise DownloadError(f"unsupported URL scheme for {url}")
        req = urllib.request.Request(url)
        try:
            with urllib.request.urlopen(req) as resp:  # nosec - caller supplied provider URLs
                return resp.read()
        except urllib.error.HTTPError as exc:
            raise DownloadError(f"download of {url} failed with HTTP {exc.code}") from exc
        except (urllib.error.URLError, ValueError, OSError) as exc:
            raise DownloadError(f"download of {url} failed: {exc}") from exc


def _now_ms() -> int:
    return int(time.time() * 1000)


def default_output_dir() -> Path:
    return Path.cwd() / "images"


def derive_filename(prompt: str, timestamp: int, index: int) -> str:
    safe_prompt = _UNSAFE.sub("-", prompt[:PROMPT_PREFIX_LEN]).lower()
    return f"{safe_prompt}-{timestamp}-{index}{IMAGE_EXTENSION}"


def _ensure_dir(target: Path) -> None:
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"Failed to create directory: {exc}") from exc


def _write_record(path: Path, data: bytes, metadata: dict) -> None:
    try:
        path.write_bytes(data)
        sidecar = path.with_name(path.name + ".json")
        sidecar.write_text(json.dumps(metadata, ensure_ascii=False, indent=2), encoding="utf-8")
    except OSError as exc:
        raise StorageError(f"Failed to write {path}: {exc}") from exc


def save_generated_images(
    urls: Sequence[str],
    prompt: str,
    target_dir: Path,
    *,
    revised_prompts: Sequence[str | None] | None = None,
    fetcher: Fetcher,
    timestamp: int,
) -> list[Path]:
    """Download ``urls`` in order and write each image plus its JSON sidecar.

    Stops at the first failing URL; files written before it stay on disk.
    """
    _ensure_dir(target_dir)
    revised = list(revised_prompts or [])
    saved: list[Path] = []
    for i, url in enumerate(urls):
        data = fetcher.fetch(url)
        filename = derive_filename(prompt, timestamp, i)
        path = target_dir / filename
        metadata = {
            "original_prompt": prompt,
            "revised_prompt": revised[i] if i < len(revised) else None,
            "url": url,
            "timestamp": timestamp,
            "filename": filename,
        }
        _write_record(path, data, metadata)
        print(f"[save] wrote {path} ({len(data)} bytes)", file=sys.stderr)
        saved.append(path)
    return saved


class ImageSaver:
    """Persistence adapter returning a result envelope instead of raising."""

    def __init__(
        self,
        *,
        fetcher: Fetcher | None = None,
        clock: Callable[[], int] | None = None,
        default_dir: str | Path | None = None,
    ) -> None:
        self._fetcher = fetcher or UrllibFetcher()
        self._clock = clock or _now_ms
        self._default_dir = Path(default_dir) if default_dir else None

    def resolve_dir(self, output_dir: str | None) -> Path:
        if output_dir:
            return Path(output_dir).expanduser()
        return self._default_dir or default_output_dir()

    def save(self, request: SaveRequest) -> Success[SaveResult] | Failure:
        target = self.resolve_dir(request.output_dir)
        timestamp = self._clock()
        try:
            paths = save_generated_images(
                request.urls,
                request.prompt,
                target,
                revised_prompts=request.revised_prompts,
                fetcher=self._fetcher,
                timestamp=timestamp,
            )
        except ImagingError as exc:
            print(f"[save] failed: {exc}", file=sys.stderr)
            return Failure(f"Failed to save images: {exc}", kind=exc.kind)
        except Exception as exc:  # noqa: BLE001
            print(f"[save] failed: {exc}", file=sys.stderr)
            return Failure(f"Failed to save images: {exc}", kind="internal")
        saved_paths = [str(p) for p in paths]
        return Success(
            SaveResult(
                saved_paths=saved_paths,
                message=f"Successfully saved {len(saved_paths)} images to {target} directory",
            )
        )
