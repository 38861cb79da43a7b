from __future__ import annotations

import argparse
import json
from pathlib import Path

from modules.imaging.tools import list_tools
from services.api.app import app


def _write_json(out: Path, payload: object) -> None:
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, separators=(",", ":"), sort_keys=True)
    print(f"Wrote {out}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Export the HTTP OpenAPI document and the tool descriptors")
    parser.add_argument("--out", default="docs/openapi/openapi.v1.json", help="Output path for the OpenAPI JSON")
    parser.add_argument("--tools-out", default=None, help="Optional output path for tool descriptors JSON")
    args = parser.parse_args(argv)

    _write_json(Path(args.out), app.openapi())
    if args.tools_out:
        _write_json(Path(args.tools_out), {"tools": [t.as_dict() for t in list_tools()]})


if __name__ == "__main__":
    main()
