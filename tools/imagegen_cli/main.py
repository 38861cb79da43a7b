from __future__ import annotations

import argparse
import json
import sys

from modules.imaging.envelope import Failure
from modules.imaging.errors import ConfigurationError, RequestValidationError
from modules.imaging.generation import ImageGenerator
from modules.imaging.persistence import ImageSaver
from modules.imaging.tools import IMAGE_GENERATION, SAVE_GENERATED_IMAGES, call_tool, list_tools
from services.api.config import get_settings


def _emit(result) -> int:  # type: ignore[no-untyped-def]
    if isinstance(result, Failure):
        print(json.dumps({"error": {"code": result.kind, "message": result.message}}, ensure_ascii=False))
        return 2 if result.kind == RequestValidationError.kind else 3
    print(json.dumps(result.value.model_dump(mode="json"), ensure_ascii=False))
    return 0


def cmd_tools_list(args: argparse.Namespace) -> int:  # noqa: ARG001
    print(json.dumps({"tools": [t.as_dict() for t in list_tools()]}, ensure_ascii=False))
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    settings = get_settings()
    arguments = {"prompt": args.prompt, "size": args.size, "quality": args.quality, "style": args.style, "n": args.n}
    try:
        result = call_tool(
            IMAGE_GENERATION,
            arguments,
            generator=ImageGenerator.from_settings(settings),
            saver=ImageSaver(default_dir=settings.output_dir),
        )
    except ConfigurationError as exc:
        print(json.dumps({"error": {"code": exc.kind, "message": str(exc)}}), file=sys.stderr)
        return 2
    return _emit(result)


def cmd_save(args: argparse.Namespace) -> int:
    settings = get_settings()
    arguments: dict = {"urls": list(args.urls), "prompt": args.prompt}
    if args.revised_prompt:
        arguments["revisedPrompts"] = list(args.revised_prompt)
    if args.output_dir:
        arguments["outputDir"] = args.output_dir
    result = call_tool(
        SAVE_GENERATED_IMAGES,
        arguments,
        generator=ImageGenerator.from_settings(settings),
        saver=ImageSaver(default_dir=settings.output_dir),
    )
    return _emit(result)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="imagegen", description="Generate images and save them locally")
    sp = p.add_subparsers(dest="cmd")

    p_tools = sp.add_parser("tools", help="Tool descriptors")
    spt = p_tools.add_subparsers(dest="subcmd")
    p_tl = spt.add_parser("list", help="List tools with their input schemas")
    p_tl.set_defaults(func=cmd_tools_list)

    p_gen = sp.add_parser("generate", help="Generate images from a prompt (prints URLs)")
    p_gen.add_argument("prompt", help="Text prompt")
    p_gen.add_argument("--size", default="1024x1024", help="1024x1024 | 1024x1792 | 1792x1024")
    p_gen.add_argument("--quality", default="standard", help="standard | hd")
    p_gen.add_argument("--style", default="vivid", help="vivid | natural")
    p_gen.add_argument("--n", type=int, default=1, help="Number of images (1..10)")
    p_gen.set_defaults(func=cmd_generate)

    p_save = sp.add_parser("save", help="Download image URLs into a directory with JSON sidecars")
    p_save.add_argument("urls", nargs="*", help="Image URLs")
    p_save.add_argument("--prompt", required=True, help="Prompt used to generate the images")
    p_save.add_argument("--revised-prompt", action="append", default=None, help="Revised prompt per URL (repeatable)")
    p_save.add_argument("--output-dir", default=None, help="Target directory (default: ./images)")
    p_save.set_defaults(func=cmd_save)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    if not hasattr(ns, "func"):
        parser.print_help()
        return 1
    return int(ns.func(ns))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
