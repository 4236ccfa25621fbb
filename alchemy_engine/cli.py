"""Alchemy CLI entrypoints."""

from __future__ import annotations

import argparse
import json
import sys
import time
import uuid
from pathlib import Path

from .agent import VibeAgent
from .effects.parser import parse_effects
from .effects.reconstruct import reconstruct_command
from .grammar.splitter import split_command
from .grammar.validator import validate_command
from .invocation.dispatcher import EngineDispatcher
from .invocation.magick import EngineError, EngineJob, EngineResult, MagickRunner
from .invocation.sanitizer import sanitize_command
from .presets import CATALOGS
from .raster import RawImage, load_raw_image, save_raw_image
from .runs.events import EventWriter
from .settings import AlchemySettings
from .sources import default_registry
from .stack.store import EffectStack
from .utils import load_dotenv, serialize


def _parse_size(value: str) -> tuple[int, int]:
    parts = value.lower().split("x")
    try:
        width, height = (int(part) for part in parts)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {value!r}") from exc
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"Size must be positive, got {value!r}")
    return width, height


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="alchemy", description="Alchemy image command pipeline")
    sub = parser.add_subparsers(dest="command")

    validate = sub.add_parser("validate", help="Validate command text")
    validate.add_argument("text")

    split = sub.add_parser("split", help="Split command text into stack entries")
    split.add_argument("text")

    effects = sub.add_parser("effects", help="Parse command text into editable effects")
    effects.add_argument("text")
    effects.add_argument("--reconstruct", action="store_true", help="Print the rebuilt command instead")

    invoke = sub.add_parser("invoke", help="Print the sanitized engine invocation")
    invoke.add_argument("text")
    invoke.add_argument("--size", type=_parse_size, required=True, help="WIDTHxHEIGHT")
    invoke.add_argument("--export", action="store_true")

    presets = sub.add_parser("presets", help="List preset commands")
    presets.add_argument("--catalog", choices=sorted(CATALOGS.keys()))

    run = sub.add_parser("run", help="Apply a vibe to an image")
    run.add_argument("--image", required=True, help="Input image path")
    run.add_argument("--vibe", required=True)
    run.add_argument("--out", required=True, help="Output image path")
    run.add_argument("--events", help="Path to events.jsonl")
    run.add_argument("--source", default="dryrun")
    run.add_argument("--export", action="store_true", help="Write a JPEG at full quality")

    return parser


def _handle_validate(args: argparse.Namespace) -> int:
    result = validate_command(args.text)
    print(result.command)
    for reason in result.stripped:
        print(f"Stripped: {reason}")
    return 0


def _handle_split(args: argparse.Namespace) -> int:
    for entry in split_command(args.text):
        print(f"{entry.label}\t{entry.command}")
    return 0


def _handle_effects(args: argparse.Namespace) -> int:
    effects = parse_effects(args.text)
    if args.reconstruct:
        print(reconstruct_command(effects))
    else:
        print(json.dumps(serialize(effects), indent=2))
    return 0


def _handle_invoke(args: argparse.Namespace) -> int:
    width, height = args.size
    print(sanitize_command(args.text, width, height, export=args.export))
    return 0


def _handle_presets(args: argparse.Namespace) -> int:
    names = [args.catalog] if args.catalog else list(CATALOGS.keys())
    for catalog in names:
        print(f"[{catalog}]")
        for name, command in CATALOGS[catalog].items():
            print(f"  {name}: {command}")
    return 0


def _handle_run(args: argparse.Namespace) -> int:
    settings = AlchemySettings.from_env()
    out_path = Path(args.out)
    events_path = Path(args.events) if args.events else out_path.parent / "events.jsonl"
    events = EventWriter(events_path, str(uuid.uuid4()))

    source = default_registry(seed=settings.seed).get(args.source)
    if source is None:
        print(f"Unknown source: {args.source}")
        return 1

    image = load_raw_image(Path(args.image), max_dimension=settings.max_dimension, retro=settings.retro)
    stack = EffectStack()
    agent = VibeAgent(stack, source, events)
    try:
        entries = agent.process_vibe(args.vibe)
    except Exception as exc:
        print(f"Generation failed: {exc}")
        return 1
    for entry in entries:
        print(f"+ [{entry.provenance}] {entry.label}: {entry.command}")

    command = stack.build_command()
    failures: list[EngineError] = []

    def _on_done(job: EngineJob, result: EngineResult) -> None:
        if result.export:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_bytes(result.data)
        else:
            save_raw_image(RawImage(result.width, result.height, result.data), out_path)
        events.emit("engine_finished", args=result.args, elapsed_s=result.elapsed_s, out=str(out_path))

    def _on_error(job: EngineJob, error: EngineError) -> None:
        failures.append(error)
        events.emit("engine_failed", error=str(error), stderr=error.stderr)

    runner = MagickRunner(binary=settings.magick_binary)
    dispatcher = EngineDispatcher(runner.run, on_done=_on_done, on_error=_on_error)
    start = time.monotonic()
    print(f"Rendering: {command}")
    dispatcher.submit(EngineJob(command=command, image=image, export=args.export))
    dispatcher.wait_idle()
    if failures:
        error = failures[-1]
        print(f"Engine failed: {error}")
        if error.stderr:
            print(error.stderr.strip())
        return 1
    print(f"Wrote {out_path} in {time.monotonic() - start:.2f}s")
    return 0


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command == "validate":
        raise SystemExit(_handle_validate(args))
    if args.command == "split":
        raise SystemExit(_handle_split(args))
    if args.command == "effects":
        raise SystemExit(_handle_effects(args))
    if args.command == "invoke":
        raise SystemExit(_handle_invoke(args))
    if args.command == "presets":
        raise SystemExit(_handle_presets(args))
    if args.command == "run":
        raise SystemExit(_handle_run(args))
    parser.print_help(sys.stdout)
    raise SystemExit(1)


if __name__ == "__main__":
    main()
