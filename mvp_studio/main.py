"""Entry point: loads wizard input, runs the prompt flow to completion, writes the export."""

import asyncio
import sys
from pathlib import Path

import yaml

from mvp_studio.config import get_config
from mvp_studio.controller import StageController
from mvp_studio.generation import get_generator
from mvp_studio.utils.formatter import EXPORT_FORMATS, export_bundle, write_export
from mvp_studio.utils.validator import validate_wizard_input


def _pop_option(args: list[str], flag: str) -> str | None:
    """Remove '--flag value' from args and return the value."""
    if flag not in args:
        return None
    i = args.index(flag)
    if i + 1 >= len(args):
        raise SystemExit(f"{flag} requires a value.")
    value = args[i + 1]
    del args[i:i + 2]
    return value


def run(
    raw_input: dict,
    export_format: str | None = None,
    builder_id: str | None = None,
    output_dir: str | Path | None = None,
) -> Path:
    """Run the whole prompt flow non-interactively and write the export.

    Args:
        raw_input: Collected wizard fields (validated here).
        export_format: One of EXPORT_FORMATS. None uses config default.
        builder_id: Builder to render for. None uses the top-ranked tool.
        output_dir: Override for the configured output directory.
    """
    config = get_config()
    export_format = export_format or config.get("default_export_format", "markdown")
    wizard_input = validate_wizard_input(raw_input)

    controller = StageController(builder_id=builder_id)
    asyncio.run(controller.start(get_generator(), wizard_input))

    while controller.state["stage"] != "complete":
        controller.next()

    bundle = controller.bundle
    content = export_bundle(
        bundle,
        export_format,
        builder_id=controller.builder_id,
        enhancements=controller.enhancements,
    )
    output_path = write_export(content, bundle["app_name"], export_format, output_dir)

    print(f"[MVP] App: {bundle['app_name']} ({bundle['complexity']})")
    print(f"[MVP] Pages: {', '.join(p['page_name'] for p in bundle['page_prompts'])}")
    print(f"[MVP] Prompts recorded: {len(controller.history)}")
    print(f"[MVP] Output written to: {output_path}")
    return output_path


def main() -> None:
    """CLI entry point. Accepts a YAML wizard input file as argument or on stdin."""
    args = sys.argv[1:]
    export_format = _pop_option(args, "--format")
    builder_id = _pop_option(args, "--builder")

    if export_format and export_format not in EXPORT_FORMATS:
        raise SystemExit(f"Unknown format '{export_format}'. Choose from: {', '.join(EXPORT_FORMATS)}")

    if args:
        text = Path(args[0]).read_text(encoding="utf-8")
    else:
        print("Paste your wizard input as YAML (Ctrl+D / Ctrl+Z to submit):")
        text = sys.stdin.read()

    raw_input = yaml.safe_load(text) or {}
    run(raw_input, export_format=export_format, builder_id=builder_id)


if __name__ == "__main__":
    main()
