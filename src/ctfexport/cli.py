"""Command line interface for ctfexport."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from ctfexport.client import ContentfulClient
from ctfexport.config import ExportSettings, load_settings, save_settings
from ctfexport.exceptions import ConfigError, CtfExportError
from ctfexport.export import ExportOptions, default_output_name, export_entries, open_file
from ctfexport.fields import RICH_TEXT_FORMATS
from ctfexport.markdown import rich_text_to_markdown
from ctfexport.richtext import rich_text_to_html
from ctfexport.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

TOKEN_URL = "https://app.contentful.com/account/profile/cma_tokens"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ctfexport",
        description="Export Contentful entries to an XLSX spreadsheet.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Show debug output")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", help="Export contentful entries to xlsx spreadsheet")
    export.add_argument("entry_ids", help="Comma separated entry ids")
    export.add_argument("file", nargs="?", help="Output XLSX filename")
    export.add_argument("-r", "--recursive", action="store_true", help="Recursively export linked entries")
    export.add_argument(
        "--exclude-content-types",
        default="",
        help="Comma separated content types not followed when exporting recursively",
    )
    export.add_argument(
        "--rich-text",
        choices=RICH_TEXT_FORMATS,
        default="json",
        help="How rich text fields are written to cells",
    )
    export.add_argument("--open", action="store_true", help="Open the workbook once saved")

    subparsers.add_parser("init", help="Configure the management token, space and environment")

    render = subparsers.add_parser("render", help="Render a rich text JSON document")
    render.add_argument("path", type=Path, help="File holding the rich text JSON")
    render.add_argument("--format", choices=("markdown", "html"), default="markdown")

    return parser


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


async def _run_export(args: argparse.Namespace) -> int:
    settings = load_settings()
    entry_ids = _split(args.entry_ids)
    if not entry_ids:
        raise ConfigError("No entry ids given")
    output = Path(args.file or default_output_name(entry_ids))
    options = ExportOptions(
        recursive=args.recursive,
        exclude_content_types=_split(args.exclude_content_types),
        rich_text=args.rich_text,
    )

    async with ContentfulClient(settings.cma_token, space_id=settings.space_id, env_id=settings.env_id) as client:
        result = await export_entries(client, entry_ids, output, options)

    if result.output is None:
        return 1
    if args.open:
        open_file(result.output.resolve())
    return 0


def _choose(prompt: str, choices: Sequence[tuple[str, str]], default: str = "") -> str:
    """Ask the user to pick one of ``(label, value)`` choices by number."""
    if not choices:
        raise ConfigError(f"Nothing to choose from for: {prompt}")
    default_index = next((i for i, (_, value) in enumerate(choices, 1) if value == default), 1)
    for index, (label, value) in enumerate(choices, 1):
        print(f"  {index}) {label} ({value})")
    while True:
        answer = input(f"{prompt} [{default_index}]: ").strip()
        if not answer:
            return choices[default_index - 1][1]
        if answer.isdigit() and 1 <= int(answer) <= len(choices):
            return choices[int(answer) - 1][1]
        print(f"Please enter a number between 1 and {len(choices)}")


def _mask(token: str) -> str:
    return f"{token[:4]}*****{token[-5:-1]}"


async def _run_init(args: argparse.Namespace) -> int:
    current = load_settings(require=False)
    print(f"You can get the management token from here: {TOKEN_URL}")
    print("Click on Generate personal token.  Remember to save your token.  You will not see it again.")
    hint = f" ({_mask(current.cma_token)})" if current.cma_token else " (required)"
    token = getpass.getpass(f"Contentful Management Token{hint}: ").strip() or current.cma_token
    if not token:
        raise ConfigError("Please enter a valid token")

    async with ContentfulClient(token) as client:
        user = await client.get_current_user()
        logger.info("Authenticated as %s", user.first_name or user.email or user.sys.id)

        spaces = await client.get_spaces()
        space_id = _choose(
            "Select space to use",
            [(space.name, space.sys.id) for space in spaces],
            default=current.space_id,
        )

        envs = {"master": "master"}
        for env in await client.get_environments(space_id):
            # master is listed first already
            if env.sys.id != "master":
                envs[env.name] = env.sys.id
        env_id = _choose("Select Environment to use", list(envs.items()), default=current.env_id or "master")

    path = save_settings(ExportSettings(cma_token=token, space_id=space_id, env_id=env_id))
    logger.info("Configuration saved to %s", path)
    return 0


def _run_render(args: argparse.Namespace) -> int:
    try:
        document = json.loads(args.path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CtfExportError(f"Unable to read rich text from {args.path}: {exc}") from exc
    if args.format == "html":
        sys.stdout.write(rich_text_to_html(document))
    else:
        sys.stdout.write(rich_text_to_markdown(document))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, quiet=args.quiet)

    try:
        if args.command == "export":
            return asyncio.run(_run_export(args))
        if args.command == "init":
            return asyncio.run(_run_init(args))
        return _run_render(args)
    except CtfExportError as exc:
        logger.error("[ERROR] %s", exc)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
