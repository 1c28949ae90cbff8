"""Export pipeline: Contentful entries -> spreadsheet rows -> XLSX."""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ctfexport.client import ContentfulClient, get_filtered_fields
from ctfexport.config import CTFEXPORT_LOCALES
from ctfexport.fields import RichTextFormat, format_field_value
from ctfexport.references import ReferenceResolver
from ctfexport.schemas import ContentType, Entry
from ctfexport.workbook import Row, create_workbook, save_workbook

logger = logging.getLogger(__name__)

SHEET_NAME = "dm batcheditexport"


@dataclass
class ExportOptions:
    """Options for an entry export.

    Attributes:
        recursive: If True, also export every entry reachable through links.
        exclude_content_types: Content types not followed when recursive.
        rich_text: Serialization used for rich-text fields.
        locales: Locale columns; the first is the primary locale.
    """

    recursive: bool = False
    exclude_content_types: list[str] = field(default_factory=list)
    rich_text: RichTextFormat = "json"
    locales: list[str] = field(default_factory=lambda: list(CTFEXPORT_LOCALES))


@dataclass
class ExportResult:
    """Outcome of an export; ``output`` is None when nothing was written."""

    output: Path | None
    entry_count: int
    row_count: int


def default_output_name(entry_ids: Sequence[str]) -> str:
    return f"ctf-export-{entry_ids[0] if entry_ids else 'noentry'}.xlsx"


def unique_ids(entry_ids: Iterable[str]) -> list[str]:
    """Strip and de-duplicate ids, keeping their first-seen order."""
    return list(dict.fromkeys(entry_id.strip() for entry_id in entry_ids if entry_id.strip()))


def build_rows(
    entries: Iterable[Entry],
    content_types: Mapping[str, ContentType],
    *,
    locales: Sequence[str],
    rich_text: RichTextFormat = "json",
) -> list[Row]:
    """Flatten entries into one row per field.

    Fields without a value in the primary locale are skipped. The entry id is
    only written on an entry's first row to keep the sheet readable, and
    tagged entries get an extra ``metadata`` row.
    """
    primary_locale = locales[0] if locales else "en-US"
    rows: list[Row] = []

    for entry in entries:
        model = entry.content_type_id
        fields = get_filtered_fields(content_types.get(model))
        entry_id = entry.sys.id

        for content_field in fields:
            localized = entry.fields.get(content_field.id, {})
            if localized.get(primary_locale) is None:
                continue
            row: Row = {"id": entry_id, "model": model, "field": content_field.id}
            entry_id = ""
            for locale in locales:
                value = format_field_value(localized.get(locale), content_field.type, rich_text=rich_text)
                if value:
                    row[locale] = value
            rows.append(row)

        tags = entry.tag_ids
        if tags:
            rows.append(
                {
                    "id": entry_id,
                    "model": model,
                    "field": "metadata",
                    primary_locale: f"tags:{','.join(tags)}",
                }
            )

    return rows


async def export_entries(
    client: ContentfulClient,
    entry_ids: Sequence[str],
    output: str | Path,
    options: ExportOptions | None = None,
) -> ExportResult:
    """Fetch entries and write them to an XLSX workbook.

    Args:
        client: Client bound to the source space environment.
        entry_ids: Entries to export.
        output: Workbook path.
        options: Export options. Uses defaults if None.

    Returns:
        The export result. No file is written when no rows were produced.
    """
    opts = options or ExportOptions()
    ids = unique_ids(entry_ids)

    if opts.recursive:
        resolver = ReferenceResolver(client, locale=opts.locales[0] if opts.locales else "en-US")
        visited: set[str] = set()
        expanded: list[str] = []
        for entry_id in ids:
            if entry_id in visited:
                continue
            refs = await resolver.find_all_linked_references(
                entry_id, opts.exclude_content_types, visited=visited
            )
            expanded.extend(refs.entries)
        ids = unique_ids(expanded)

    content_types = {content_type.sys.id: content_type for content_type in await client.get_content_types()}
    entries = await client.get_entries(ids)
    rows = build_rows(entries, content_types, locales=opts.locales, rich_text=opts.rich_text)

    if not rows:
        logger.warning("No file created. Could not find entries.")
        return ExportResult(output=None, entry_count=len(entries), row_count=0)

    workbook = create_workbook({SHEET_NAME: rows})
    logger.info("Saving %s with %d entries", output, len(entries))
    path = save_workbook(workbook, output)
    return ExportResult(output=path, entry_count=len(entries), row_count=len(rows))


def open_file(path: Path) -> None:
    """Open a file with the platform's default application."""
    logger.info("Opening %s", path)
    if sys.platform == "darwin":
        subprocess.run(["open", str(path)], check=False)
    elif sys.platform == "win32":
        # explorer exits non-zero even on success
        subprocess.run(["explorer", str(path)], check=False)
