"""ctfexport: export Contentful entries to XLSX spreadsheets."""

from ctfexport.exceptions import (
    AuthenticationError,
    ConfigError,
    CtfExportError,
    FetchError,
    NotFoundError,
    RateLimitError,
    WorkbookError,
)
from ctfexport.export import ExportOptions, ExportResult, build_rows, export_entries
from ctfexport.fields import format_field_value
from ctfexport.markdown import rich_text_to_markdown
from ctfexport.richtext import RenderOptions, render_nodes, rich_text_to_html

__all__ = [
    "AuthenticationError",
    "ConfigError",
    "CtfExportError",
    "ExportOptions",
    "ExportResult",
    "FetchError",
    "NotFoundError",
    "RateLimitError",
    "RenderOptions",
    "WorkbookError",
    "build_rows",
    "export_entries",
    "format_field_value",
    "render_nodes",
    "rich_text_to_html",
    "rich_text_to_markdown",
]
