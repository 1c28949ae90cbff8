"""Follow entry links to collect everything an entry references."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ctfexport.client import ContentfulClient, get_name
from ctfexport.exceptions import FetchError, NotFoundError
from ctfexport.schemas import Entry

logger = logging.getLogger(__name__)


@dataclass
class References:
    """Entry and asset ids found while walking links."""

    entries: list[str] = field(default_factory=list)
    assets: list[str] = field(default_factory=list)

    def extend(self, other: References) -> None:
        self.entries.extend(other.entries)
        self.assets.extend(other.assets)


def _link_target(value: Any) -> tuple[str, str] | None:
    if not isinstance(value, dict):
        return None
    sys = value.get("sys")
    if not isinstance(sys, dict) or sys.get("type") != "Link" or not sys.get("id"):
        return None
    return sys.get("linkType", ""), sys["id"]


def find_references_in_entry(entry: Entry, locale: str = "en-US") -> References:
    """Collect ids of entries and assets linked from an entry's fields.

    Only single links and arrays of links in ``locale`` are considered;
    links inside rich text are not followed.
    """
    result = References()
    for localized in entry.fields.values():
        value = localized.get(locale)
        values = value if isinstance(value, list) else [value]
        for item in values:
            target = _link_target(item)
            if target is None:
                continue
            link_type, target_id = target
            if link_type == "Entry":
                result.entries.append(target_id)
            elif link_type == "Asset":
                result.assets.append(target_id)
    return result


class ReferenceResolver:
    """Depth-first walk over entry links with a flat entry cache."""

    def __init__(self, client: ContentfulClient, locale: str = "en-US") -> None:
        self.client = client
        self.locale = locale
        self._entry_cache: dict[str, Entry] = {}

    async def get_entry(self, entry_id: str, silent: bool = False) -> Entry | None:
        """Get an entry through the cache.

        Missing or unreadable entries are logged and returned as None so that
        a bad reference does not stop an export.
        """
        entry = self._entry_cache.get(entry_id)
        if entry is not None:
            return entry

        try:
            entry = await self.client.get_entry(entry_id)
        except NotFoundError:
            if not silent:
                logger.error("[ERROR] unable to find entry id %s", entry_id)
            return None
        except FetchError as exc:
            logger.error("[ERROR] unable to fetch entry id %s: %s", entry_id, exc)
            return None

        self._entry_cache[entry_id] = entry
        return entry

    async def find_all_linked_references(
        self,
        entry_id: str,
        exclude_content_types: Iterable[str] = (),
        *,
        depth: int = 0,
        visited: set[str] | None = None,
    ) -> References:
        """Recursively collect the entry and every entry it links to.

        Args:
            entry_id: Entry to start from.
            exclude_content_types: Content types whose entries are skipped
                along with everything below them.
            depth: Current depth, used to indent the log tree.
            visited: Entry ids already walked.

        Returns:
            References with ``entry_id`` first, then linked entries in walk
            order, and all linked asset ids.
        """
        seen = visited if visited is not None else set()
        excluded = set(exclude_content_types)
        entry = await self.get_entry(entry_id)
        if entry is None:
            return References()

        indent = "  " * depth
        logger.info("%s%s[%s] %s", indent, entry_id, entry.content_type_id, get_name(entry, self.locale))
        if entry.content_type_id in excluded:
            logger.info("%sskipping...", indent)
            return References()

        seen.add(entry_id)
        links = find_references_in_entry(entry, self.locale)
        result = References(entries=[entry_id], assets=list(links.assets))
        for linked_id in links.entries:
            if linked_id in seen:
                continue
            result.extend(
                await self.find_all_linked_references(
                    linked_id, excluded, depth=depth + 1, visited=seen
                )
            )
        return result
