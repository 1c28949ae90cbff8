"""Async client for the parts of the Contentful Management API used by exports."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

import httpx

from ctfexport.config import CONTENT_TYPE_LIMIT, CTFEXPORT_API_URL, ENTRY_BATCH_SIZE
from ctfexport.exceptions import ConfigError
from ctfexport.http_utils import build_client, fetch_json
from ctfexport.schemas import Asset, ContentType, ContentTypeField, Entry, Environment, Space, User

logger = logging.getLogger(__name__)


class ContentfulClient:
    """Management API client bound to one space environment.

    Use as an async context manager so the underlying connection pool is
    closed when the export finishes::

        async with ContentfulClient(token, space_id="abc") as client:
            entries = await client.get_entries(["one", "two"])
    """

    def __init__(
        self,
        token: str,
        *,
        space_id: str | None = None,
        env_id: str = "master",
        base_url: str = CTFEXPORT_API_URL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.token = token
        self.space_id = space_id
        self.env_id = env_id or "master"
        self.base_url = base_url.rstrip("/")
        self._http = http_client
        self._owns_http = http_client is None

    async def __aenter__(self) -> ContentfulClient:
        if self._http is None:
            self._http = build_client(self.token)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def _get(self, path: str, params: dict[str, Any] | None = None, **kwargs: Any) -> Any:
        return await fetch_json(
            f"{self.base_url}{path}",
            token=self.token,
            params=params,
            client=self._http,
            **kwargs,
        )

    def _environment_path(self) -> str:
        if not self.space_id:
            raise ConfigError("No Contentful space selected")
        return f"/spaces/{self.space_id}/environments/{self.env_id}"

    async def get_current_user(self) -> User:
        return User.model_validate(await self._get("/users/me"))

    async def get_spaces(self) -> list[Space]:
        payload = await self._get("/spaces")
        return [Space.model_validate(item) for item in payload.get("items", [])]

    async def get_environments(self, space_id: str) -> list[Environment]:
        payload = await self._get(f"/spaces/{space_id}/environments")
        return [Environment.model_validate(item) for item in payload.get("items", [])]

    async def get_content_types(self, content_type_id: str = "") -> list[ContentType]:
        """Return one content type, or every content type of the environment."""
        if content_type_id:
            payload = await self._get(f"{self._environment_path()}/content_types/{content_type_id}")
            return [ContentType.model_validate(payload)]
        payload = await self._get(
            f"{self._environment_path()}/content_types",
            params={"limit": CONTENT_TYPE_LIMIT},
        )
        return [ContentType.model_validate(item) for item in payload.get("items", [])]

    async def get_entry(self, entry_id: str) -> Entry:
        payload = await self._get(
            f"{self._environment_path()}/entries/{entry_id}",
            on_404_message=f"Entry {entry_id} not found",
        )
        return Entry.model_validate(payload)

    async def get_entries(self, ids: Sequence[str]) -> list[Entry]:
        """Fetch entries by id in batches of ``ENTRY_BATCH_SIZE``."""
        entries: list[Entry] = []
        for start in range(0, len(ids), ENTRY_BATCH_SIZE):
            chunk = ids[start : start + ENTRY_BATCH_SIZE]
            payload = await self._get(
                f"{self._environment_path()}/entries",
                params={"sys.id[in]": ",".join(chunk)},
            )
            entries.extend(Entry.model_validate(item) for item in payload.get("items", []))
            logger.debug("Fetched %d of %d entries", len(entries), len(ids))
        return entries


def get_name(entry_or_asset: Entry | Asset | None, locale: str = "en-US") -> str:
    """Best human readable name of an entry or asset."""
    if entry_or_asset is None:
        return "unknown name"
    fields = entry_or_asset.fields
    candidates = ("internalName", "title", "id") if entry_or_asset.sys.type == "Entry" else ("title",)
    for key in candidates:
        value = fields.get(key, {}).get(locale)
        if value:
            return str(value)
    return "unknown name"


def get_filtered_fields(
    content_type: ContentType | None, filter_fields: Iterable[str] = ()
) -> list[ContentTypeField]:
    """Fields of a content type, optionally restricted to ``filter_fields``."""
    if content_type is None:
        return []
    wanted = set(filter_fields)
    if not wanted:
        return list(content_type.fields)
    return [field for field in content_type.fields if field.id in wanted]
