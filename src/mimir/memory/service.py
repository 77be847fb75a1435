"""Validated access to the memory store."""

import html
import logging
import re

from ..config import MemoryConfig
from ..errors import ValidationError
from .keywords import extract_keywords, rank_by_relevance
from .models import MemoryRecord
from .store import InMemoryStore, MemoryStore

logger = logging.getLogger(__name__)

_SCRIPT_BLOCK = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE)
_STYLE_BLOCK = re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")


def strip_markup(text: str) -> str:
    """Remove script/style blocks and HTML tags from text.

    Entities are decoded before stripping, repeatedly, so encoded markup
    such as ``&lt;script&gt;`` is removed rather than stored as a tag.
    Stripping also repeats until nothing changes, for tags split around
    other tags.
    """
    decoded = html.unescape(text)
    while decoded != text:
        text, decoded = decoded, html.unescape(decoded)

    while True:
        stripped = _TAG.sub("", _STYLE_BLOCK.sub("", _SCRIPT_BLOCK.sub("", text)))
        if stripped == text:
            return stripped.strip()
        text = stripped


class MemoryService:
    """Validation and sanitization wrapper around a MemoryStore.

    Every write goes through here, whichever path it came from: explicit
    commands, model-reviewed updates, memory tools or direct API calls.
    """

    def __init__(
        self,
        store: MemoryStore | None = None,
        config: MemoryConfig | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Backend storage. Defaults to a fresh InMemoryStore.
            config: Size limits and write policy.
        """
        self.store = store if store is not None else InMemoryStore()
        self.config = config or MemoryConfig()

    def store_memory(self, description: str, content: str) -> MemoryRecord:
        """Store a new memory.

        Args:
            description: Short label for the memory.
            content: The fact to remember.

        Returns:
            The created record.

        Raises:
            ValidationError: If either field is empty, not a string or too long.
        """
        description = self._prepare(
            "description", description, self.config.max_description_length
        )
        content = self._prepare("content", content, self.config.max_content_length)
        record = self.store.create(description, content)
        logger.debug("Stored memory %s (%s)", record.id, record.description)
        return record

    def get_memory(self, record_id: str) -> MemoryRecord | None:
        return self.store.get(record_id)

    def get_all_memories(self) -> list[MemoryRecord]:
        return self.store.get_all()

    def update_memory(
        self,
        record_id: str,
        description: str | None = None,
        content: str | None = None,
    ) -> MemoryRecord | None:
        """Update the provided fields of a memory.

        Fields left as None are not touched.

        Returns:
            The updated record, or None if no memory has that id.

        Raises:
            ValidationError: If a provided field fails validation.
        """
        if description is not None:
            description = self._prepare(
                "description", description, self.config.max_description_length
            )
        if content is not None:
            content = self._prepare("content", content, self.config.max_content_length)

        record = self.store.update(record_id, description=description, content=content)
        if record is None:
            logger.debug("Update skipped, no memory with id %s", record_id)
        return record

    def delete_memory(self, record_id: str) -> bool:
        return self.store.delete(record_id)

    def search_memories(self, query: str) -> list[MemoryRecord]:
        """Find memories whose description or content contains the query.

        Raises:
            ValidationError: If the query is empty, not a string or too long.
        """
        query = self._validate("query", query, self.config.max_query_length)
        return self.store.search(query)

    def get_relevant_memories(self, text: str) -> list[MemoryRecord]:
        """Rank stored memories by keyword overlap with the given text."""
        keywords = extract_keywords(text)
        if not keywords:
            return []
        return rank_by_relevance(self.store.get_all(), keywords)

    def search_by_keywords(self, keywords: list[str]) -> list[MemoryRecord]:
        """Search once per keyword and merge the hits, first hit first."""
        found: dict[str, MemoryRecord] = {}
        for keyword in keywords:
            for record in self.store.search(keyword):
                found.setdefault(record.id, record)
        return list(found.values())

    def _prepare(self, field: str, value: object, max_length: int) -> str:
        value = self._validate(field, value, max_length)
        if self.config.sanitize_on_write:
            value = self._validate(field, strip_markup(value), max_length)
        return value

    def _validate(self, field: str, value: object, max_length: int) -> str:
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be a string", field=field)
        if not value.strip():
            raise ValidationError(f"{field} must not be empty", field=field)
        if len(value) > max_length:
            raise ValidationError(
                f"{field} exceeds {max_length} characters", field=field
            )
        return value
