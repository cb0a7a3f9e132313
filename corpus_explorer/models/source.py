"""Source descriptor model: where and how to fetch one corpus document."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional, Tuple
from urllib.parse import urlparse

_UNBOUNDED = {"inf", "infinity", "none", "null", ""}


class MalformedDescriptorError(ValueError):
    """Raised when a source descriptor lacks a required field or has invalid values."""

    def __init__(self, message: str, identity: str = "<unknown>"):
        super().__init__(f"Malformed descriptor {identity}: {message}")
        self.identity = identity


@dataclass(frozen=True)
class SourceDescriptor:
    """Fetch descriptor for a single document.

    Attributes:
        name: Unique logical document name (becomes doc_id)
        url: http(s) URL or local file path
        category: Optional category label
        use_fonts: Font heights to keep for PDFs (None = no filtering)
        page_range: Inclusive (first, last) pages; last=None means unbounded
        split_pattern: Optional regex splitting plain text into parts (e.g. acts)
    """

    name: str
    url: str
    category: Optional[str] = None
    use_fonts: Optional[FrozenSet[int]] = None
    page_range: Tuple[int, Optional[int]] = (1, None)
    split_pattern: Optional[str] = None

    def __post_init__(self):
        for field_name in ("category", "split_pattern"):
            value = getattr(self, field_name)
            if value is not None and not isinstance(value, str):
                raise MalformedDescriptorError(
                    f"{field_name} must be a string, got {type(value).__name__}", self.name
                )
        first, last = self.page_range
        if first < 1:
            raise MalformedDescriptorError(f"page_range must start at >= 1, got {first}", self.name)
        if last is not None and last < first:
            raise MalformedDescriptorError(
                f"page_range end ({last}) must be >= start ({first})", self.name
            )

    @property
    def is_remote(self) -> bool:
        """True for http/https URLs, False for local paths."""
        return urlparse(self.url).scheme in ("http", "https")

    @property
    def is_pdf(self) -> bool:
        return urlparse(self.url).path.lower().endswith(".pdf")

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_url: Optional[str] = None) -> "SourceDescriptor":
        """Create SourceDescriptor from a config dictionary.

        Args:
            data: Dict with name, url and optional category, use_fonts, page_range
            base_url: Optional prefix for relative (non-http, non-absolute) urls

        Raises:
            MalformedDescriptorError: If name or url is missing or a field is invalid
        """
        if not isinstance(data, dict):
            raise MalformedDescriptorError("descriptor must be a mapping", repr(data))

        name = data.get("name")
        identity = repr(name) if name else repr(data)
        if not name or not str(name).strip():
            raise MalformedDescriptorError("missing required field 'name'", identity)
        url = data.get("url")
        if not url or not str(url).strip():
            raise MalformedDescriptorError("missing required field 'url'", identity)

        url = str(url).strip()
        if base_url and not urlparse(url).scheme and not url.startswith(("/", ".")):
            url = base_url.rstrip("/") + "/" + url.lstrip("/")

        use_fonts = data.get("use_fonts")
        if use_fonts is not None:
            try:
                use_fonts = frozenset(int(f) for f in use_fonts)
            except (TypeError, ValueError) as e:
                raise MalformedDescriptorError(f"invalid use_fonts: {e}", identity) from e

        return cls(
            name=str(name).strip(),
            url=url,
            category=data.get("category"),
            use_fonts=use_fonts,
            page_range=_parse_page_range(data.get("page_range"), identity),
            split_pattern=data.get("split_pattern"),
        )


def _parse_page_range(value: Any, identity: str) -> Tuple[int, Optional[int]]:
    """Parse [first, last] where last may be Inf/None (unbounded)."""
    if value is None:
        return (1, None)
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise MalformedDescriptorError(f"page_range must be a pair, got {value!r}", identity)

    first_raw, last_raw = value
    try:
        first = int(first_raw)
        if last_raw is None or (isinstance(last_raw, str) and last_raw.strip().lower() in _UNBOUNDED):
            last = None
        elif isinstance(last_raw, float) and math.isinf(last_raw):
            last = None
        else:
            last = int(last_raw)
    except (TypeError, ValueError) as e:
        raise MalformedDescriptorError(f"invalid page_range {value!r}", identity) from e
    return (first, last)
