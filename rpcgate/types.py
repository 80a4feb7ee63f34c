"""Request and response shapes of the HTTP API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

PAGE_SIZE_DEFAULT = 20
PAGE_SIZE_MAX = 150
PAGE_NUM_DEFAULT = 1
SEO_STATUS_DEFAULT = 1


def _field(data: Any, key: str, kind: type, default: Any = ...) -> Any:
    """Fetch ``key`` from an object, checking its type; no default means required."""
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object when reading {key!r}")
    if key not in data and default is ...:
        raise ValueError(f"field {key!r} is required")
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ValueError(f"{key} must be {kind.__name__}, got {value!r}")
    return value


@dataclass
class IndexResp:
    ping: str = ""


@dataclass
class Empty:
    pass


@dataclass
class PageSort:
    condition: str
    order: str


@dataclass
class Page:
    size: int = PAGE_SIZE_DEFAULT
    num: int = PAGE_NUM_DEFAULT
    sorts: list[PageSort] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Page":
        size = _field(data, "size", int, PAGE_SIZE_DEFAULT)
        if not 0 <= size <= PAGE_SIZE_MAX:
            raise ValueError(f"size must be within [0:{PAGE_SIZE_MAX}], got {size}")
        sorts = data.get("sorts") or []
        if not isinstance(sorts, list):
            raise ValueError(f"sorts must be list, got {sorts!r}")
        return cls(
            size=size,
            num=_field(data, "num", int, PAGE_NUM_DEFAULT),
            sorts=[PageSort(_field(s, "condition", str), _field(s, "order", str)) for s in sorts],
        )


@dataclass
class PageResult:
    rows: list[Any] = field(default_factory=list)
    total: int = 0


@dataclass
class IDS:
    ids: list[str] = field(default_factory=list)


@dataclass
class ID:
    id: str = ""


@dataclass
class SEO:
    title: str = ""
    keyword: str = ""
    description: str = ""
    path: str = ""
    status: int = SEO_STATUS_DEFAULT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SEO":
        texts = {k: _field(data, k, str, "") for k in ("title", "keyword", "description", "path")}
        return cls(**texts, status=_field(data, "status", int, SEO_STATUS_DEFAULT))


@dataclass
class Link:
    href: str = ""
    name: str = ""


@dataclass
class SeoContent:
    title: str = ""
    keyword: str = ""
    description: str = ""


@dataclass
class ModuleConfig:
    data_config: dict[str, Any]
    name: str = ""
    show_status: int = 0
    show_list: list[str] = field(default_factory=list)
    link: Link = field(default_factory=Link)
    status: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ModuleConfig":
        show_list = data.get("show_list") or []
        if not isinstance(show_list, list) or not all(isinstance(s, str) for s in show_list):
            raise ValueError("show_list must be a list of strings")
        link = data.get("link") or {}
        return cls(
            data_config=dict(_field(data, "data_config", Mapping)),
            name=_field(data, "name", str, ""),
            show_status=_field(data, "show_status", int, 0),
            show_list=list(show_list),
            link=Link(_field(link, "href", str, ""), _field(link, "name", str, "")),
            status=_field(data, "status", int, 0),
        )