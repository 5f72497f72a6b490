from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass, fields
from typing import Any, Mapping

SOCIAL_BASE_URL = "https://www.reddit.com"

class Source(str, enum.Enum):
    GUARDIAN = "guardian-like"
    TIMES = "times-like"
    SOCIAL = "social-like"

# Fields every stored row of a source must carry; anything missing means drift
CANONICAL_FIELDS: dict[Source, tuple[str, ...]] = {
    Source.GUARDIAN: ("title", "url", "publication_date", "host_origin"),
    Source.TIMES: ("title", "url", "publication_date", "host_origin", "description"),
    Source.SOCIAL: (
        "title",
        "link",
        "publication_date",
        "host_origin",
        "author",
        "description",
        "image",
        "community_tag",
    ),
}

@dataclass(frozen=True)
class Article:
    source: Source
    title: str
    publication_date: str
    host_origin: str
    url: str = ""
    link: str = ""
    author: str = ""
    description: str = ""
    image: str = ""
    community_tag: str = ""

    def key(self, field: str) -> str:
        return getattr(self, field)

    def row_values(self) -> dict[str, str]:
        # Everything except the source tag, which is implied by the table
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "source"}

class NormalizeError(ValueError):
    pass

def host_origin(url: str | None) -> str:
    if not url:
        return "Unknown"
    rest = url.split("://", 1)[1] if "://" in url else url
    host = rest.split("/", 1)[0]
    host = host.split("?", 1)[0].split(":", 1)[0]
    if not host:
        return "Unknown"
    labels = host.split(".")
    if len(labels) > 2:
        return labels[-2]
    return labels[0]

def _str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()

def _epoch_to_iso(value: Any) -> str:
    if value in (None, ""):
        return ""
    try:
        ts = float(value)
    except (TypeError, ValueError):
        return _str(value)
    try:
        stamp = dt.datetime.fromtimestamp(ts, tz=dt.timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise NormalizeError(f"timestamp out of range: {value!r}") from e
    return stamp.isoformat().replace("+00:00", "Z")

def _social_link(permalink: str) -> str:
    if permalink.startswith("/"):
        return SOCIAL_BASE_URL + permalink
    return permalink

def _social_image(thumbnail: str) -> str:
    # Reddit uses placeholders like "self", "default" or "nsfw" when there is no preview
    if thumbnail.startswith(("http://", "https://")):
        return thumbnail
    return ""

def _normalize_guardian(raw: Mapping[str, Any]) -> Article:
    url = _str(raw.get("webUrl"))
    return Article(
        source=Source.GUARDIAN,
        title=_str(raw.get("webTitle")),
        url=url,
        publication_date=_str(raw.get("webPublicationDate")),
        host_origin=host_origin(url),
    )

def _normalize_times(raw: Mapping[str, Any]) -> Article:
    headline = raw.get("headline") or {}
    title = headline.get("main") if isinstance(headline, Mapping) else headline
    url = _str(raw.get("web_url"))
    return Article(
        source=Source.TIMES,
        title=_str(title),
        url=url,
        publication_date=_str(raw.get("pub_date")),
        host_origin=host_origin(url),
        description=_str(raw.get("abstract") or raw.get("snippet")),
    )

def _normalize_social(raw: Mapping[str, Any]) -> Article:
    link = _social_link(_str(raw.get("permalink")))
    return Article(
        source=Source.SOCIAL,
        title=_str(raw.get("title")),
        link=link,
        publication_date=_epoch_to_iso(raw.get("created_utc")),
        host_origin=host_origin(link),
        author=_str(raw.get("author")),
        description=_str(raw.get("selftext")),
        image=_social_image(_str(raw.get("thumbnail"))),
        community_tag=_str(raw.get("subreddit")),
    )

_NORMALIZERS = {
    Source.GUARDIAN: _normalize_guardian,
    Source.TIMES: _normalize_times,
    Source.SOCIAL: _normalize_social,
}

def normalize(raw: Mapping[str, Any], source: Source) -> Article:
    """Map one provider payload item onto the unified Article.

    Raises NormalizeError when the item has no title.
    """
    if not isinstance(raw, Mapping):
        raise NormalizeError(f"{source.value}: expected an object, got {type(raw).__name__}")
    article = _NORMALIZERS[source](raw)
    if not article.title:
        raise NormalizeError(f"{source.value}: item without title")
    return article
