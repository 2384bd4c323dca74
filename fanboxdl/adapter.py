from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, TypeVar

from .exceptions import APISchemaError
from .structures import (
    ArticleBlock,
    ArticleBody,
    DefaultUrlEmbed,
    Embed,
    EmbedBlock,
    FanboxEmbed,
    File,
    FileBlock,
    FileBody,
    HeaderBlock,
    HtmlCardUrlEmbed,
    HtmlUrlEmbed,
    Image,
    ImageBlock,
    ImageBody,
    ParagraphBlock,
    Post,
    PostBody,
    PostSummary,
    TextBody,
    TwitterEmbed,
    UnknownBlock,
    UnknownBody,
    UnknownEmbed,
    UnknownUrlEmbed,
    UrlEmbed,
    UrlEmbedBlock,
    YoutubeEmbed,
)

T = TypeVar("T")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_DATETIME_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>Z|z|[+-]\d{2}:?\d{2})?$"
)


def parse_fanbox_datetime(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp as sent by the API.

    Fractions beyond microseconds are truncated. A missing offset is read as UTC.
    """
    if not isinstance(raw, str):
        raise APISchemaError(f"invalid datetime: {raw!r}")
    m = _DATETIME_RE.match(raw.strip())
    if not m:
        raise APISchemaError(f"unknown datetime format: {raw}")

    try:
        dt = datetime.strptime(m.group("base").replace(" ", "T"), "%Y-%m-%dT%H:%M:%S")
    except ValueError as e:
        raise APISchemaError(f"invalid datetime: {raw}") from e

    if frac := m.group("frac"):
        dt = dt.replace(microsecond=int(frac[:6].ljust(6, "0")))

    tz = m.group("tz")
    if not tz or tz in ("Z", "z"):
        return dt.replace(tzinfo=timezone.utc)
    sign = -1 if tz[0] == "-" else 1
    digits = tz[1:].replace(":", "")
    offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
    return dt.replace(tzinfo=timezone(sign * offset))


def to_unix_ns(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - EPOCH) // timedelta(microseconds=1) * 1000


def _require(raw: Mapping[str, Any], key: str, where: str) -> str:
    value = raw.get(key)
    if value is None:
        raise APISchemaError(f"{where} missing {key}")
    return str(value)


def _mapping(raw: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise APISchemaError(f"{where} is not an object")
    return raw


def _parse_map(raw: Any, parse: Callable[[Mapping[str, Any]], T], where: str) -> dict[str, T]:
    if raw is None:
        return {}
    return {str(k): parse(_mapping(v, f"{where}[{k}]")) for k, v in _mapping(raw, where).items()}


def parse_image(raw: Mapping[str, Any]) -> Image:
    return Image(
        id=_require(raw, "id", "image"),
        extension=_require(raw, "extension", "image"),
        original_url=_require(raw, "originalUrl", "image"),
    )


def parse_file(raw: Mapping[str, Any]) -> File:
    return File(
        id=_require(raw, "id", "file"),
        extension=_require(raw, "extension", "file"),
        name=_require(raw, "name", "file"),
        url=_require(raw, "url", "file"),
    )


def parse_article_block(raw: Mapping[str, Any]) -> ArticleBlock:
    kind = raw.get("type")
    if kind == "p":
        return ParagraphBlock(text=_require(raw, "text", "p block"))
    if kind == "header":
        return HeaderBlock(text=_require(raw, "text", "header block"))
    if kind == "image":
        return ImageBlock(image_id=_require(raw, "imageId", "image block"))
    if kind == "file":
        return FileBlock(file_id=_require(raw, "fileId", "file block"))
    if kind == "embed":
        return EmbedBlock(embed_id=_require(raw, "embedId", "embed block"))
    if kind == "url_embed":
        return UrlEmbedBlock(url_embed_id=_require(raw, "urlEmbedId", "url_embed block"))
    return UnknownBlock(type=kind, raw=dict(raw))


def parse_url_embed(raw: Mapping[str, Any]) -> UrlEmbed:
    kind = raw.get("type")
    if kind == "default":
        return DefaultUrlEmbed(url=_require(raw, "url", "url embed"))
    if kind == "html":
        return HtmlUrlEmbed(html=_require(raw, "html", "url embed"))
    if kind == "html.card":
        return HtmlCardUrlEmbed(html=_require(raw, "html", "url embed"))
    return UnknownUrlEmbed(type=kind, raw=dict(raw))


_EMBED_PROVIDERS: dict[str, type[TwitterEmbed | FanboxEmbed | YoutubeEmbed]] = {
    "twitter": TwitterEmbed,
    "fanbox": FanboxEmbed,
    "youtube": YoutubeEmbed,
}


def parse_embed(raw: Mapping[str, Any]) -> Embed:
    provider = raw.get("serviceProvider")
    cls = _EMBED_PROVIDERS.get(provider) if isinstance(provider, str) else None
    if cls is None:
        return UnknownEmbed(service_provider=provider, raw=dict(raw))
    return cls(content_id=_require(raw, "contentId", f"{provider} embed"))


def _parse_article(body: Mapping[str, Any]) -> ArticleBody:
    blocks = body.get("blocks") or []
    if not isinstance(blocks, list):
        raise APISchemaError("article blocks is not a list")
    return ArticleBody(
        blocks=[parse_article_block(_mapping(b, "article block")) for b in blocks],
        image_map=_parse_map(body.get("imageMap"), parse_image, "imageMap"),
        file_map=_parse_map(body.get("fileMap"), parse_file, "fileMap"),
        embed_map=_parse_map(body.get("embedMap"), parse_embed, "embedMap"),
        url_embed_map=_parse_map(body.get("urlEmbedMap"), parse_url_embed, "urlEmbedMap"),
    )


def _parse_list(raw: Any, parse: Callable[[Mapping[str, Any]], T], where: str) -> list[T]:
    if not isinstance(raw, list):
        raise APISchemaError(f"{where} is not a list")
    return [parse(_mapping(item, where)) for item in raw]


def parse_post_body(kind: Any, raw_body: Any) -> PostBody | None:
    """Route the wire ``type`` tag to a body variant.

    ``None`` means the body is withheld; unrecognized tags become ``UnknownBody``.
    """
    if raw_body is None:
        return None

    if kind == "image":
        body = _mapping(raw_body, "image body")
        return ImageBody(
            text=_require(body, "text", "image body"),
            images=_parse_list(body.get("images"), parse_image, "images"),
        )
    if kind == "article":
        return _parse_article(_mapping(raw_body, "article body"))
    if kind == "file":
        body = _mapping(raw_body, "file body")
        return FileBody(
            text=_require(body, "text", "file body"),
            files=_parse_list(body.get("files"), parse_file, "files"),
        )
    if kind == "text":
        body = _mapping(raw_body, "text body")
        return TextBody(text=_require(body, "text", "text body"))

    raw = dict(raw_body) if isinstance(raw_body, Mapping) else {"body": raw_body}
    return UnknownBody(type=kind, raw=raw)


def parse_post(raw: Mapping[str, Any]) -> Post:
    raw = _mapping(raw, "post")
    post_id = _require(raw, "id", "post")
    where = f"post {post_id}"

    return Post(
        id=post_id,
        title=_require(raw, "title", where),
        updated_at=parse_fanbox_datetime(_require(raw, "updatedDatetime", where)),
        creator_id=_require(raw, "creatorId", where),
        cover_image_url=raw.get("coverImageUrl") or None,
        body=parse_post_body(raw.get("type"), raw.get("body")),
        raw=dict(raw),
    )


def parse_post_summaries(raw_page: Mapping[str, Any]) -> list[PostSummary]:
    items = _mapping(raw_page, "listing").get("items")
    return [
        PostSummary(id=_require(item, "id", "listing item"))
        for item in _parse_list(items, lambda item: item, "listing items")
    ]


def parse_page_urls(raw: Any) -> list[str]:
    if not isinstance(raw, list) or not all(isinstance(u, str) for u in raw):
        raise APISchemaError("pagination index is not a list of urls")
    return list(raw)
