from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


# --- Assets ---


@dataclass
class Image:
    id: str
    extension: str
    original_url: str


@dataclass
class File:
    id: str
    extension: str
    name: str
    url: str


# --- Article blocks ---


@dataclass
class ParagraphBlock:
    text: str


@dataclass
class HeaderBlock:
    text: str


@dataclass
class ImageBlock:
    image_id: str


@dataclass
class FileBlock:
    file_id: str


@dataclass
class EmbedBlock:
    embed_id: str


@dataclass
class UrlEmbedBlock:
    url_embed_id: str


@dataclass
class UnknownBlock:
    type: str | None
    raw: dict = field(default_factory=dict, repr=False)


ArticleBlock = (
    ParagraphBlock | HeaderBlock | ImageBlock | FileBlock | EmbedBlock | UrlEmbedBlock | UnknownBlock
)


# --- URL embeds ---


@dataclass
class DefaultUrlEmbed:
    url: str


@dataclass
class HtmlUrlEmbed:
    html: str


@dataclass
class HtmlCardUrlEmbed:
    html: str


@dataclass
class UnknownUrlEmbed:
    type: str | None
    raw: dict = field(default_factory=dict, repr=False)


UrlEmbed = DefaultUrlEmbed | HtmlUrlEmbed | HtmlCardUrlEmbed | UnknownUrlEmbed


# --- Provider embeds ---


@dataclass
class TwitterEmbed:
    content_id: str


@dataclass
class FanboxEmbed:
    content_id: str


@dataclass
class YoutubeEmbed:
    content_id: str


@dataclass
class UnknownEmbed:
    service_provider: str | None
    raw: dict = field(default_factory=dict, repr=False)


Embed = TwitterEmbed | FanboxEmbed | YoutubeEmbed | UnknownEmbed


# --- Post bodies ---


@dataclass
class ImageBody:
    text: str
    images: list[Image] = field(default_factory=list)


@dataclass
class ArticleBody:
    blocks: list[ArticleBlock] = field(default_factory=list)
    image_map: dict[str, Image] = field(default_factory=dict)
    file_map: dict[str, File] = field(default_factory=dict)
    embed_map: dict[str, Embed] = field(default_factory=dict)
    url_embed_map: dict[str, UrlEmbed] = field(default_factory=dict)


@dataclass
class FileBody:
    text: str
    files: list[File] = field(default_factory=list)


@dataclass
class TextBody:
    text: str


@dataclass
class UnknownBody:
    type: str | None
    raw: dict = field(default_factory=dict, repr=False)


PostBody = ImageBody | ArticleBody | FileBody | TextBody | UnknownBody


# --- Posts ---


@dataclass
class PostSummary:
    id: str


@dataclass
class Post:
    id: str
    title: str
    updated_at: datetime
    creator_id: str
    cover_image_url: str | None = None
    body: PostBody | None = None
    raw: dict = field(default_factory=dict, repr=False)
