from __future__ import annotations

from fanboxdl.context import VERSION, FanboxContext
from fanboxdl.exceptions import (
    APISchemaError,
    FanboxDLException,
    FilesystemError,
    InitError,
    ReadFailed,
    RequestFailed,
    StatusError,
)
from fanboxdl.fanboxloader import FanboxLoader
from fanboxdl.structures import (
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

__version__ = VERSION

__all__ = [
    "__version__",
    # exceptions
    "FanboxDLException",
    "RequestFailed",
    "StatusError",
    "ReadFailed",
    "APISchemaError",
    "FilesystemError",
    "InitError",
    # structures
    "PostSummary",
    "Post",
    "PostBody",
    "ImageBody",
    "ArticleBody",
    "FileBody",
    "TextBody",
    "UnknownBody",
    "Image",
    "File",
    "ArticleBlock",
    "ParagraphBlock",
    "HeaderBlock",
    "ImageBlock",
    "FileBlock",
    "EmbedBlock",
    "UrlEmbedBlock",
    "UnknownBlock",
    "UrlEmbed",
    "DefaultUrlEmbed",
    "HtmlUrlEmbed",
    "HtmlCardUrlEmbed",
    "UnknownUrlEmbed",
    "Embed",
    "TwitterEmbed",
    "FanboxEmbed",
    "YoutubeEmbed",
    "UnknownEmbed",
    # client / orchestrator
    "FanboxContext",
    "FanboxLoader",
]
