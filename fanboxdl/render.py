"""HTML fragments for post snapshots.

Each function returns the lines it contributes to ``index.html``; the loader
joins all lines of a post with newlines. Text and markup from the API are
inserted as-is.
"""
from __future__ import annotations

from .naming import COVER_IMAGE_NAME, post_url
from .structures import File, Image, Post


def title_line(post: Post) -> str:
    return f"<h1><a href='{post_url(post.creator_id, post.id)}'>{post.title}</a></h1>"


def cover_lines(cover_image_url: str, *, inline: bool = False) -> list[str]:
    img = f"<img alt='{cover_image_url}' src='./{COVER_IMAGE_NAME}'>"
    if inline:
        return [f"<p>{img}</p>"]
    return ["<p>", img, "</p>"]


def image_tag(image: Image, filename: str) -> str:
    return f"<img alt='{image.original_url}' src='./{filename}' style='width: 100%;'>"


def image_paragraph(image: Image, filename: str) -> str:
    return f"<p>{image_tag(image, filename)}</p>"


def file_link(file: File, filename: str) -> str:
    return f"<a href='./{filename}'>{file.name}</a>"


def header(text: str) -> str:
    return f"<h2>{text}</h2>"


def anchor(url: str) -> str:
    return f"<a href='{url}'>{url}</a>"


def paragraph(text: str) -> str:
    return f"<p>{text}</p>"


def block(content: str) -> list[str]:
    return ["<p>", content, "</p>"]
