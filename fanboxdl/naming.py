from __future__ import annotations

ILLEGAL = '\\/:*?"<>|\0'
COVER_IMAGE_NAME = "cover_image.jpeg"
INDEX_NAME = "index.html"

_TRANS = str.maketrans("", "", ILLEGAL)


def sanitize(s: str) -> str:
    result = str(s).translate(_TRANS)
    # '.' and '..' would escape the post directory
    if result in (".", ".."):
        return ""
    return result


def post_url(creator_id: str, post_id: str) -> str:
    return f"https://{creator_id}.fanbox.cc/posts/{post_id}"


def post_dirname(post_id: str) -> str:
    return sanitize(post_id) or "post"


def asset_filename(asset_id: str, extension: str) -> str:
    name = sanitize(f"{asset_id}.{extension}")
    if not name or name in (COVER_IMAGE_NAME, INDEX_NAME):
        return f"asset_{name or 'file'}"
    return name
