from __future__ import annotations

import logging
from pathlib import Path

from . import render
from .context import FanboxContext
from .exceptions import FilesystemError
from .materialize import download_to, write_index
from .naming import COVER_IMAGE_NAME, INDEX_NAME, asset_filename, post_dirname, post_url
from .structures import (
    ArticleBody,
    DefaultUrlEmbed,
    EmbedBlock,
    FileBlock,
    FileBody,
    HeaderBlock,
    HtmlCardUrlEmbed,
    HtmlUrlEmbed,
    ImageBlock,
    ImageBody,
    ParagraphBlock,
    Post,
    TextBody,
    UnknownBody,
    UrlEmbedBlock,
)
from .ui import EventKind, NullSink, ProgressSink, UIEvent

logger = logging.getLogger(__name__)


class FanboxLoader:
    def __init__(
        self,
        context: FanboxContext,
        *,
        output_dir: str | Path = ".",
        progress: ProgressSink | None = None,
    ):
        self.context = context
        self._sink: ProgressSink = progress or NullSink()
        self.output_dir = Path(output_dir).expanduser()
        self._assets_done = 0

    def _safe_emit(self, event: UIEvent) -> None:
        try:
            self._sink.emit(event)
        except Exception:
            logger.debug("sink.emit failed", exc_info=True)

    def download_creator(self, creator_id: str) -> int:
        """Archive every post of ``creator_id`` in listing order.

        Returns the number of posts visited. Any transport or filesystem error
        aborts the run and propagates.
        """
        processed = 0
        skipped = 0
        self._safe_emit(UIEvent(kind=EventKind.STAGE, message=f"Listing posts of {creator_id}"))

        try:
            for summary in self.context.paginate_creator(creator_id):
                logger.debug("Getting post %s", summary.id)
                post = self.context.get_post(summary.id)
                if self.download_post(post) is None:
                    skipped += 1
                processed += 1
                self._safe_emit(UIEvent(kind=EventKind.POST_DONE, posts_processed=processed))
        except KeyboardInterrupt:
            self._safe_emit(UIEvent(kind=EventKind.INTERRUPTED, creator_id=creator_id))
            self._safe_emit(UIEvent(
                kind=EventKind.RUN_DONE, creator_id=creator_id,
                posts_processed=processed, posts_skipped=skipped, ok=False,
            ))
            raise
        except Exception:
            self._safe_emit(UIEvent(
                kind=EventKind.RUN_DONE, creator_id=creator_id,
                posts_processed=processed, posts_skipped=skipped, ok=False,
            ))
            raise

        self._safe_emit(UIEvent(
            kind=EventKind.RUN_DONE, creator_id=creator_id,
            posts_processed=processed, posts_skipped=skipped, ok=True,
        ))
        return processed

    def download_post(self, post: Post) -> Path | None:
        """Write the snapshot of ``post``. Returns its ``index.html``, or None when the body is withheld."""
        if post.body is None:
            logger.warning("You don't have permission to see post %s", post_url(post.creator_id, post.id))
            self._safe_emit(UIEvent(kind=EventKind.POST_SKIPPED, post_id=post.id))
            return None

        dest = self.output_dir / post_dirname(post.id)
        try:
            dest.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"failed to create directory: {dest}: {e}", dest) from e

        self._assets_done = 0
        self._safe_emit(UIEvent(kind=EventKind.POST_START, post_id=post.id))

        body = post.body
        lines = [render.title_line(post)]
        if isinstance(body, ArticleBody):
            lines += self._cover_lines(post, dest, inline=True)
            lines += self._article_lines(post, body, dest)
        else:
            lines += self._cover_lines(post, dest)
            if isinstance(body, ImageBody):
                lines += self._image_lines(post, body, dest)
            elif isinstance(body, FileBody):
                lines += self._file_lines(post, body, dest)
            elif isinstance(body, TextBody):
                lines.append(render.paragraph(body.text))
            elif isinstance(body, UnknownBody):
                logger.warning(
                    "post %s has unsupported type %r; only the title and cover are saved",
                    post_url(post.creator_id, post.id), body.type,
                )

        return write_index(dest / INDEX_NAME, lines, post.updated_at)

    def _fetch(self, url: str, dest: Path, post: Post) -> None:
        download_to(self.context, url, dest, post.updated_at)
        self._assets_done += 1
        self._safe_emit(UIEvent(
            kind=EventKind.ASSET_DONE, post_id=post.id,
            filename=dest.name, assets_done=self._assets_done,
        ))

    def _cover_lines(self, post: Post, dest: Path, inline: bool = False) -> list[str]:
        if not post.cover_image_url:
            return []
        logger.info("post %s: Download cover image %s", post.id, post.cover_image_url)
        self._fetch(post.cover_image_url, dest / COVER_IMAGE_NAME, post)
        return render.cover_lines(post.cover_image_url, inline=inline)

    def _image_lines(self, post: Post, body: ImageBody, dest: Path) -> list[str]:
        lines: list[str] = []
        for image in body.images:
            logger.info("post %s: Download image %s", post.id, image.original_url)
            filename = asset_filename(image.id, image.extension)
            self._fetch(image.original_url, dest / filename, post)
            lines.append(render.image_paragraph(image, filename))
        lines.append(render.paragraph(body.text))
        return lines

    def _file_lines(self, post: Post, body: FileBody, dest: Path) -> list[str]:
        lines: list[str] = []
        for file in body.files:
            logger.info("post %s: Download file %s", post.id, file.url)
            filename = asset_filename(file.id, file.extension)
            self._fetch(file.url, dest / filename, post)
            lines += render.block(render.file_link(file, filename))
        lines.append(render.paragraph(body.text))
        return lines

    def _article_lines(self, post: Post, body: ArticleBody, dest: Path) -> list[str]:
        lines: list[str] = []
        for block in body.blocks:
            content = self._article_block(post, body, block, dest)
            if content is not None:
                lines += render.block(content)
        return lines

    def _article_block(self, post: Post, body: ArticleBody, block, dest: Path) -> str | None:
        if isinstance(block, ParagraphBlock):
            return block.text
        if isinstance(block, HeaderBlock):
            return render.header(block.text)

        if isinstance(block, ImageBlock):
            image = body.image_map.get(block.image_id)
            if image is None:
                logger.warning("image %s is not available in imageMap", block.image_id)
                return None
            logger.info("post %s: Download image %s", post.id, image.original_url)
            filename = asset_filename(image.id, image.extension)
            self._fetch(image.original_url, dest / filename, post)
            return render.image_tag(image, filename)

        if isinstance(block, FileBlock):
            file = body.file_map.get(block.file_id)
            if file is None:
                logger.warning("file %s is not available in fileMap", block.file_id)
                return None
            logger.info("post %s: Download file %s", post.id, file.url)
            filename = asset_filename(file.id, file.extension)
            self._fetch(file.url, dest / filename, post)
            return render.file_link(file, filename)

        if isinstance(block, UrlEmbedBlock):
            url_embed = body.url_embed_map.get(block.url_embed_id)
            if url_embed is None:
                logger.warning("url_embed %s is not available in urlEmbedMap", block.url_embed_id)
                return None
            if isinstance(url_embed, DefaultUrlEmbed):
                return render.anchor(url_embed.url)
            if isinstance(url_embed, (HtmlUrlEmbed, HtmlCardUrlEmbed)):
                return url_embed.html
            logger.debug("skipping url_embed %s of unsupported type %r", block.url_embed_id, url_embed.type)
            return None

        if isinstance(block, EmbedBlock):
            if block.embed_id not in body.embed_map:
                logger.warning("embed %s is not available in embedMap", block.embed_id)
            else:
                logger.debug("skipping embed %s", block.embed_id)
            return None

        logger.debug("skipping block of unsupported type %r", getattr(block, "type", None))
        return None
