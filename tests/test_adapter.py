from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from fanboxdl.adapter import (
    parse_article_block,
    parse_embed,
    parse_fanbox_datetime,
    parse_page_urls,
    parse_post,
    parse_post_summaries,
    parse_url_embed,
    to_unix_ns,
)
from fanboxdl.exceptions import APISchemaError, ReadFailed
from fanboxdl.structures import (
    ArticleBody,
    DefaultUrlEmbed,
    EmbedBlock,
    FanboxEmbed,
    FileBlock,
    FileBody,
    HeaderBlock,
    HtmlCardUrlEmbed,
    HtmlUrlEmbed,
    ImageBlock,
    ImageBody,
    ParagraphBlock,
    TextBody,
    TwitterEmbed,
    UnknownBlock,
    UnknownBody,
    UnknownEmbed,
    UnknownUrlEmbed,
    UrlEmbedBlock,
    YoutubeEmbed,
)

KNOWN_TYPES = {"image", "article", "file", "text"}


def wire_post(type_: str = "text", body: dict | None = None, **extra) -> dict:
    raw = {
        "id": "5000",
        "title": "Hello",
        "coverImageUrl": None,
        "updatedDatetime": "2024-01-01T09:00:00+09:00",
        "publishedDatetime": "2023-12-31T09:00:00+09:00",
        "creatorId": "creator",
        "feeRequired": 500,
        "type": type_,
        "body": body,
    }
    raw.update(extra)
    return raw


class TestDatetime:
    def test_offset(self):
        dt = parse_fanbox_datetime("2024-01-01T09:00:00+09:00")
        assert dt == datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        assert dt.utcoffset() == timedelta(hours=9)

    def test_zulu(self):
        assert parse_fanbox_datetime("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert parse_fanbox_datetime("2024-01-01T00:00:00") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_fraction_kept(self):
        dt = parse_fanbox_datetime("2024-01-01T00:00:00.123456Z")
        assert dt.microsecond == 123456

    def test_long_fraction_truncated(self):
        dt = parse_fanbox_datetime("2024-01-01T00:00:00.123456789+00:00")
        assert dt.microsecond == 123456

    def test_short_fraction_padded(self):
        assert parse_fanbox_datetime("2024-01-01T00:00:00.5Z").microsecond == 500000

    def test_negative_offset_without_colon(self):
        dt = parse_fanbox_datetime("2024-01-01T00:00:00-0330")
        assert dt.utcoffset() == -timedelta(hours=3, minutes=30)

    @pytest.mark.parametrize("raw", ["", "yesterday", "2024-13-01T00:00:00Z", "2024/01/01 00:00:00"])
    def test_invalid(self, raw):
        with pytest.raises(APISchemaError):
            parse_fanbox_datetime(raw)

    def test_unix_ns_exact(self):
        dt = parse_fanbox_datetime("2024-01-01T09:00:00.000001+09:00")
        assert to_unix_ns(dt) == 1704067200 * 10**9 + 1000

    @given(st.datetimes(timezones=st.just(timezone.utc)))
    def test_unix_ns_matches_microseconds(self, dt):
        epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
        delta = dt - epoch
        expected = ((delta.days * 86400 + delta.seconds) * 10**6 + delta.microseconds) * 1000
        assert to_unix_ns(dt) == expected


class TestParsePost:
    def test_text_post(self):
        post = parse_post(wire_post("text", {"text": "hi"}))
        assert post.id == "5000"
        assert post.title == "Hello"
        assert post.creator_id == "creator"
        assert post.cover_image_url is None
        assert post.updated_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert post.body == TextBody(text="hi")
        assert post.raw["feeRequired"] == 500

    def test_cover_image(self):
        post = parse_post(wire_post("text", {"text": ""}, coverImageUrl="https://x/cover.jpeg"))
        assert post.cover_image_url == "https://x/cover.jpeg"

    def test_null_body_means_no_permission(self):
        post = parse_post(wire_post("image", None))
        assert post.body is None

    def test_missing_body_means_no_permission(self):
        raw = wire_post("article")
        del raw["body"]
        assert parse_post(raw).body is None

    def test_image_post(self):
        post = parse_post(wire_post("image", {
            "text": "caption",
            "images": [
                {"id": "i1", "extension": "png", "originalUrl": "https://x/i1.png", "width": 10},
                {"id": "i2", "extension": "jpeg", "originalUrl": "https://x/i2.jpeg"},
            ],
        }))
        assert isinstance(post.body, ImageBody)
        assert post.body.text == "caption"
        assert [i.id for i in post.body.images] == ["i1", "i2"]
        assert post.body.images[0].original_url == "https://x/i1.png"

    def test_file_post(self):
        post = parse_post(wire_post("file", {
            "text": "files",
            "files": [{"id": "f1", "extension": "zip", "name": "bundle", "url": "https://x/f1.zip", "size": 3}],
        }))
        assert isinstance(post.body, FileBody)
        assert post.body.files[0].name == "bundle"
        assert post.body.files[0].url == "https://x/f1.zip"

    def test_article_post(self):
        post = parse_post(wire_post("article", {
            "blocks": [
                {"type": "header", "text": "H"},
                {"type": "image", "imageId": "i1"},
                {"type": "p", "text": "P", "styles": []},
                {"type": "file", "fileId": "f1"},
                {"type": "embed", "embedId": "e1"},
                {"type": "url_embed", "urlEmbedId": "u1"},
                {"type": "poll", "pollId": "x"},
            ],
            "imageMap": {"i1": {"id": "i1", "extension": "png", "originalUrl": "https://x/i1.png"}},
            "fileMap": {"f1": {"id": "f1", "extension": "pdf", "name": "doc", "url": "https://x/f1.pdf"}},
            "embedMap": {"e1": {"id": "e1", "serviceProvider": "youtube", "contentId": "abc"}},
            "urlEmbedMap": {"u1": {"id": "u1", "type": "default", "url": "https://example.com"}},
        }))
        body = post.body
        assert isinstance(body, ArticleBody)
        assert body.blocks == [
            HeaderBlock(text="H"),
            ImageBlock(image_id="i1"),
            ParagraphBlock(text="P"),
            FileBlock(file_id="f1"),
            EmbedBlock(embed_id="e1"),
            UrlEmbedBlock(url_embed_id="u1"),
            UnknownBlock(type="poll", raw={"type": "poll", "pollId": "x"}),
        ]
        assert body.image_map["i1"].extension == "png"
        assert body.file_map["f1"].name == "doc"
        assert body.embed_map["e1"] == YoutubeEmbed(content_id="abc")
        assert body.url_embed_map["u1"] == DefaultUrlEmbed(url="https://example.com")

    def test_article_missing_maps_default_empty(self):
        post = parse_post(wire_post("article", {"blocks": [{"type": "image", "imageId": "gone"}]}))
        assert isinstance(post.body, ArticleBody)
        assert post.body.image_map == {}
        assert post.body.url_embed_map == {}

    def test_unknown_body_type(self):
        post = parse_post(wire_post("video", {"video": {"serviceProvider": "youtube"}}))
        assert isinstance(post.body, UnknownBody)
        assert post.body.type == "video"
        assert post.title == "Hello"

    @given(st.text().filter(lambda s: s not in KNOWN_TYPES))
    def test_any_unrecognized_tag_is_unknown(self, tag):
        post = parse_post(wire_post(tag, {"text": "x"}))
        assert isinstance(post.body, UnknownBody)
        assert post.body.type == tag

    def test_missing_required_field_is_read_failure(self):
        raw = wire_post("text", {"text": "hi"})
        del raw["title"]
        with pytest.raises(ReadFailed, match="missing title"):
            parse_post(raw)

    def test_known_variant_missing_field(self):
        with pytest.raises(APISchemaError, match="imageId"):
            parse_post(wire_post("article", {"blocks": [{"type": "image"}]}))

    def test_not_an_object(self):
        with pytest.raises(APISchemaError):
            parse_post(["not", "a", "post"])  # type: ignore[arg-type]


class TestUnions:
    def test_url_embed_variants(self):
        assert parse_url_embed({"type": "html", "html": "<iframe></iframe>"}) == HtmlUrlEmbed(html="<iframe></iframe>")
        assert parse_url_embed({"type": "html.card", "html": "<div></div>"}) == HtmlCardUrlEmbed(html="<div></div>")
        unknown = parse_url_embed({"type": "fanbox.post", "postInfo": {}})
        assert isinstance(unknown, UnknownUrlEmbed)
        assert unknown.type == "fanbox.post"

    def test_embed_variants(self):
        assert parse_embed({"serviceProvider": "twitter", "contentId": "1"}) == TwitterEmbed(content_id="1")
        assert parse_embed({"serviceProvider": "fanbox", "contentId": "2"}) == FanboxEmbed(content_id="2")
        unknown = parse_embed({"serviceProvider": "vimeo", "contentId": "3"})
        assert isinstance(unknown, UnknownEmbed)
        assert unknown.service_provider == "vimeo"

    def test_block_without_type(self):
        block = parse_article_block({"text": "orphan"})
        assert isinstance(block, UnknownBlock)
        assert block.type is None


class TestListing:
    def test_page_urls(self):
        urls = ["https://api.fanbox.cc/post.listCreator?creatorId=c&a=1", "opaque://page/2"]
        assert parse_page_urls(urls) == urls

    def test_page_urls_wrong_shape(self):
        with pytest.raises(APISchemaError):
            parse_page_urls({"items": []})

    def test_summaries(self):
        page = {"items": [{"id": "1", "title": "a"}, {"id": 2}], "nextUrl": None}
        assert [s.id for s in parse_post_summaries(page)] == ["1", "2"]

    def test_summaries_missing_items(self):
        with pytest.raises(APISchemaError):
            parse_post_summaries({})
