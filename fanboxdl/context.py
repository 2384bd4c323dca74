from __future__ import annotations

import logging
from typing import Any

import requests

from .adapter import parse_page_urls, parse_post, parse_post_summaries
from .exceptions import APISchemaError, ReadFailed, RequestFailed, StatusError
from .nodeiterator import NodeIterator
from .structures import Post, PostSummary

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


class FanboxContext:
    API_URL = "https://api.fanbox.cc"
    ORIGIN = "https://www.fanbox.cc"
    HEADERS = {
        "User-Agent": f"fanboxdl/{VERSION}",
        "Origin": ORIGIN,
    }

    def __init__(
        self,
        session_id: str,
        *,
        session: requests.Session | None = None,
        connect_timeout: float = 5,
        request_timeout: float = 20,
    ):
        self.session = session or requests.Session()
        self.session.headers.update(self.HEADERS)
        self.session.headers["Cookie"] = f"FANBOXSESSID={session_id};"

        self.connect_timeout = connect_timeout
        self.req_timeout = request_timeout

    @property
    def timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.req_timeout)

    def request(self, url: str, *, params: dict[str, Any] | None = None, stream: bool = False) -> requests.Response:
        """GET ``url``, raising ``RequestFailed`` on send errors and ``StatusError`` on non-2xx."""
        target = url
        try:
            target = requests.Request("GET", url, params=params).prepare().url or url
            resp = self.session.get(url, params=params, timeout=self.timeout, stream=stream)
        except requests.RequestException as e:
            raise RequestFailed(f"failed to send request: {target}") from e

        if not 200 <= resp.status_code < 300:
            resp.close()
            raise StatusError(target, resp.status_code)
        return resp

    def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        resp = self.request(url, params=params)
        try:
            return resp.json()
        except (ValueError, requests.RequestException) as e:
            raise ReadFailed(f"failed to read response: {resp.url}") from e
        finally:
            resp.close()

    def stream(self, url: str) -> requests.Response:
        return self.request(url, stream=True)

    def paginate_creator(self, creator_id: str) -> NodeIterator:
        page_urls = parse_page_urls(self._get_body("/post.paginateCreator", {"creatorId": creator_id}))
        logger.debug("creator %s has %d pages", creator_id, len(page_urls))
        return NodeIterator(page_urls, self.list_page)

    def list_page(self, url: str) -> list[PostSummary]:
        logger.debug("Listing posts in %s", url)
        return parse_post_summaries(self._unwrap(self.get_json(url), url))

    def get_post(self, post_id: str) -> Post:
        return parse_post(self._get_body("/post.info", {"postId": post_id}))

    def _get_body(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.API_URL}{path}"
        return self._unwrap(self.get_json(url, params=params), url)

    @staticmethod
    def _unwrap(payload: Any, url: str) -> Any:
        if isinstance(payload, dict) and "body" in payload:
            return payload["body"]
        raise APISchemaError(f"unexpected response shape: {url}")
