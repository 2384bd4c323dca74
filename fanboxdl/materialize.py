from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import requests

from .adapter import to_unix_ns
from .exceptions import FilesystemError, ReadFailed

if TYPE_CHECKING:
    from .context import FanboxContext

logger = logging.getLogger(__name__)
CHUNK_SIZE = 64 * 1024


def set_mtime(path: Path, mtime: datetime) -> None:
    """Set the modification time of ``path`` to ``mtime`` with nanosecond precision.

    The access time is left untouched.
    """
    ns = to_unix_ns(mtime)
    try:
        atime_ns = os.stat(path).st_atime_ns
        os.utime(path, ns=(atime_ns, ns))
    except OSError as e:
        raise FilesystemError(f"failed to update mtime {path}: {e}", path) from e


def download_to(context: FanboxContext, url: str, path: Path, mtime: datetime) -> Path:
    """Stream ``url`` into ``path`` and stamp it with ``mtime``.

    An existing file at ``path`` is truncated. The file is closed before the
    timestamp is applied.
    """
    path = Path(path)
    try:
        f = open(path, "wb")
    except OSError as e:
        raise FilesystemError(f"failed to create {path}: {e}", path) from e

    try:
        with f:
            resp = context.stream(url)
            try:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        try:
                            f.write(chunk)
                        except OSError as e:
                            raise FilesystemError(f"failed to write {path}: {e}", path) from e
            except requests.RequestException as e:
                raise ReadFailed(f"failed to read response: {url}") from e
            finally:
                resp.close()
    except OSError as e:
        # flush on close
        raise FilesystemError(f"failed to write {path}: {e}", path) from e

    set_mtime(path, mtime)
    logger.debug("saved %s", path)
    return path


def write_index(path: Path, lines: Sequence[str], mtime: datetime) -> Path:
    path = Path(path)
    try:
        path.write_bytes("\n".join(lines).encode("utf-8"))
    except OSError as e:
        raise FilesystemError(f"failed to write {path}: {e}", path) from e
    set_mtime(path, mtime)
    return path
