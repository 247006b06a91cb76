from __future__ import annotations

import json
import logging
import os

from .exceptions import CacheError
from .models import Snapshot

logger = logging.getLogger(__name__)


def write_snapshot(path: str, snapshot: Snapshot) -> None:
    """Serialize a snapshot to `path`, replacing any previous one."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(snapshot.to_dict(), f, ensure_ascii=False)
    logger.info("Wrote cache snapshot to %s (%d items)", path, len(snapshot.all_items))


def read_snapshot(path: str) -> Snapshot:
    """
    Load a snapshot written by `write_snapshot`.

    A missing file yields an empty snapshot; a corrupt one raises CacheError.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning("Cache at %s does not exist, building an empty page", path)
        return Snapshot()
    except ValueError as e:
        raise CacheError(f"Cache is invalid JSON: {path} ({e})") from e

    if not isinstance(data, dict):
        raise CacheError(f"Cache must be a JSON object: {path}")
    try:
        return Snapshot.from_dict(data)
    except (AttributeError, TypeError, ValueError) as e:
        raise CacheError(f"Cache has an unexpected shape: {path} ({e})") from e
