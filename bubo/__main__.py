from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from . import build_and_cache, build_from_cache, build_live
from .config import Settings, load_config, load_registry
from .exceptions import ConfigError

logger = logging.getLogger("bubo")


def parse_args(argv: Optional[List[str]], settings: Settings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="bubo", description="Build the feed reader page data.")
    parser.add_argument("--feeds", default=settings.feeds_path, help="feed registry JSON")
    parser.add_argument("--config", default=settings.config_path, help="redirects / timezone JSON")
    parser.add_argument("--cache", default=settings.cache_path, help="cache snapshot JSON")
    parser.add_argument("--output", default=settings.output_path, help="where to write the build result")
    parser.add_argument("--write", action="store_true", help="fetch live and overwrite the cache")
    parser.add_argument("--cached", action="store_true", help="build from the cache only")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv, Settings())
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        if args.write:
            result = build_and_cache(load_registry(args.feeds), args.cache, config)
        elif args.cached:
            result = build_from_cache(args.cache, config)
        else:
            result = build_live(load_registry(args.feeds), config)
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    directory = os.path.dirname(args.output)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(args.output, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, ensure_ascii=False)

    if result.errors:
        logger.warning("%d feeds failed: %s", len(result.errors), ", ".join(result.errors))
    logger.info("Reader built successfully at: %s (%d items)", args.output, len(result.all_items))
    return 0


if __name__ == "__main__":
    sys.exit(main())
