from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn, Optional

import yaml

from .config import (
    DEFAULT_CONFIG,
    DEFAULT_CONTENT_DIR,
    DEFAULT_JSON_OUTPUT,
    DEFAULT_RSS_OUTPUT,
    SiteConfig,
    config_int,
    load_config,
)
from .errors import SiteGenError
from .feed import generate_rss_from_json
from .pages import process_directory, write_pages_json

FATAL_ERRORS = (SiteGenError, OSError, ValueError, yaml.YAMLError)


def fail(message: str) -> NoReturn:
    print(message)
    sys.exit(1)


def build_feed(args: argparse.Namespace) -> None:
    content_dir = Path(args.content)
    json_path = Path(args.json_output)
    rss_path = Path(args.rss_output)
    site = SiteConfig(title=args.site_title, url=args.site_url, description=args.site_description)

    try:
        pages = process_directory(content_dir, workers=args.workers)
    except FATAL_ERRORS as exc:
        fail(f"Error processing directory: {exc}")

    try:
        write_pages_json(pages, json_path)
    except FATAL_ERRORS as exc:
        fail(f"Error writing {json_path.name}: {exc}")

    try:
        generate_rss_from_json(json_path, rss_path, site)
    except FATAL_ERRORS as exc:
        fail(f"Error writing {rss_path.name}: {exc}")

    print(f"Successfully generated {json_path.name} and {rss_path.name}")


class FeedArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors like any other failed run."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stdout)
        fail(f"{self.prog}: error: {message}")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    pre_parser = FeedArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default=DEFAULT_CONFIG)
    pre_args, _ = pre_parser.parse_known_args(argv)
    try:
        config = load_config(Path(pre_args.config))
        workers = config_int(config, "workers", 1)
    except FATAL_ERRORS as exc:
        fail(f"Error loading config: {exc}")
    site = SiteConfig.from_mapping(config)

    def cfg_str(key: str, default: str) -> str:
        value = config.get(key)
        return default if value is None else str(value)

    parser = FeedArgumentParser(description="Build a JSON page collection and RSS feed from Markdown.")
    parser.add_argument("--config", default=pre_args.config, help="Path to config file (TOML/YAML/JSON).")
    parser.add_argument(
        "--content",
        default=cfg_str("content", DEFAULT_CONTENT_DIR),
        help="Directory containing Markdown documents.",
    )
    parser.add_argument(
        "--json-output",
        default=cfg_str("json_output", DEFAULT_JSON_OUTPUT),
        help="Path of the JSON page collection.",
    )
    parser.add_argument(
        "--rss-output",
        default=cfg_str("rss_output", DEFAULT_RSS_OUTPUT),
        help="Path of the RSS feed.",
    )
    parser.add_argument("--site-title", default=site.title, help="Feed channel title.")
    parser.add_argument("--site-url", default=site.url, help="Base URL for the channel and item links.")
    parser.add_argument("--site-description", default=site.description, help="Feed channel description.")
    parser.add_argument(
        "--workers",
        default=workers,
        type=int,
        help="Number of worker threads for parsing/rendering.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    build_feed(parse_args(argv))


if __name__ == "__main__":
    main()
