from __future__ import annotations

from pathlib import Path

import yaml

from .errors import FrontMatterError

FRONT_MATTER_DELIM = "---"
WORDS_PER_MINUTE = 200
TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class FrontMatterLoader(yaml.SafeLoader):
    """Safe loader that leaves dates and times as the strings they were written as."""


FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
FrontMatterLoader.add_constructor(TIMESTAMP_TAG, yaml.SafeLoader.construct_scalar)


def generate_slug(text: str) -> str:
    slug = text.strip().lower()
    slug = slug.replace(" ", "-")
    return slug.replace(".", "")


def parse_front_matter(text: str) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    if not clean_text.startswith(FRONT_MATTER_DELIM):
        return {}, clean_text

    # Only the first two delimiters count; later "---" lines stay in the body.
    parts = clean_text.split(FRONT_MATTER_DELIM, 2)
    if len(parts) < 3:
        raise FrontMatterError("invalid front-matter format")

    try:
        meta = yaml.load(parts[1], Loader=FrontMatterLoader)
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"invalid front-matter YAML: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise FrontMatterError(f"front matter must be a mapping, got {type(meta).__name__}")
    return meta, parts[2]


def count_words(text: str) -> int:
    return len(text.split())


def reading_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    # Half-up rounding: 100 words at 200 wpm is one minute, not zero.
    return int(count_words(text) / words_per_minute + 0.5)


def enrich_metadata(meta: dict, path: Path, body: str) -> dict:
    if "slug" not in meta:
        meta["slug"] = generate_slug(path.stem)
        meta["category"] = path.parent.name
    meta["read_time"] = reading_time(body)
    return meta
