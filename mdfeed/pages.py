from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .content import enrich_metadata, parse_front_matter
from .errors import ContentDirError, PageFormatError
from .render import render_markdown, write_output

MARKDOWN_SUFFIX = ".md"


@dataclass(frozen=True)
class Page:
    """One processed document: front matter plus derived fields, and the rendered body."""

    metadata: dict
    content: str

    def to_dict(self) -> dict:
        return {"metadata": self.metadata, "content": self.content}

    @classmethod
    def from_dict(cls, data: object) -> "Page":
        if not isinstance(data, dict):
            raise PageFormatError(f"page must be an object, got {type(data).__name__}")
        metadata = data.get("metadata")
        if metadata is None:
            metadata = {}
        if not isinstance(metadata, dict):
            raise PageFormatError("page metadata must be an object")
        content = data.get("content", "")
        if not isinstance(content, str):
            raise PageFormatError("page content must be a string")
        return cls(metadata=metadata, content=content)


def process_markdown_file(path: Path) -> Page:
    raw_text = path.read_text(encoding="utf-8")
    meta, body = parse_front_matter(raw_text)
    enrich_metadata(meta, path, body)
    html_content = render_markdown(body)
    return Page(metadata=meta, content=html_content)


def find_markdown_files(root: Path) -> list[Path]:
    if not root.exists():
        raise ContentDirError(f"Content directory not found: {root}")
    if not root.is_dir():
        raise ContentDirError(f"Content path is not a directory: {root}")
    return sorted(
        (path for path in root.rglob(f"*{MARKDOWN_SUFFIX}") if path.is_file()),
        # One directory level at a time, so "coffee/" is walked before "coffee.md".
        key=lambda p: p.relative_to(root).parts,
    )


def process_directory(root: Path, workers: int = 1) -> list[Page]:
    md_files = find_markdown_files(root)
    workers = min(max(1, workers), len(md_files)) if md_files else 1
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            try:
                return list(executor.map(process_markdown_file, md_files))
            except Exception:
                executor.shutdown(wait=True, cancel_futures=True)
                raise
    return [process_markdown_file(path) for path in md_files]


def write_pages_json(pages: list[Page], path: Path) -> None:
    try:
        text = json.dumps([page.to_dict() for page in pages], indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise PageFormatError(f"cannot serialize pages: {exc}") from exc
    write_output(path, text)


def read_pages_json(path: Path) -> list[Page]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise PageFormatError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, list):
        raise PageFormatError(f"{path} must hold a JSON array of pages")
    return [Page.from_dict(item) for item in data]


def group_by_category(pages: list[Page]) -> dict[str, list[Page]]:
    category_map: dict[str, list[Page]] = {}
    for page in pages:
        category = page.metadata.get("category")
        if not isinstance(category, str):
            category = ""
        category_map.setdefault(category, []).append(page)
    return category_map


def find_page(pages: list[Page], category: str, slug: str) -> Optional[Page]:
    for page in pages:
        if page.metadata.get("category") == category and page.metadata.get("slug") == slug:
            return page
    return None
