from __future__ import annotations

from pathlib import Path

import markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import HTML_RE, InlineProcessor
from markdown.preprocessors import HtmlBlockPreprocessor

RAW_HTML_OMITTED = "<!-- raw HTML omitted -->"

MARKDOWN_EXTENSIONS = [
    "tables",
    "fenced_code",
    "footnotes",
    "nl2br",
    "pymdownx.tilde",
    "pymdownx.tasklist",
    "pymdownx.magiclink",
]
MARKDOWN_EXTENSION_CONFIGS = {
    "pymdownx.tilde": {"subscript": False},
}


class OmitHtmlBlockPreprocessor(HtmlBlockPreprocessor):
    """Stash a placeholder comment in place of every raw HTML block."""

    def run(self, lines):
        # Earlier preprocessors (fenced code) stash their own output; leave those alone.
        first = len(self.md.htmlStash.rawHtmlBlocks)
        lines = super().run(lines)
        stash = self.md.htmlStash.rawHtmlBlocks
        for index in range(first, len(stash)):
            stash[index] = RAW_HTML_OMITTED
        return lines


class OmitHtmlInlineProcessor(InlineProcessor):
    def handleMatch(self, m, data):
        return self.md.htmlStash.store(RAW_HTML_OMITTED), m.start(0), m.end(0)


class OmitRawHtmlExtension(Extension):
    """Drop raw HTML from documents, leaving a marker comment behind."""

    def extendMarkdown(self, md):
        md.preprocessors.register(OmitHtmlBlockPreprocessor(md), "html_block", 20)
        md.inlinePatterns.register(OmitHtmlInlineProcessor(HTML_RE, md), "html", 90)


def create_markdown() -> markdown.Markdown:
    return markdown.Markdown(
        extensions=[*MARKDOWN_EXTENSIONS, OmitRawHtmlExtension()],
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
        output_format="xhtml",
    )


def render_markdown(body: str) -> str:
    md = create_markdown()
    html_content = md.convert(body)
    md.reset()
    return html_content


def write_output(path: Path, text: str) -> None:
    """Overwrite ``path`` with ``text``, creating missing output directories first."""
    if not path.parent.is_dir():
        path.parent.mkdir(parents=True)
    with path.open("w", encoding="utf-8") as handle:
        handle.write(text)
