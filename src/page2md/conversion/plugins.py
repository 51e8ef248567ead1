"""Rendering passes applied to the article HTML before html2text runs.

html2text covers the common Markdown constructs. Everything it cannot emit
in the configured style (fenced code, setext headings, the horizontal rule
text) and the extension plugins are handled here: a pass rewrites the
soup and reserves the literal Markdown it wants in a ``Snippets`` table.
The reserved token survives html2text untouched and is swapped back in
afterwards.
"""

from __future__ import annotations

import re
from typing import Optional, Protocol
from uuid import uuid4

import html2text
from bs4 import BeautifulSoup, NavigableString, Tag

from ..models.config import RenderConfig

YOUTUBE_RE = re.compile(
    r"(?:https?:)?//(?:www\.)?(?:youtube\.com|youtube-nocookie\.com)/embed/([A-Za-z0-9_-]{6,})"
)
VIMEO_RE = re.compile(r"(?:https?:)?//(?:player\.|www\.)?vimeo\.com/video/(\d+)")

LANGUAGE_CLASS_RE = re.compile(r"^(?:language|lang)-(.+)$")


class Snippets:
    """
    Literal Markdown reserved during preprocessing, restored after conversion.

    Tokens carry a random nonce per instance, so text already on the page
    can never be mistaken for one.
    """

    def __init__(self) -> None:
        self._items: list[str] = []
        self._prefix = f"P2M{uuid4().hex}S"
        self._token_re = re.compile(re.escape(self._prefix) + r"(\d+)X")

    def __len__(self) -> int:
        return len(self._items)

    def reserve(self, markdown: str) -> str:
        """Store markdown and return the placeholder token that stands for it."""
        self._items.append(markdown)
        return f"{self._prefix}{len(self._items) - 1}X"

    def restore(self, text: str) -> str:
        return self._token_re.sub(lambda m: self._items[int(m.group(1))], text)


def replace_with_block(soup: BeautifulSoup, element: Tag, snippets: Snippets, markdown: str) -> None:
    """Swap an element for a paragraph that renders as ``markdown``."""
    block = soup.new_tag("p")
    block.string = snippets.reserve(markdown)
    element.replace_with(block)


class RenderPlugin(Protocol):
    """
    A rendering extension.

    ``configure`` adjusts the html2text instance, ``apply`` rewrites the
    soup. Either may be a no-op.
    """

    name: str

    def configure(self, converter: html2text.HTML2Text) -> None: ...

    def apply(self, soup: BeautifulSoup, snippets: Snippets) -> None: ...


class TablePlugin:
    """Render tables as pipe tables."""

    name = "tables"

    def configure(self, converter: html2text.HTML2Text) -> None:
        converter.ignore_tables = False
        converter.pad_tables = True

    def apply(self, soup: BeautifulSoup, snippets: Snippets) -> None:
        pass


class StrikethroughPlugin:
    """Render <del>, <s> and <strike> as ~~text~~."""

    name = "strikethrough"

    def __init__(self, delimiter: str = "~~") -> None:
        self.delimiter = delimiter

    def configure(self, converter: html2text.HTML2Text) -> None:
        pass

    def apply(self, soup: BeautifulSoup, snippets: Snippets) -> None:
        for tag in soup.find_all(["del", "s", "strike"]):
            if not tag.get_text(strip=True):
                tag.decompose()
                continue
            tag.insert(0, NavigableString(snippets.reserve(self.delimiter)))
            tag.append(NavigableString(snippets.reserve(self.delimiter)))
            tag.unwrap()


class TaskListPlugin:
    """Render checkboxes at the start of list items as [x] / [ ]."""

    name = "task_lists"

    def configure(self, converter: html2text.HTML2Text) -> None:
        pass

    def apply(self, soup: BeautifulSoup, snippets: Snippets) -> None:
        for checkbox in soup.find_all("input", attrs={"type": "checkbox"}):
            if checkbox.find_parent("li") is None:
                continue
            marker = "[x] " if checkbox.has_attr("checked") else "[ ] "

            following = checkbox.next_sibling
            if isinstance(following, NavigableString):
                following.replace_with(NavigableString(str(following).lstrip()))

            checkbox.replace_with(NavigableString(snippets.reserve(marker)))


class YoutubeEmbedPlugin:
    """Render embedded YouTube players as a linked thumbnail."""

    name = "youtube_embed"

    def configure(self, converter: html2text.HTML2Text) -> None:
        pass

    def apply(self, soup: BeautifulSoup, snippets: Snippets) -> None:
        for iframe in soup.find_all("iframe", src=True):
            match = YOUTUBE_RE.search(str(iframe["src"]))
            if not match:
                continue
            video_id = match.group(1)
            markdown = (
                f"[![YouTube Video](https://img.youtube.com/vi/{video_id}/0.jpg)]"
                f"(https://www.youtube.com/watch?v={video_id})"
            )
            replace_with_block(soup, iframe, snippets, markdown)


class VimeoEmbedPlugin:
    """Render embedded Vimeo players as a link to the video page."""

    name = "vimeo_embed"

    def configure(self, converter: html2text.HTML2Text) -> None:
        pass

    def apply(self, soup: BeautifulSoup, snippets: Snippets) -> None:
        for iframe in soup.find_all("iframe", src=True):
            match = VIMEO_RE.search(str(iframe["src"]))
            if not match:
                continue
            title = str(iframe.get("title") or "").strip() or "Vimeo Video"
            title = title.replace("[", "\\[").replace("]", "\\]")
            replace_with_block(soup, iframe, snippets, f"[{title}](https://vimeo.com/{match.group(1)})")


PLUGINS: dict[str, type] = {
    "tables": TablePlugin,
    "strikethrough": StrikethroughPlugin,
    "task_lists": TaskListPlugin,
    "youtube_embed": YoutubeEmbedPlugin,
    "vimeo_embed": VimeoEmbedPlugin,
}


def build_plugins(names: list[str]) -> list[RenderPlugin]:
    """Instantiate plugins by name, in the order given."""
    plugins = []
    for name in names:
        try:
            plugins.append(PLUGINS[name]())
        except KeyError:
            raise ValueError(f"Unknown render plugin: {name}") from None
    return plugins


# Style passes


def _code_language(pre: Tag) -> Optional[str]:
    candidates = [pre]
    code = pre.find("code")
    if isinstance(code, Tag):
        candidates.insert(0, code)
    for element in candidates:
        for cls in element.get("class") or []:
            match = LANGUAGE_CLASS_RE.match(cls)
            if match:
                return match.group(1)
    return None


def fence_code_blocks(soup: BeautifulSoup, snippets: Snippets, fence: str) -> None:
    for pre in soup.find_all("pre"):
        language = _code_language(pre) or ""
        code = pre.get_text().strip("\n")
        replace_with_block(soup, pre, snippets, f"{fence}{language}\n{code}\n{fence}")


def setext_headings(soup: BeautifulSoup, snippets: Snippets) -> None:
    # Setext only has two levels; h3-h6 stay ATX
    for heading in soup.find_all(["h1", "h2"]):
        text = re.sub(r"\s+", " ", heading.get_text(" ", strip=True))
        if not text:
            heading.decompose()
            continue
        underline = ("=" if heading.name == "h1" else "-") * len(text)
        replace_with_block(soup, heading, snippets, f"{text}\n{underline}")


def horizontal_rules(soup: BeautifulSoup, snippets: Snippets, rule: str) -> None:
    for hr in soup.find_all("hr"):
        replace_with_block(soup, hr, snippets, rule)


def apply_style(soup: BeautifulSoup, snippets: Snippets, options: RenderConfig) -> None:
    """Apply the style rules html2text has no switch for."""
    if options.code_block_style == "fenced":
        fence_code_blocks(soup, snippets, options.code_fence)
    if options.heading_style == "setext":
        setext_headings(soup, snippets)
    horizontal_rules(soup, snippets, options.horizontal_rule)
