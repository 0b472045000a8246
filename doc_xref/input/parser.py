"""
Markup parser for documentation articles.

This module parses one article file into an Article. The format uses:
- a single # heading for the article title
- an optional @Metadata { ... } block of @Directive(...) lines
- the first paragraph after the title as the abstract
- fenced code blocks (``` or ~~~), whose contents are never scanned for links
- <doc:Slug> tokens and [text](doc:Slug) links as cross-references
- a ## Topics section of ### group headings and "- <doc:Slug>" items
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ..core.errors import ArticleParseError
from ..core.types import (
    Article,
    ArticleMetadata,
    Availability,
    BodyBlock,
    CallToAction,
    CallToActionPurpose,
    CodeSample,
    Image,
    PageImage,
    PageImagePurpose,
    Prose,
    Reference,
    TopicList,
)

logger = logging.getLogger(__name__)


TITLE_RE = re.compile(r"^#\s+(.+?)\s*$")  # Matches "# Title"
SECTION_RE = re.compile(r"^##\s+(.+?)\s*$")  # Matches "## Section"
GROUP_RE = re.compile(r"^###\s+(.+?)\s*$")  # Matches "### Group"
HEADING_RE = re.compile(r"^#{4,6}\s+(.+?)\s*$")
FENCE_RE = re.compile(r"^\s*(```+|~~~+)\s*([\w+#.-]*)\s*$")
METADATA_START_RE = re.compile(r"^\s*@Metadata\s*\{\s*$")
BLOCK_END_RE = re.compile(r"^\s*\}\s*$")
DIRECTIVE_RE = re.compile(r"^\s*@(\w+)\s*(?:\((.*)\))?\s*(\{\s*\}?)?\s*$")
LIST_ITEM_RE = re.compile(r"^\s*[-*+]\s+(.+?)\s*$")
MD_IMAGE_RE = re.compile(r"^\s*!\[([^\]]*)\]\(([^)\s]+)\)\s*$")
DOC_TOKEN_RE = re.compile(
    r"<doc:(?P<slug>[^>#\s]+)(?:#(?P<fragment>[^>\s]*))?>"
    r"|\[[^\]]*\]\(doc:(?P<link_slug>[^)#\s]+)(?:#(?P<link_fragment>[^)\s]*))?\)"
)
CODE_SPAN_RE = re.compile(r"(`+)(?!`).*?(?<!`)\1(?!`)")  # Inline `code` spans
ARGUMENT_RE = re.compile(
    r'\s*(?:(?P<key>\w+)\s*:\s*)?(?P<value>"(?:[^"\\]|\\.)*"|[^,"]+)'
)

TOPICS_HEADING = "Topics"


def slug_from_title(title: str) -> str:
    """Derive a slug from a title when no file name is available.

    Case is preserved because references are matched case-sensitively.

    Examples:
        >>> slug_from_title("Working at PwC")
        'Working-at-PwC'
    """
    slug = re.sub(r"[^\w\s-]", "", title).strip()
    slug = re.sub(r"[\s-]+", "-", slug)
    return slug or "untitled"


def extract_references(text: str, source: str, line: int | None = None) -> list[Reference]:
    """Find every cross-reference token in a piece of text, in order.

    Inline code spans are literal text and are skipped.
    """
    refs = []
    for match in DOC_TOKEN_RE.finditer(CODE_SPAN_RE.sub("", text)):
        target = match.group("slug") or match.group("link_slug")
        fragment = match.group("fragment") or match.group("link_fragment") or None
        refs.append(Reference(target=target, source=source, fragment=fragment, line=line))
    return refs


def parse_article(text: str, slug: str | None = None, path: str | Path | None = None) -> Article:
    """Parse article markup into an Article.

    Args:
        text: The full markup content
        slug: Explicit slug; defaults to the file stem of ``path``, or a
            slug derived from the title
        path: Source file, used for the default slug and error messages

    Returns:
        The parsed Article

    Raises:
        ArticleParseError: If the title is missing, a block is left open,
            or a metadata directive carries an unrecognised value
    """
    path_str = str(path) if path is not None else None
    if slug is None and path is not None:
        slug = Path(path).stem
    state = _ParseState(path_str)

    lines = text.splitlines()
    index = 0
    while index < len(lines):
        lineno = index + 1
        line = lines[index]
        index += 1

        if state.fence is not None:
            state.feed_code(line, lineno)
            continue

        fence_match = FENCE_RE.match(line)
        if fence_match:
            state.flush_paragraph()
            state.open_fence(fence_match.group(1), fence_match.group(2), lineno)
            continue

        if METADATA_START_RE.match(line):
            state.flush_paragraph()
            index = _parse_metadata(lines, index, state)
            continue

        if state.title is None:
            title_match = TITLE_RE.match(line)
            if title_match:
                state.title = title_match.group(1)
                continue

        section_match = SECTION_RE.match(line)
        if section_match:
            state.flush_paragraph()
            state.start_section(section_match.group(1), lineno)
            continue

        group_match = GROUP_RE.match(line)
        if group_match and state.in_topics:
            state.flush_paragraph()
            state.start_topic_group(group_match.group(1))
            continue

        if group_match or HEADING_RE.match(line) or TITLE_RE.match(line):
            state.flush_paragraph()
            heading = line.lstrip("#").strip()
            state.add_prose(heading, [(heading, lineno)])
            continue

        image_match = MD_IMAGE_RE.match(line)
        if image_match:
            state.flush_paragraph()
            state.blocks.append(Image(source=image_match.group(2), alt=image_match.group(1) or None))
            continue

        directive_match = DIRECTIVE_RE.match(line)
        if directive_match:
            state.flush_paragraph()
            _body_directive(directive_match.group(1), directive_match.group(2), state, lineno)
            continue

        if BLOCK_END_RE.match(line):
            state.flush_paragraph()
            continue

        if not line.strip():
            state.flush_paragraph()
            continue

        item_match = LIST_ITEM_RE.match(line)
        if item_match and state.in_topics:
            if state.add_topic_item(item_match.group(1), lineno):
                continue

        state.paragraph.append((line.strip(), lineno))

    if state.fence is not None:
        raise ArticleParseError(path_str, "unclosed code block", state.fence_line)
    state.flush_paragraph()
    state.close_topic_group()

    if state.title is None:
        raise ArticleParseError(path_str, "missing '# Title' heading")

    final_slug = slug or slug_from_title(state.title)
    return state.build(final_slug)


class _ParseState:
    """Accumulator for one article while its lines are scanned."""

    def __init__(self, path: str | None) -> None:
        self.path = path
        self.title: str | None = None
        self.subtitle: str | None = None
        self.blocks: list[BodyBlock] = []
        # Paragraph lines keep their line numbers so references can point back
        self.paragraph: list[tuple[str, int]] = []
        self.topics: list[TopicList] = []
        self.in_topics = False
        self.topic_heading: str | None = None
        self.topic_items: list[tuple[str, int]] = []
        self.topic_started = False
        self.fence: str | None = None
        self.fence_language: str | None = None
        self.fence_line: int | None = None
        self.code_lines: list[str] = []
        self.metadata: dict = {"page_images": []}

    # Prose

    def add_prose(self, text: str, lines: list[tuple[str, int]]) -> None:
        # source slug is bound in build()
        self.blocks.append(Prose(text=text, references=tuple(_pending_refs(lines))))

    def flush_paragraph(self) -> None:
        if not self.paragraph:
            return
        text = " ".join(part for part, _ in self.paragraph)
        if self.subtitle is None and self.title is not None and not self.blocks:
            self.subtitle = text
        self.add_prose(text, self.paragraph)
        self.paragraph = []

    # Code

    def open_fence(self, fence: str, language: str, lineno: int) -> None:
        self.fence = fence
        self.fence_language = language or None
        self.fence_line = lineno
        self.code_lines = []

    def feed_code(self, line: str, lineno: int) -> None:
        closing = line.strip()
        # a closing fence may be longer than the opening one
        if closing and set(closing) == {self.fence[0]} and len(closing) >= len(self.fence):
            self.blocks.append(CodeSample(language=self.fence_language, code="\n".join(self.code_lines)))
            self.fence = None
            self.fence_language = None
            self.fence_line = None
            self.code_lines = []
            return
        self.code_lines.append(line)

    # Topics

    def start_section(self, heading: str, lineno: int) -> None:
        self.close_topic_group()
        self.in_topics = heading == TOPICS_HEADING
        if not self.in_topics:
            self.add_prose(heading, [(heading, lineno)])

    def start_topic_group(self, heading: str) -> None:
        self.close_topic_group()
        self.topic_heading = heading
        self.topic_started = True

    def add_topic_item(self, item: str, lineno: int) -> bool:
        if not DOC_TOKEN_RE.search(item):
            return False
        self.topic_items.append((item, lineno))
        self.topic_started = True
        return True

    def close_topic_group(self) -> None:
        if self.topic_started and (self.topic_items or self.topic_heading is not None):
            self.topics.append(
                TopicList(heading=self.topic_heading, references=tuple(_pending_refs(self.topic_items)))
            )
        self.topic_heading = None
        self.topic_items = []
        self.topic_started = False

    def build(self, slug: str) -> Article:
        blocks = tuple(
            Prose(text=b.text, references=_bind(b.references, slug)) if isinstance(b, Prose) else b
            for b in self.blocks
        )
        topics = tuple(
            TopicList(heading=t.heading, references=_bind(t.references, slug)) for t in self.topics
        )
        meta = dict(self.metadata)
        meta["page_images"] = tuple(meta["page_images"])
        return Article(
            slug=slug,
            title=self.title or "",
            subtitle=self.subtitle,
            body=blocks,
            topics=topics,
            metadata=ArticleMetadata(**meta),
            path=self.path,
        )


def _pending_refs(lines: list[tuple[str, int]]) -> list[Reference]:
    refs: list[Reference] = []
    for text, lineno in lines:
        refs.extend(extract_references(text, source="", line=lineno))
    return refs


def _bind(refs: tuple[Reference, ...], slug: str) -> tuple[Reference, ...]:
    return tuple(
        Reference(target=r.target, source=slug, fragment=r.fragment, line=r.line) for r in refs
    )


def _parse_metadata(lines: list[str], index: int, state: _ParseState) -> int:
    """Consume a @Metadata block starting at ``index``; return the next index."""
    start = index
    while index < len(lines):
        lineno = index + 1
        line = lines[index]
        index += 1
        if BLOCK_END_RE.match(line):
            return index
        if not line.strip():
            continue
        match = DIRECTIVE_RE.match(line)
        if not match:
            raise ArticleParseError(state.path, f"unexpected line in @Metadata: {line.strip()!r}", lineno)
        _metadata_directive(match.group(1), match.group(2), state, lineno)
    raise ArticleParseError(state.path, "unclosed @Metadata block", start)


def _metadata_directive(name: str, raw_args: str | None, state: _ParseState, lineno: int) -> None:
    positional, named = _parse_arguments(raw_args or "")
    meta = state.metadata

    if name == "PageImage":
        purpose = _enum_value(PageImagePurpose, named.get("purpose"), "purpose", state, lineno)
        source = _required(named, "source", name, state, lineno)
        meta["page_images"].append(PageImage(purpose=purpose, source=source, alt=named.get("alt")))
    elif name == "CallToAction":
        url = named.get("url") or named.get("file")
        if not url:
            raise ArticleParseError(state.path, "@CallToAction requires 'url' or 'file'", lineno)
        purpose = CallToActionPurpose.LINK
        if "purpose" in named:
            purpose = _enum_value(CallToActionPurpose, named["purpose"], "purpose", state, lineno)
        meta["call_to_action"] = CallToAction(url=url, purpose=purpose, label=named.get("label"))
    elif name == "Available":
        if not positional:
            raise ArticleParseError(state.path, "@Available requires a platform name", lineno)
        meta["available"] = Availability(platform=positional[0], introduced=named.get("introduced"))
    elif name == "TitleHeading":
        if not positional:
            raise ArticleParseError(state.path, "@TitleHeading requires a heading", lineno)
        meta["title_heading"] = positional[0]
    elif name == "TechnologyRoot":
        meta["technology_root"] = True
    else:
        logger.warning(f"Ignoring unknown metadata directive @{name} in {state.path or '<string>'}:{lineno}")


def _body_directive(name: str, raw_args: str | None, state: _ParseState, lineno: int) -> None:
    if name != "Image":
        # Layout directives (@Row, @Links, ...) only wrap content
        logger.debug(f"Skipping body directive @{name} in {state.path or '<string>'}:{lineno}")
        return
    _, named = _parse_arguments(raw_args or "")
    source = _required(named, "source", name, state, lineno)
    state.blocks.append(Image(source=source, alt=named.get("alt")))


def _parse_arguments(raw: str) -> tuple[list[str], dict[str, str]]:
    """Split ``purpose: icon, source: "x"`` into positional and named values."""
    positional: list[str] = []
    named: dict[str, str] = {}
    for match in ARGUMENT_RE.finditer(raw):
        value = match.group("value").strip()
        if not value:
            continue
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1].replace('\\"', '"')
        key = match.group("key")
        if key:
            named[key] = value
        else:
            positional.append(value)
    return positional, named


def _enum_value(enum_cls, value: str | None, field_name: str, state: _ParseState, lineno: int):
    allowed = ", ".join(member.value for member in enum_cls)
    if value is None:
        raise ArticleParseError(state.path, f"missing '{field_name}' (expected one of: {allowed})", lineno)
    try:
        return enum_cls(value)
    except ValueError:
        raise ArticleParseError(
            state.path, f"unrecognised {field_name} '{value}' (expected one of: {allowed})", lineno
        ) from None


def _required(named: dict[str, str], key: str, directive: str, state: _ParseState, lineno: int) -> str:
    value = named.get(key)
    if not value:
        raise ArticleParseError(state.path, f"@{directive} requires '{key}'", lineno)
    return value
