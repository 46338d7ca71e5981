"""Markdown to HTML for chat bubbles.

Raw text is HTML-escaped before any formatting is applied, so nothing the
model or the user types can inject markup into the page. Single newlines
become line breaks, as in GitHub-flavored chat rendering.

Supports: fenced code, inline code, bold, italic, strikethrough, headings,
links (http, https, mailto), ordered and unordered lists.
"""

import html
import re

_CODE_BLOCK = re.compile(r"```[\w+-]*[^\S\n]*\n?([\s\S]*?)```")
_INLINE_CODE = re.compile(r"`([^`\n]+)`")
_LINK = re.compile(r"\[([^\]\n]+)\]\(([^)\s]+)\)")
_HEADING = re.compile(r"^(#{1,6})\s+(.+?)\s*#*$")
_BULLET = re.compile(r"^[-*+]\s+(.*)$")
_NUMBERED = re.compile(r"^\d+[.)]\s+(.*)$")
_PLACEHOLDER = re.compile(r"\x00(\d+)\x00")

_BOLD = (re.compile(r"\*\*(.+?)\*\*"), re.compile(r"\b__(.+?)__\b"))
_ITALIC = (re.compile(r"(?<![*\w])\*(?![\s*])([^*\n]+?)\*"), re.compile(r"\b_([^_\n]+)_\b"))
_STRIKE = re.compile(r"~~(.+?)~~")

SAFE_LINK_SCHEMES = ("http://", "https://", "mailto:")

CODE_BLOCK_HTML = (
    '<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs">'
    "<code>{}</code></pre>"
)
INLINE_CODE_HTML = '<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">{}</code>'
LINK_HTML = '<a href="{url}" class="text-blue-600 underline" target="_blank" rel="noopener noreferrer">{label}</a>'
HEADING_CLASSES = {1: "text-xl", 2: "text-lg", 3: "text-base"}
LIST_OPEN = {
    "ul": '<ul class="list-disc list-inside my-2 space-y-1">',
    "ol": '<ol class="list-decimal list-inside my-2 space-y-1">',
}


class _Stash:
    """Holds finished HTML fragments out of reach of later substitutions."""

    def __init__(self) -> None:
        self._fragments: list[str] = []

    def put(self, fragment: str) -> str:
        self._fragments.append(fragment)
        return f"\x00{len(self._fragments) - 1}\x00"

    def restore(self, text: str) -> str:
        # Link labels may themselves hold inline code placeholders
        while _PLACEHOLDER.search(text):
            text = _PLACEHOLDER.sub(lambda m: self._fragments[int(m.group(1))], text)
        return text

    def is_placeholder(self, line: str) -> bool:
        return _PLACEHOLDER.fullmatch(line.strip()) is not None


def _inline(text: str, stash: _Stash) -> str:
    def link(match: re.Match[str]) -> str:
        label, url = match.groups()
        if not url.lower().startswith(SAFE_LINK_SCHEMES):
            return label
        return stash.put(LINK_HTML.format(url=url, label=label))

    text = _INLINE_CODE.sub(lambda m: stash.put(INLINE_CODE_HTML.format(m.group(1))), text)
    text = _LINK.sub(link, text)
    for pattern in _BOLD:
        text = pattern.sub(r"<strong>\1</strong>", text)
    text = _STRIKE.sub(r"<del>\1</del>", text)
    for pattern in _ITALIC:
        text = pattern.sub(r"<em>\1</em>", text)
    return text


def _list_item(line: str) -> tuple[str | None, str]:
    if match := _BULLET.match(line):
        return "ul", match.group(1)
    if match := _NUMBERED.match(line):
        return "ol", match.group(1)
    return None, line


def markdown_to_html(text: str) -> str:
    """Convert chat markdown to sanitized HTML."""
    stash = _Stash()
    text = html.escape(text.replace("\x00", "").replace("\r\n", "\n"))
    text = _CODE_BLOCK.sub(lambda m: stash.put(CODE_BLOCK_HTML.format(m.group(1))), text)

    # (html, is_block) pairs; consecutive inline lines are joined with <br>
    pieces: list[tuple[str, bool]] = []
    open_list: str | None = None

    for line in text.split("\n"):
        stripped = line.strip()
        tag, item = _list_item(stripped)

        if open_list and tag != open_list:
            pieces.append((f"</{open_list}>", True))
            open_list = None

        if tag:
            if open_list is None:
                pieces.append((LIST_OPEN[tag], True))
                open_list = tag
            pieces.append((f"<li>{_inline(item, stash)}</li>", True))
        elif heading := _HEADING.match(stripped):
            level = len(heading.group(1))
            size = HEADING_CLASSES.get(level, "text-sm")
            pieces.append(
                (f'<h{level} class="{size} font-semibold my-1">{_inline(heading.group(2), stash)}</h{level}>', True)
            )
        elif stash.is_placeholder(line):
            pieces.append((stripped, True))
        else:
            pieces.append((_inline(line, stash), False))

    if open_list:
        pieces.append((f"</{open_list}>", True))

    output: list[str] = []
    previous_inline = False
    for fragment, is_block in pieces:
        if not is_block and previous_inline:
            output.append("<br>")
        output.append(fragment)
        previous_inline = not is_block

    return stash.restore("".join(output))
