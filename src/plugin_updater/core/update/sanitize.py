"""
Changelog sanitization for the details surface.

Release notes come from the remote API and are untrusted.  ``format_changelog``
turns them into display HTML:

  1. allow-listed tags survive with allow-listed attributes only;
  2. ``href`` must use http, https or mailto, anything else is dropped;
  3. script and style content is removed entirely; iframe, object and
     embed tags are removed but what they wrap is kept and sanitized;
  4. every other tag is escaped and shown as text;
  5. text is escaped and newlines become ``<br />``.
"""

from __future__ import annotations

import html
from html.parser import HTMLParser
from urllib.parse import urlsplit

ALLOWED_TAGS: dict[str, frozenset[str]] = {
    "a": frozenset({"href", "title"}),
    "abbr": frozenset({"title"}),
    "b": frozenset(),
    "blockquote": frozenset(),
    "br": frozenset(),
    "code": frozenset(),
    "del": frozenset(),
    "em": frozenset(),
    "h1": frozenset(),
    "h2": frozenset(),
    "h3": frozenset(),
    "h4": frozenset(),
    "h5": frozenset(),
    "h6": frozenset(),
    "hr": frozenset(),
    "i": frozenset(),
    "li": frozenset(),
    "ol": frozenset(),
    "p": frozenset(),
    "pre": frozenset(),
    "strong": frozenset(),
    "ul": frozenset(),
}

_VOID_TAGS = frozenset({"br", "hr"})
# Raw-text elements: the parser hands their body over as data until the end tag.
_DROP_CONTENT_TAGS = frozenset({"script", "style"})
# Dropped as tags only; whatever they wrap is sanitized like any other text.
_DROP_TAGS = frozenset({"iframe", "object", "embed", "param", "template", "frame", "frameset"})
_SAFE_SCHEMES = frozenset({"http", "https", "mailto"})


def _safe_url(value: str) -> bool:
    scheme = urlsplit(value.strip()).scheme.lower()
    return scheme in _SAFE_SCHEMES


class _AllowListSanitizer(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._out: list[str] = []
        self._open: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _DROP_CONTENT_TAGS:
            self._skip_depth += 1
            return
        if self._skip_depth:
            return
        if tag in _DROP_TAGS:
            return
        if tag not in ALLOWED_TAGS:
            self._out.append(html.escape(self.get_starttag_text() or f"<{tag}>"))
            return
        kept = []
        for name, value in attrs:
            if name not in ALLOWED_TAGS[tag] or value is None:
                continue
            if name == "href" and not _safe_url(value):
                continue
            kept.append(f' {name}="{html.escape(value, quote=True)}"')
        if tag in _VOID_TAGS:
            self._out.append(f"<{tag}{''.join(kept)} />")
            return
        self._out.append(f"<{tag}{''.join(kept)}>")
        self._open.append(tag)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _DROP_CONTENT_TAGS or tag in _DROP_TAGS:
            return
        if tag in _VOID_TAGS:
            self.handle_starttag(tag, attrs)
            return
        if self._skip_depth:
            return
        self._out.append(html.escape(self.get_starttag_text() or f"<{tag} />"))

    def handle_endtag(self, tag: str) -> None:
        if tag in _DROP_CONTENT_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
            return
        if self._skip_depth or tag in _VOID_TAGS or tag in _DROP_TAGS:
            return
        if tag not in ALLOWED_TAGS:
            self._out.append(html.escape(f"</{tag}>"))
            return
        if tag not in self._open:
            return
        # Close anything left open inside this element first.
        while self._open:
            open_tag = self._open.pop()
            self._out.append(f"</{open_tag}>")
            if open_tag == tag:
                break

    def handle_data(self, data: str) -> None:
        if self._skip_depth:
            return
        self._out.append(html.escape(data, quote=False))

    def handle_comment(self, data: str) -> None:
        return

    def result(self) -> str:
        self.close()
        while self._open:
            self._out.append(f"</{self._open.pop()}>")
        return "".join(self._out)


def sanitize_html(text: str) -> str:
    """Restrict *text* to the allow-listed markup, escaping everything else."""
    parser = _AllowListSanitizer()
    parser.feed(text)
    return parser.result()


def nl2br(text: str) -> str:
    """Insert ``<br />`` before every line break."""
    return text.replace("\r\n", "\n").replace("\r", "\n").replace("\n", "<br />\n")


def format_changelog(notes: str) -> str:
    """Display-ready changelog HTML from raw release notes ("" for empty notes)."""
    if not notes or not notes.strip():
        return ""
    return sanitize_html(nl2br(notes))
