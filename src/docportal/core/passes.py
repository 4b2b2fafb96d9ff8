"""Markup transform passes: each one is a pure `(html, ctx) -> html` rewrite.

Passes are regex-based and written against the known export dialect: anything
a rule does not recognise is left untouched, so no pass raises on odd input.
The order they run in is fixed by `docportal.core.normalize.PIPELINE`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

from docportal.core.paths import is_absolute_reference, resolve
from docportal.core.store import ContentStore


@dataclass(frozen=True)
class PassContext:
    anchor_path: str                        # site path of the document being transformed
    store: Optional[ContentStore] = None    # snippet source; None means every snippet is missing


PassFn = Callable[[str, Optional[PassContext]], str]

# Classes the pipeline emits itself; any other authoring-tool class is dropped.
MARKER_CLASSES = frozenset({
    'internal-link', 'broken-link', 'snippet-content', 'snippet-placeholder',
    'snippet-text', 'anchor', 'bold-text',
    'code-block', 'syntax-highlighted', 'inline-code', 'video-container',
})

INLINE_TAGS = 'em|strong|b|i|span|a|code|sub|sup|kbd|small|mark|abbr|cite'

PARAGRAPH_BREAK_TAGS = frozenset({
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'p', 'ul', 'ol', 'dl', 'table',
    'blockquote', 'pre', 'form', 'fieldset', 'article', 'section', 'aside',
    'nav', 'header', 'footer', 'main', 'details', 'figure', 'address',
})
LINE_BREAK_TAGS = frozenset({
    'li', 'dt', 'dd', 'thead', 'tbody', 'tfoot', 'tr', 'legend', 'summary',
    'figcaption', 'textarea', 'select', 'button', 'progress', 'meter',
})

_ATTR_VALUE = r'''(?:"[^"]*"|'[^']*'|[^\s"'=<>`]+)'''
_TAG_RE = re.compile(
    r'<(?P<name>[a-zA-Z][\w:.-]*)'
    r'(?P<attrs>(?:\s+[^\s=<>/"\']+(?:\s*=\s*' + _ATTR_VALUE + r')?)*)'
    r'(?P<tail>\s*/?)>'
)


def get_attr(attrs: str, name: str) -> str | None:
    """Value of attribute `name` inside a tag's attribute string, else None."""
    m = re.search(
        r'(?:^|\s)' + re.escape(name) + r'''\s*=\s*(?:"([^"]*)"|'([^']*)')''',
        attrs, re.I,
    )
    if not m:
        return None
    return m.group(1) if m.group(1) is not None else m.group(2)


def rewrite_tag_attrs(html: str, fn: Callable[[str], str]) -> str:
    """Apply fn to the attribute string of every start tag; text is never touched."""
    def _tag(m: re.Match) -> str:
        attrs = m.group('attrs')
        new = fn(attrs)
        if new == attrs:
            return m.group(0)
        return f"<{m.group('name')}{new}{m.group('tail')}>"
    return _TAG_RE.sub(_tag, html)


def sub_until_stable(pattern: re.Pattern, repl, text: str, limit: int = 50) -> str:
    """Re-run a substitution until it stops changing the text (nested constructs)."""
    for _ in range(limit):
        new = pattern.sub(repl, text)
        if new == text:
            break
        text = new
    return text


@lru_cache(maxsize=None)
def _outside_pre_regex(pattern: str) -> re.Pattern:
    return re.compile(r'(?P<pre><pre\b[^>]*>.*?</pre\s*>)|' + pattern, re.I | re.S)


def sub_outside_pre(pattern: str, repl, html: str) -> str:
    """Like re.sub, but leaves the inside of <pre> elements alone."""
    def _fn(m: re.Match) -> str:
        if m.group('pre') is not None:
            return m.group('pre')
        return repl(m) if callable(repl) else m.expand(repl)
    return _outside_pre_regex(pattern).sub(_fn, html)


# --- executable content ---

_SCRIPT_STYLE_RE = re.compile(r'<(script|style)\b[^>]*>.*?</\1\s*>', re.I | re.S)
_SCRIPT_STYLE_EMPTY_RE = re.compile(r'<(?:script|style)\b[^>]*/>', re.I)


def strip_executable(html: str, ctx: PassContext = None) -> str:
    """Drop <script> and <style> elements with their content."""
    html = _SCRIPT_STYLE_RE.sub('', html)
    return _SCRIPT_STYLE_EMPTY_RE.sub('', html)


# --- vendor elements ---

_XREF_RE = re.compile(r'<MadCap:xref\b([^>]*)>(.*?)</MadCap:xref\s*>', re.I | re.S)


def _xref(m: re.Match) -> str:
    href = get_attr(m.group(1), 'href')
    text = m.group(2)
    if href:
        return f'<a href="{href}" class="internal-link">{text}</a>'
    return f'<span class="broken-link">{text}</span>'


def resolve_cross_references(html: str, ctx: PassContext = None) -> str:
    """Rewrite cross-reference elements into plain links marked internal-link."""
    return _XREF_RE.sub(_xref, html)


_CONDITIONAL_RE = re.compile(
    r'<MadCap:conditionalText\b[^>]*(?<!/)>'
    r'((?:(?!<MadCap:conditionalText\b).)*?)'
    r'</MadCap:conditionalText\s*>',
    re.I | re.S,
)
_VENDOR_PAIR_RE = re.compile(
    r'<MadCap:([\w.-]+)(?=[\s/>])[^>]*(?<!/)>'
    r'(?:(?!<MadCap:\1[\s/>]).)*?'
    r'</MadCap:\1\s*>',
    re.I | re.S,
)
_VENDOR_SELF_CLOSING_RE = re.compile(r'<MadCap:[^>]*/>', re.I)
_VENDOR_STRAY_RE = re.compile(r'</?MadCap:[^>]*>', re.I)


def resolve_conditional_text(html: str, ctx: PassContext = None) -> str:
    """Unwrap conditional text (all conditions visible); delete every other vendor element."""
    html = sub_until_stable(_CONDITIONAL_RE, r'\1', html)
    html = sub_until_stable(_VENDOR_PAIR_RE, '', html)
    html = _VENDOR_SELF_CLOSING_RE.sub('', html)
    return _VENDOR_STRAY_RE.sub('', html)


# --- attributes ---

_VENDOR_ATTR_RE = re.compile(
    r'\s+(?:MadCap:[\w.-]+|xmlns:[\w.-]+|data-mc-[\w.-]+)(?:\s*=\s*' + _ATTR_VALUE + ')?',
    re.I,
)
_CLASS_ATTR_RE = re.compile(r'''\s+class\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+))''', re.I)


def strip_vendor_attributes(html: str, ctx: PassContext = None) -> str:
    return rewrite_tag_attrs(html, lambda attrs: _VENDOR_ATTR_RE.sub('', attrs))


def is_marker_class(value: str) -> bool:
    tokens = value.split()
    return bool(tokens) and all(t in MARKER_CLASSES or t.startswith('language-') for t in tokens)


def _strip_class(attrs: str) -> str:
    def _cls(m: re.Match) -> str:
        value = next(v for v in m.groups() if v is not None)
        return m.group(0) if is_marker_class(value) else ''
    return _CLASS_ATTR_RE.sub(_cls, attrs)


def strip_classes(html: str, ctx: PassContext = None) -> str:
    """Remove class attributes unless every class is one of the pipeline's markers."""
    return rewrite_tag_attrs(html, _strip_class)


# --- legacy tag repair ---

def _innermost(open_tag: str, name: str) -> str:
    """open_tag, a body holding no further <name> element, then </name>."""
    return open_tag + r'((?:(?!<' + name + r'[\s>]).)*?)</' + name + r'\s*>'


LEGACY_REPAIRS: list[tuple[re.Pattern, str]] = [
    # <>text</></a>: an emptied link whose target was lost on export
    (re.compile(r'<>([^<]+)</></a>'), r'<span class="broken-link">\1</span>'),
    # named anchor: marker span first, any wrapped text kept after it
    (re.compile(r'<a\s+name\s*=\s*"([^"]+)"(?:(?!\bhref\b)[^>])*>\s*((?:(?!<a\b).)*?)\s*</a\s*>', re.I | re.S),
     r'<span id="\1" class="anchor"></span>\2'),
    (re.compile(_innermost(r'<b\s+style\s*=\s*"\s*font-style:\s*italic;?\s*"\s*>', 'b'), re.I | re.S), r'<em>\1</em>'),
    (re.compile(_innermost(r'<i>', 'i'), re.I | re.S), r'<em>\1</em>'),
    (re.compile(_innermost(r'<b>', 'b'), re.I | re.S), r'<span class="bold-text">\1</span>'),
    (re.compile(_innermost(r'<u>', 'u'), re.I | re.S), r'<span style="text-decoration: underline;">\1</span>'),
    (re.compile(r'</img\s*>', re.I), ''),
    (re.compile(r'<\s+/\s*>'), ''),
    (re.compile(r'<br\s*/?>', re.I), '<br />'),
    (re.compile(r'(?<!<div class="video-container">)<iframe\b([^>]*?)\s*/?>(?:\s*</iframe\s*>)?', re.I),
     r'<div class="video-container"><iframe\1></iframe></div>'),
]


def _repair_once(html: str) -> str:
    for pattern, repl in LEGACY_REPAIRS:
        html = pattern.sub(repl, html)
    return html


def repair_legacy_tags(html: str, ctx: PassContext = None, limit: int = 50) -> str:
    """Apply the repair table until stable; nested <b>/<i>/<u> resolve innermost first."""
    for _ in range(limit):
        repaired = _repair_once(html)
        if repaired == html:
            break
        html = repaired
    return html


# --- images ---

_IMG_SRC_RE = re.compile(
    r'''(<img\b[^>]*?\ssrc\s*=\s*)(?:(["'])(.*?)\2|([^\s"'=<>`]+))''',
    re.I | re.S,
)


def resolve_image_paths(html: str, ctx: PassContext) -> str:
    """Make every relative <img src> site-rooted, anchored at ctx.anchor_path."""
    def _img(m: re.Match) -> str:
        quote = m.group(2) or '"'
        src = (m.group(3) if m.group(2) else m.group(4)).strip()
        if is_absolute_reference(src):
            return m.group(0)
        return f'{m.group(1)}{quote}{resolve(ctx.anchor_path, src)}{quote}'
    return _IMG_SRC_RE.sub(_img, html)


# --- whitespace ---

_BLOCK_CLOSE_RE = re.compile(
    r'(?P<pre><pre\b[^>]*>.*?</pre\s*>)\s*'
    r'|(?P<close></(?P<tag>' + '|'.join(sorted(PARAGRAPH_BREAK_TAGS | LINE_BREAK_TAGS)) + r')\s*>)\s*',
    re.I | re.S,
)


def _block_break(m: re.Match) -> str:
    if m.group('pre') is not None:
        tag, closing = 'pre', m.group('pre')
    else:
        tag, closing = m.group('tag').lower(), m.group('close')
    rest = m.string[m.end():m.end() + 2]
    # nothing between this close and the parent's close, or end of input
    if not rest or rest.startswith('</'):
        return closing
    return closing + ('\n' if tag in LINE_BREAK_TAGS else '\n\n')


def tidy_whitespace(html: str) -> str:
    html = re.sub(r'\r\n?', '\n', html)
    html = sub_outside_pre(r'[ \t]+', ' ', html)
    html = sub_outside_pre(r' ?\n ?', '\n', html)
    return sub_outside_pre(r'\n{3,}', '\n\n', html)


def normalize_block_spacing(html: str, ctx: PassContext = None) -> str:
    """Blank line after block closes, newline after row/item closes, tidy whitespace."""
    html = _BLOCK_CLOSE_RE.sub(_block_break, html)
    html = sub_outside_pre(r'\s*<hr\b(?P<attrs>[^>]*?)\s*/?>\s*', r'\n<hr\g<attrs> />\n\n', html)
    return tidy_whitespace(html)


_INLINE_OPEN = r'<(?:' + INLINE_TAGS + r'|img)\b[^>]*>'
_INLINE_CLOSE = r'</(?:' + INLINE_TAGS + r')\s*>'
_INLINE_BREAK = (
    r'(?P<left>[^\s<>]|' + _INLINE_CLOSE + '|' + _INLINE_OPEN + r')'
    r'[ \t]*\n[ \t]*'
    r'(?=[^\s<>]|' + _INLINE_OPEN + '|' + _INLINE_CLOSE + ')'
)


def collapse_inline_breaks(html: str, ctx: PassContext = None) -> str:
    """Join single line breaks that split a run of inline text; blank lines stay."""
    return sub_outside_pre(_INLINE_BREAK, r'\g<left> ', html)


_EMPTY_CONTAINER_RE = re.compile(r'<(p|div)\b[^>]*>\s*</\1\s*>\s*', re.I)


def remove_empty_containers(html: str, ctx: PassContext = None) -> str:
    """Delete whitespace-only <p>/<div> elements, innermost first."""
    cleaned = sub_until_stable(_EMPTY_CONTAINER_RE, '', html)
    if cleaned != html:
        # removal can leave breaks the spacing passes would have handled
        cleaned = collapse_inline_breaks(normalize_block_spacing(cleaned))
    return cleaned.strip()
