"""Snippet transclusion: locate, load and splice reusable fragments into a topic"""

from __future__ import annotations

import logging
import re

from docportal.core.models import DirectiveKind, TransclusionDirective
from docportal.core.parse import extract_body
from docportal.core.passes import (
    PassContext,
    get_attr,
    resolve_cross_references,
    resolve_image_paths,
    strip_classes,
    strip_executable,
    strip_vendor_attributes,
)
from docportal.core.paths import SCHEME_RE, resolve
from docportal.core.store import ContentStore


logger = logging.getLogger(__name__)

PLACEHOLDER_ICON = '\U0001F4C4'

DIRECTIVE_RES: dict[DirectiveKind, re.Pattern] = {
    kind: re.compile(
        rf'<MadCap:snippet{name}\b([^>]*?)\s*(?:/>|>.*?</MadCap:snippet{name}\s*>)',
        re.I | re.S,
    )
    for kind, name in ((DirectiveKind.block, 'Block'), (DirectiveKind.text, 'Text'))
}
_SINGLE_PARAGRAPH_RE = re.compile(r'^<p\b[^>]*>((?:(?!<p\b).)*)</p\s*>$', re.I | re.S)

def drop_nested_directives(fragment: str, ctx: PassContext) -> str:
    """Remove transclusion directives inside a snippet; only one level is resolved."""
    for pattern in DIRECTIVE_RES.values():
        for m in pattern.finditer(fragment):
            logger.info("Nested snippet not resolved: %s (in %s)", get_attr(m.group(1), 'src'), ctx.anchor_path)
        fragment = pattern.sub('', fragment)
    return fragment


# Reduced cleanup for fragments: nested transclusion is not resolved here.
FRAGMENT_PASSES = (
    strip_executable,
    drop_nested_directives,
    resolve_cross_references,
    strip_vendor_attributes,
    strip_classes,
    resolve_image_paths,
)


def clean_fragment(fragment: str, snippet_path: str) -> str:
    """Apply the reduced cleanup; images resolve against the snippet's own path."""
    ctx = PassContext(anchor_path=snippet_path)
    for fn in FRAGMENT_PASSES:
        fragment = fn(fragment, ctx)
    return fragment.strip()


def load_snippet(anchor_path: str, snippet_ref: str, store: ContentStore | None) -> str | None:
    """Cleaned body fragment of the snippet snippet_ref points at, or None if unavailable."""
    site_path = resolve(anchor_path, snippet_ref)
    if store is None or SCHEME_RE.match(site_path):
        logger.warning("Snippet not loadable: %s (from %s)", snippet_ref, anchor_path)
        return None
    raw = store.read_text(site_path)
    if raw is None:
        logger.warning("Snippet not found: %s (from %s)", site_path, anchor_path)
        return None
    return clean_fragment(extract_body(raw), site_path)


def _unwrap_paragraph(fragment: str) -> str:
    m = _SINGLE_PARAGRAPH_RE.match(fragment)
    return m.group(1).strip() if m else fragment


def substitute(directive: TransclusionDirective, store: ContentStore | None) -> str:
    """Markup that replaces a directive: the fragment, or a visible placeholder."""
    fragment = load_snippet(directive.anchor_path, directive.raw_src, store)
    if directive.kind is DirectiveKind.block:
        if fragment is None:
            return f'<div class="snippet-placeholder">{PLACEHOLDER_ICON} Snippet: {directive.raw_src}</div>'
        return f'<div class="snippet-content">{fragment}</div>'
    if fragment is None:
        return f'<span class="snippet-text">{PLACEHOLDER_ICON} {directive.raw_src}</span>'
    return _unwrap_paragraph(fragment)


def resolve_transclusions(html: str, ctx: PassContext) -> str:
    """Replace block directives, then inline-text directives, with snippet content."""
    for kind in (DirectiveKind.block, DirectiveKind.text):
        def _directive(m: re.Match, kind=kind) -> str:
            src = get_attr(m.group(1), 'src')
            if not src:
                if kind is DirectiveKind.text:
                    return f'<span class="snippet-text">{PLACEHOLDER_ICON} Snippet</span>'
                return m.group(0)
            return substitute(TransclusionDirective(kind=kind, raw_src=src, anchor_path=ctx.anchor_path), ctx.store)
        html = DIRECTIVE_RES[kind].sub(_directive, html)
    return html
