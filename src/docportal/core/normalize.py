"""Ordered markup transform pipeline for topic bodies"""

import logging

from docportal.core.codeblocks import classify_code_blocks
from docportal.core.passes import (
    PassContext,
    PassFn,
    collapse_inline_breaks,
    normalize_block_spacing,
    remove_empty_containers,
    repair_legacy_tags,
    resolve_conditional_text,
    resolve_cross_references,
    resolve_image_paths,
    strip_classes,
    strip_executable,
    strip_vendor_attributes,
)
from docportal.core.paths import normalize_site_path
from docportal.core.snippets import resolve_transclusions
from docportal.core.store import ContentStore


logger = logging.getLogger(__name__)

# Order is load-bearing: cross-references must be rewritten before attribute
# stripping sees them, snippets spliced before vendor elements are deleted,
# and line-break collapsing must follow block spacing.
PIPELINE: list[tuple[str, PassFn]] = [
    ("strip-executable",  strip_executable),
    ("cross-references",  resolve_cross_references),
    ("transclusions",     resolve_transclusions),
    ("conditional-text",  resolve_conditional_text),
    ("vendor-attributes", strip_vendor_attributes),
    ("classes",           strip_classes),
    ("legacy-tags",       repair_legacy_tags),
    ("code-blocks",       classify_code_blocks),
    ("image-paths",       resolve_image_paths),
    ("block-spacing",     normalize_block_spacing),
    ("inline-breaks",     collapse_inline_breaks),
    ("empty-containers",  remove_empty_containers),
]


def normalize(
    raw_body: str,
    anchor_path: str,
    store: ContentStore | None = None,
    pipeline: list[tuple[str, PassFn]] = PIPELINE,
    ) -> str:
    """Run raw_body through every pass in order; anchor_path is the document's site path."""
    ctx = PassContext(anchor_path=normalize_site_path(anchor_path), store=store)
    html = raw_body
    for name, fn in pipeline:
        html = fn(html, ctx)
        logger.debug("pass %s: %d chars", name, len(html))
    return html
