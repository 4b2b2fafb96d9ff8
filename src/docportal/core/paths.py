"""Site-rooted path resolution for image and snippet references"""

import re

from docportal.core.models import ResolvedAssetReference


SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')


def is_absolute_reference(reference: str) -> bool:
    """True for site-rooted ('/...') or external ('http:', 'data:', ...) references."""
    return reference.startswith('/') or bool(SCHEME_RE.match(reference))


def _collapse(segments: list[str]) -> list[str]:
    """Apply '.' and '..' segments; '..' at the root is dropped rather than escaping it."""
    out: list[str] = []
    for seg in segments:
        if seg in ('', '.'):
            continue
        if seg == '..':
            if out:
                out.pop()
            continue
        out.append(seg)
    return out


def normalize_site_path(path: str) -> str:
    """Collapse a path into canonical site-rooted form with exactly one leading '/'."""
    path = path.replace('\\', '/')
    trailing = path.endswith('/') and path.strip('/') != ''
    collapsed = '/' + '/'.join(_collapse(path.split('/')))
    if trailing and collapsed != '/':
        collapsed += '/'
    return collapsed


def anchor_dir(anchor_path: str) -> str:
    """Directory part of an anchor path (the trailing filename segment removed)."""
    anchor_path = anchor_path.replace('\\', '/')
    head, _, _ = anchor_path.rpartition('/')
    return head


def resolve(anchor_path: str, reference: str) -> str:
    """Resolve reference against the directory of anchor_path.

    Absolute and external references are returned unchanged. Relative ones are
    joined onto the anchor's directory and collapsed; '..' never climbs above
    the site root.
    """
    if is_absolute_reference(reference):
        return reference
    return normalize_site_path(f"{anchor_dir(anchor_path)}/{reference.strip()}")


def resolve_reference(anchor_path: str, reference: str) -> ResolvedAssetReference:
    return ResolvedAssetReference(
        original_ref=reference,
        absolute_path=resolve(anchor_path, reference),
    )


def with_language(path: str, language: str) -> str:
    """Prefix a site path with a locale segment unless it already starts with it."""
    path = normalize_site_path(path)
    if not language or path == f"/{language}" or path.startswith(f"/{language}/"):
        return path
    return normalize_site_path(f"/{language}{path}")
