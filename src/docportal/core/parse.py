"""Topic discovery plus title and body extraction from exported HTML"""

import html as _html
import re
from pathlib import Path
from typing import Iterable


TITLE_RE = re.compile(r'<title\b[^>]*>(.*?)</title\s*>', re.I | re.S)
H1_RE = re.compile(r'<h1\b[^>]*>(.*?)</h1\s*>', re.I | re.S)
BODY_RE = re.compile(r'<body\b[^>]*>(.*?)</body\s*>', re.I | re.S)
TAG_RE = re.compile(r'<[^>]*>')

HTML_EXTENSIONS = {'.htm', '.html'}
DEFAULT_TITLE = 'Untitled'


def strip_tags(markup: str) -> str:
    """Plain text of a markup fragment, entities decoded and whitespace collapsed."""
    text = _html.unescape(TAG_RE.sub('', markup))
    return ' '.join(text.split())


def extract_title(markup: str) -> str:
    """First non-empty <title>, else first <h1>, else 'Untitled'."""
    for pattern in (TITLE_RE, H1_RE):
        m = pattern.search(markup)
        if m:
            title = strip_tags(m.group(1))
            if title:
                return title
    return DEFAULT_TITLE


def extract_body(markup: str) -> str:
    """Inner <body> content, or the whole markup when the export has no <body>."""
    m = BODY_RE.search(markup)
    return m.group(1) if m else markup


def extract_section(site_path: str) -> str:
    """The path segment right after 'Content', used to group topics; else 'General'."""
    parts = site_path.split('/')
    if 'Content' in parts:
        i = parts.index('Content')
        if i + 1 < len(parts) - 1:
            return parts[i + 1]
    return 'General'


def discover_topics(path: Path, skip_dirs: Iterable[str] = ()) -> list[Path]:
    """Return sorted .htm/.html files under path, or [path] if a single file.

    Directories named in skip_dirs are pruned at any depth (snippet and
    project folders hold fragments, not topics).
    """
    if path.is_file():
        return [path] if path.suffix.lower() in HTML_EXTENSIONS else []
    skip = set(skip_dirs)
    return sorted(
        p for p in path.rglob('*')
        if p.is_file()
        and p.suffix.lower() in HTML_EXTENSIONS
        and not skip.intersection(p.relative_to(path).parts[:-1])
    )
