"""Slugs for topic URLs"""

import re


def href_to_slug(href: str) -> str:
    """'/en/Content/Getting Started.htm' -> 'en/content/getting-started' (directories kept)."""
    path = re.sub(r'\.html?$', '', href.lstrip('/'), flags=re.I)
    slug = re.sub(r'[^a-z0-9/]', '-', path.lower())
    slug = re.sub(r'-+', '-', slug)
    return '/'.join(part.strip('-') for part in slug.split('/'))
