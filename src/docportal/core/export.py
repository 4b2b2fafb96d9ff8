"""Export: write rendered topic bodies and sidecar JSON"""

import json
from pathlib import Path

from docportal.core.models import ParsedTopic
from docportal.core.parse import extract_section
from docportal.core.utils.hashing import sha256
from docportal.core.utils.slug import href_to_slug


def build_sidecar(topic: ParsedTopic) -> dict:
    """Metadata consumed next to the HTML: slug, title, source_path, section, hash."""
    return {
        "slug": href_to_slug(topic.source_path),
        "title": topic.title,
        "source_path": topic.source_path,
        "section": extract_section(topic.source_path),
        "hash": sha256(topic.body_html),
    }


def write_topic(topic: ParsedTopic, output_dir: Path) -> tuple[Path, Path]:
    """Write <stem>.html + <stem>.json for a topic.

    Output path mirrors the site path:
      output_dir / <site dir> / <stem>.{html|json}

    Returns (html_path, json_path).
    """
    src = Path(topic.source_path.lstrip('/'))
    dest_dir = output_dir / src.parent
    dest_dir.mkdir(parents=True, exist_ok=True)

    html_path = dest_dir / f"{src.stem}.html"
    json_path = dest_dir / f"{src.stem}.json"
    html_path.write_text(topic.body_html + "\n", encoding='utf-8')
    json_path.write_text(
        json.dumps(build_sidecar(topic), indent=2, ensure_ascii=False),
        encoding='utf-8',
    )
    return html_path, json_path
