"""Batch rendering: discover topics under a content root and export each one"""

import logging
from pathlib import Path
from typing import Iterable

from docportal.core.export import write_topic
from docportal.core.parse import discover_topics
from docportal.core.store import FileStore
from docportal.core.topic import load_topic


logger = logging.getLogger(__name__)


def run_render(
    content_root: Path,
    path: str,
    output_dir: Path,
    skip_dirs: Iterable[str] = (),
    ) -> tuple[list[tuple[str, Path]], list[str]]:
    """Render every topic under content_root/path into output_dir.

    Returns (rendered, failed): rendered holds (site_path, html_path) pairs,
    failed the site paths that could not be loaded. A failed topic does not
    stop the batch.
    """
    store = FileStore(content_root)
    target = store.locate(path)
    if not target.exists():
        raise FileNotFoundError(f"No such file or directory: {target}")

    rendered, failed = [], []
    for file_path in discover_topics(target, skip_dirs):
        site_path = store.site_path(file_path)
        topic = load_topic(site_path, store)
        if topic is None:
            failed.append(site_path)
            continue
        html_path, _ = write_topic(topic, output_dir)
        rendered.append((site_path, html_path))
        logger.info("Rendered %s -> %s", site_path, html_path)
    return rendered, failed
