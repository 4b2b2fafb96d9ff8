"""Topic loading: read a topic file and package its normalized title and body"""

import asyncio
import logging

from docportal.core.models import ParsedTopic, SourceDocument
from docportal.core.normalize import normalize
from docportal.core.parse import extract_body, extract_title
from docportal.core.paths import normalize_site_path, with_language
from docportal.core.store import ContentStore


logger = logging.getLogger(__name__)


def parse_topic(source: SourceDocument, store: ContentStore | None = None) -> ParsedTopic:
    """Extract title and body from a loaded document and normalize the body."""
    body = normalize(extract_body(source.raw_markup), source.storage_path, store)
    return ParsedTopic(
        title=extract_title(source.raw_markup),
        body_html=body,
        source_path=source.storage_path,
    )


def load_topic(reference: str, store: ContentStore, language: str | None = None) -> ParsedTopic | None:
    """Load and normalize the topic at a site path; None when it does not exist."""
    site_path = with_language(reference, language) if language else normalize_site_path(reference)
    raw = store.read_text(site_path)
    if raw is None:
        logger.warning("Topic not found: %s", site_path)
        return None
    return parse_topic(SourceDocument(storage_path=site_path, raw_markup=raw), store)


async def load_topic_async(reference: str, store: ContentStore, language: str | None = None) -> ParsedTopic | None:
    """load_topic on a worker thread, so topic and snippet reads never block the loop."""
    return await asyncio.to_thread(load_topic, reference, store, language)
