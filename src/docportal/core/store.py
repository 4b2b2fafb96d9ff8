"""Content storage backends: read a site-rooted file as text, or report not-found"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from docportal.core.paths import normalize_site_path


logger = logging.getLogger(__name__)


class ContentStore(ABC):
    @abstractmethod
    def read_text(self, site_path: str) -> str | None:
        """Return file text for site_path, or None when it does not exist."""
        raise NotImplementedError

    async def read_text_async(self, site_path: str) -> str | None:
        return await asyncio.to_thread(self.read_text, site_path)


@dataclass
class MemoryStore(ContentStore):
    files: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.files = {normalize_site_path(k): v for k, v in self.files.items()}

    def add(self, site_path: str, text: str) -> None:
        self.files[normalize_site_path(site_path)] = text

    def read_text(self, site_path: str) -> str | None:
        return self.files.get(normalize_site_path(site_path))


class FileStore(ContentStore):
    """Files under a content root; '/en/Content/x.htm' maps to root/en/Content/x.htm."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def locate(self, site_path: str) -> Path:
        return self.root / normalize_site_path(site_path).lstrip('/')

    def site_path(self, file_path: Path) -> str:
        """Inverse of locate for a file under the root."""
        return normalize_site_path(file_path.relative_to(self.root).as_posix())

    def read_text(self, site_path: str) -> str | None:
        path = self.locate(site_path)
        if not path.is_file():
            logger.warning("File not found: %s", path)
            return None
        try:
            return path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", path, e)
            return None

    def languages(self) -> list[str]:
        """Top-level locale directories that carry a Content folder."""
        if not self.root.is_dir():
            return []
        return sorted(
            p.name for p in self.root.iterdir()
            if p.is_dir() and (p / 'Content').is_dir()
        )
