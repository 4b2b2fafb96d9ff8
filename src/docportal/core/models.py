"""Data models for topic loading and the normalization pipeline"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DirectiveKind(str, Enum):
    block = "block"
    text = "text"


@dataclass(frozen=True)
class SourceDocument:
    """Raw markup of a topic or snippet file as authored; never mutated."""
    storage_path: str          # site-rooted, e.g. /en/Content/A/B.htm
    raw_markup:   str


@dataclass(frozen=True)
class TransclusionDirective:
    """A snippet reference found while transforming a document."""
    kind:        DirectiveKind
    raw_src:     str           # as written; relative or absolute
    anchor_path: str           # path of the document holding the directive


@dataclass(frozen=True)
class ResolvedAssetReference:
    original_ref:  str
    absolute_path: str         # site-rooted, or the untouched external URL


class ParsedTopic(BaseModel):
    """Pipeline output: a title plus a self-contained body fragment."""
    model_config = ConfigDict(frozen=True)

    title:       str = Field(default="Untitled", min_length=1)
    body_html:   str = ""
    source_path: str

    def as_response(self) -> dict[str, str]:
        """Shape consumed by the web layer; content and body carry the same markup."""
        return {"title": self.title, "content": self.body_html, "body": self.body_html}
