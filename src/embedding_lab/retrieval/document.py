"""
Document model for the retrieval system.

Legal documents are static reference data: the curated keyword and entity
lists drive lexical matching, MMR document similarity and the lexical
relevance used by precision/recall. Nothing mutates them at query time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

LegalCategory = Literal["Income Tax", "GST", "Court Judgment", "Property Law"]

LEGAL_CATEGORIES: tuple[str, ...] = ("Income Tax", "GST", "Court Judgment", "Property Law")


@dataclass(frozen=True)
class LegalDocument:
    """
    A legal reference document.

    keywords/entities are stored as tuples so instances stay hashable
    and cannot be edited in place.
    """

    id: str
    title: str
    content: str
    category: str
    section: str | None = None
    keywords: tuple[str, ...] = field(default_factory=tuple)
    entities: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(self, "entities", tuple(self.entities))

    @property
    def embedding_text(self) -> str:
        """Text embedded for this document: title followed by body."""
        return f"{self.title} {self.content}"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "section": self.section,
            "keywords": list(self.keywords),
            "entities": list(self.entities),
        }


@dataclass
class SearchResult:
    """
    A scored document.

    score is a similarity for cosine/euclidean/hybrid and the re-ranked MMR
    score for mmr (except the first MMR pick, which keeps its base relevance).
    """

    document: LegalDocument
    score: float
    method: str
    explanation: str | None = None

    def to_dict(self) -> dict:
        data = {
            "documentId": self.document.id,
            "title": self.document.title,
            "content": self.document.content,
            "category": self.document.category,
            "section": self.document.section,
            "score": self.score,
            "method": self.method,
        }
        if self.explanation is not None:
            data["explanation"] = self.explanation
        return data
