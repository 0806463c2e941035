"""
M&O Legal Desk - Legal Content Types

Data classes for the content records returned by the generative backend
and for study lab output. Field names are snake_case; the wire format
(what the backend produces and the frontend consumes) is camelCase.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, runtime_checkable


class BatchKind(str, Enum):
    """Named content feeds a caller can request."""
    NEWS = "news"
    ARTICLES = "articles"
    JUDGMENTS = "judgments"
    STATUTES = "statutes"
    TAMIL_NADU = "tamil_nadu"
    SUPREME_COURT = "supreme_court"


@runtime_checkable
class ContentRecord(Protocol):
    """Capability interface the result sanitizer filters on."""

    def text_parts(self) -> list[str]:
        """Title-like and narrative text of the record."""
        ...

    def urls(self) -> list[str]:
        """Every populated URL field of the record."""
        ...

    def to_dict(self) -> dict:
        """Wire (camelCase) representation."""
        ...


def _text(data: dict, key: str, required: bool = False) -> str:
    """Read a string field; missing optional fields become ""."""
    if key not in data or data[key] is None:
        if required:
            raise KeyError(key)
        return ""
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _optional(data: dict, key: str) -> Optional[str]:
    value = _text(data, key)
    return value or None


def _present(*values: Optional[str]) -> list[str]:
    return [v for v in values if v]


def _prune(data: dict) -> dict:
    """Drop unset optional fields from a wire dict."""
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class LegalNews:
    """A daily legal news item."""
    title: str
    summary: str
    url: str
    source: str = ""
    date: str = ""
    free_alternative_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "LegalNews":
        return cls(
            title=_text(data, "title", required=True),
            summary=_text(data, "summary"),
            url=_text(data, "url"),
            source=_text(data, "source"),
            date=_text(data, "date"),
            free_alternative_url=_optional(data, "freeAlternativeUrl"),
        )

    def text_parts(self) -> list[str]:
        return _present(self.title, self.summary)

    def urls(self) -> list[str]:
        return _present(self.url, self.free_alternative_url)

    def to_dict(self) -> dict:
        return _prune({
            "title": self.title,
            "summary": self.summary,
            "url": self.url,
            "source": self.source,
            "date": self.date,
            "freeAlternativeUrl": self.free_alternative_url,
        })


@dataclass(frozen=True)
class ScholarlyArticle:
    """
    A research article or case summary.

    Also used for the jurisdiction feeds (Tamil Nadu, Supreme Court),
    which share the article shape.
    """
    title: str
    summary: str
    url: str
    author: str = ""
    source: str = ""
    act: str = ""
    provision: Optional[str] = None
    download_url: Optional[str] = None
    free_alternative_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ScholarlyArticle":
        return cls(
            title=_text(data, "title", required=True),
            summary=_text(data, "summary"),
            url=_text(data, "url"),
            author=_text(data, "author"),
            source=_text(data, "source"),
            act=_text(data, "act"),
            provision=_optional(data, "provision"),
            download_url=_optional(data, "downloadUrl"),
            free_alternative_url=_optional(data, "freeAlternativeUrl"),
        )

    def text_parts(self) -> list[str]:
        return _present(self.title, self.summary)

    def urls(self) -> list[str]:
        return _present(self.url, self.download_url, self.free_alternative_url)

    def to_dict(self) -> dict:
        return _prune({
            "title": self.title,
            "author": self.author,
            "act": self.act,
            "provision": self.provision,
            "summary": self.summary,
            "url": self.url,
            "downloadUrl": self.download_url,
            "freeAlternativeUrl": self.free_alternative_url,
            "source": self.source,
        })


@dataclass(frozen=True)
class LandmarkJudgment:
    """A landmark judgment under a given act."""
    case_name: str
    summary: str
    link: str
    citation: str = ""
    act: str = ""
    bench: str = ""
    impact: str = ""
    free_download_link: Optional[str] = None
    related_acts: tuple = ()

    @classmethod
    def from_dict(cls, data: dict) -> "LandmarkJudgment":
        related = data.get("relatedActs") or []
        if not isinstance(related, list) or not all(isinstance(a, str) for a in related):
            raise TypeError("relatedActs must be a list of strings")
        return cls(
            case_name=_text(data, "caseName", required=True),
            summary=_text(data, "summary"),
            link=_text(data, "link"),
            citation=_text(data, "citation"),
            act=_text(data, "act"),
            bench=_text(data, "bench"),
            impact=_text(data, "impact"),
            free_download_link=_optional(data, "freeDownloadLink"),
            related_acts=tuple(related),
        )

    def text_parts(self) -> list[str]:
        return _present(self.case_name, self.summary)

    def urls(self) -> list[str]:
        return _present(self.link, self.free_download_link)

    def to_dict(self) -> dict:
        return _prune({
            "caseName": self.case_name,
            "citation": self.citation,
            "act": self.act,
            "bench": self.bench,
            "summary": self.summary,
            "impact": self.impact,
            "link": self.link,
            "freeDownloadLink": self.free_download_link,
            "relatedActs": list(self.related_acts),
        })


@dataclass(frozen=True)
class BareAct:
    """An official statute text."""
    name: str
    description: str
    source_url: str
    year: Optional[int] = None
    sections: str = ""
    secondary_source_url: Optional[str] = None
    pdf_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "BareAct":
        year = data.get("year")
        if year is not None:
            if isinstance(year, bool) or not isinstance(year, (int, float)):
                raise TypeError("year must be a number")
            # json.loads turns 1e999 into inf
            if not math.isfinite(year):
                raise ValueError("year must be finite")
            year = int(year)
        sections = data.get("sections")
        return cls(
            name=_text(data, "name", required=True),
            description=_text(data, "description"),
            source_url=_text(data, "sourceUrl"),
            year=year,
            # Models sometimes answer with a section count instead of text
            sections=str(sections) if sections is not None else "",
            secondary_source_url=_optional(data, "secondarySourceUrl"),
            pdf_url=_optional(data, "pdfUrl"),
        )

    def text_parts(self) -> list[str]:
        return _present(self.name, self.description)

    def urls(self) -> list[str]:
        return _present(self.source_url, self.secondary_source_url, self.pdf_url)

    def to_dict(self) -> dict:
        return _prune({
            "name": self.name,
            "year": self.year,
            "description": self.description,
            "sections": self.sections,
            "sourceUrl": self.source_url,
            "secondarySourceUrl": self.secondary_source_url,
            "pdfUrl": self.pdf_url,
        })


# =============================================================================
# STUDY LAB / VIEWER TYPES
# =============================================================================


@dataclass(frozen=True)
class Flashcard:
    question: str
    answer: str

    @classmethod
    def from_dict(cls, data: dict) -> "Flashcard":
        return cls(
            question=_text(data, "question", required=True),
            answer=_text(data, "answer", required=True),
        )

    def to_dict(self) -> dict:
        return {"question": self.question, "answer": self.answer}


@dataclass(frozen=True)
class MindMapNode:
    """A node of the concept map; children nest arbitrarily deep."""
    id: str
    label: str
    children: tuple = ()

    @classmethod
    def from_dict(cls, data: dict) -> "MindMapNode":
        children = data.get("children") or []
        if not isinstance(children, list):
            raise TypeError("children must be a list")
        return cls(
            id=_text(data, "id", required=True),
            label=_text(data, "label", required=True),
            children=tuple(cls.from_dict(child) for child in children),
        )

    def to_dict(self) -> dict:
        node = {"id": self.id, "label": self.label}
        if self.children:
            node["children"] = [child.to_dict() for child in self.children]
        return node


def _string_list(data: dict, key: str) -> tuple:
    values = data.get(key)
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise TypeError(f"{key} must be a list of strings")
    return tuple(values)


@dataclass(frozen=True)
class BriefingNote:
    """Advocate's briefing: key provisions, core arguments, conclusion."""
    provisions: tuple
    arguments: tuple
    conclusion: str

    @classmethod
    def from_dict(cls, data: dict) -> "BriefingNote":
        return cls(
            provisions=_string_list(data, "provisions"),
            arguments=_string_list(data, "arguments"),
            conclusion=_text(data, "conclusion", required=True),
        )

    def to_dict(self) -> dict:
        return {
            "provisions": list(self.provisions),
            "arguments": list(self.arguments),
            "conclusion": self.conclusion,
        }


@dataclass(frozen=True)
class StudyMaterials:
    flashcards: tuple
    mind_map: MindMapNode
    briefing: BriefingNote

    @classmethod
    def from_dict(cls, data: dict) -> "StudyMaterials":
        cards = data["flashcards"]
        if not isinstance(cards, list):
            raise TypeError("flashcards must be a list")
        return cls(
            flashcards=tuple(Flashcard.from_dict(card) for card in cards),
            mind_map=MindMapNode.from_dict(data["mindMap"]),
            briefing=BriefingNote.from_dict(data["briefing"]),
        )

    def to_dict(self) -> dict:
        return {
            "flashcards": [card.to_dict() for card in self.flashcards],
            "mindMap": self.mind_map.to_dict(),
            "briefing": self.briefing.to_dict(),
        }


class MentionType(str, Enum):
    ACT = "act"
    JUDGMENT = "judgment"


@dataclass(frozen=True)
class Mention:
    """A bare act or judgment named inside extracted text."""
    name: str
    type: MentionType

    @classmethod
    def from_dict(cls, data: dict) -> "Mention":
        return cls(
            name=_text(data, "name", required=True),
            type=MentionType(_text(data, "type", required=True)),
        )

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type.value}


@dataclass(frozen=True)
class ExtractedContent:
    """Readable text pulled from a source page, plus cross-references."""
    text: str
    mentions: tuple = ()

    @classmethod
    def from_dict(cls, data: dict) -> "ExtractedContent":
        mentions = []
        for item in data.get("mentions") or []:
            # A bad cross-reference should not cost the whole extraction
            try:
                mentions.append(Mention.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError):
                continue
        return cls(text=_text(data, "text", required=True), mentions=tuple(mentions))

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "mentions": [mention.to_dict() for mention in self.mentions],
        }
