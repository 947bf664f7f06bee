# models/corpus.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Direction(Enum):
    NEXT = 'next'
    PREV = 'prev'


class SearchMode(Enum):
    SUBSTRING = 'substring'
    EXACT = 'exact'


@dataclass(frozen=True)
class Book:
    key: int
    code: Optional[str]
    name: str
    ordinal: int

    def to_json(self):
        return {"id": self.key, "code": self.code, "name": self.name}


@dataclass(frozen=True)
class Verse:
    id: Optional[int]
    book: int
    chapter: int
    verse: int
    text: str
    plain: str

    def to_json(self):
        return {"id": self.id, "verse": self.verse, "text": self.plain}


@dataclass(frozen=True)
class Position:
    book: int
    chapter: int
    verse: Optional[int] = None

    def to_json(self):
        data = {"bookId": self.book, "chapter": self.chapter}
        if self.verse is not None:
            data["verse"] = self.verse
        return data


@dataclass(frozen=True)
class Hit:
    book: int
    chapter: int
    verse: int
    text: str

    def to_json(self):
        return {"book": self.book, "chapter": self.chapter, "verse": self.verse, "text": self.text}


@dataclass(frozen=True)
class Token:
    id: int
    verse_id: int
    position: int
    surface: str
    strong: Optional[str]

    def to_json(self):
        return {
            "id": self.id,
            "verse_id": self.verse_id,
            "position": self.position,
            "surface": self.surface,
            "strong": self.strong,
        }


@dataclass(frozen=True)
class LexiconEntry:
    strong: str
    language: Optional[str]
    lemma: Optional[str]
    transliteration: Optional[str]
    definition: Optional[str]

    def to_json(self):
        return {
            "strong": self.strong,
            "language": self.language,
            "lemma": self.lemma,
            "transliteration": self.transliteration,
            "definition": self.definition,
        }
