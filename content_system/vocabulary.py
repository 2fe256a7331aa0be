"""Vocabulary cards: markdown files with a YAML frontmatter header.

A card looks like::

    ---
    Italian: casa
    English:
      - house
      - home
    ---
    Free-form notes...

The word field may also be written as a list, in which case only its first
element is used.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple, Union

import yaml

from core_center.errors import FormatError, ParseError
from diagnostics.logging_setup import get_logger

from .directory import list_directory_contents

logger = get_logger(__name__)

FRONTMATTER_DELIMITER = "---"
DEFAULT_WORD_FIELD = "Italian"
DEFAULT_TRANSLATIONS_FIELD = "English"
CARD_SUFFIX = ".md"

PathLike = Union[str, Path]


@dataclass(frozen=True, slots=True)
class VocabularyHeader:
    word: str
    translations: Tuple[str, ...]

    def to_dict(self) -> Dict[str, object]:
        return {"word": self.word, "translations": list(self.translations)}


@dataclass(slots=True)
class VocabularyDeck:
    """Cards loaded from one folder plus the files that could not be read."""

    directory: str
    cards: List[VocabularyHeader] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "directory": self.directory,
            "cards": [
                {**card.to_dict(), "path": path}
                for card, path in zip(self.cards, self.sources)
            ],
            "failures": [{"path": path, "message": message} for path, message in self.failures],
        }


def split_frontmatter(text: str) -> Tuple[str, str]:
    parts = text.split(FRONTMATTER_DELIMITER, 2)
    if len(parts) < 3:
        raise FormatError(
            f"Invalid format: YAML frontmatter delimited by '{FRONTMATTER_DELIMITER}' not found"
        )
    return parts[1], parts[2]


def parse_vocabulary_header(
    header_text: str,
    word_field: str = DEFAULT_WORD_FIELD,
    translations_field: str = DEFAULT_TRANSLATIONS_FIELD,
) -> VocabularyHeader:
    try:
        document = yaml.safe_load(header_text)
    except yaml.YAMLError as exc:
        raise ParseError(f"Failed to parse YAML frontmatter: {exc}") from exc
    if not isinstance(document, dict):
        raise ParseError("Failed to parse YAML frontmatter: expected a mapping")
    if word_field not in document:
        raise ParseError(f"Failed to parse YAML frontmatter: missing field '{word_field}'")
    if translations_field not in document:
        raise ParseError(f"Failed to parse YAML frontmatter: missing field '{translations_field}'")
    return VocabularyHeader(
        word=_coerce_word(document[word_field], word_field),
        translations=_coerce_translations(document[translations_field], translations_field),
    )


def extract_vocabulary_fields(
    file_path: PathLike,
    word_field: str = DEFAULT_WORD_FIELD,
    translations_field: str = DEFAULT_TRANSLATIONS_FIELD,
) -> VocabularyHeader:
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(f"Failed to read file '{path}': not UTF-8 text") from exc
    header, _body = split_frontmatter(text)
    return parse_vocabulary_header(header, word_field, translations_field)


def load_vocabulary_deck(
    directory: PathLike,
    word_field: str = DEFAULT_WORD_FIELD,
    translations_field: str = DEFAULT_TRANSLATIONS_FIELD,
) -> VocabularyDeck:
    deck = VocabularyDeck(directory=str(directory))
    for entry in list_directory_contents(directory):
        if not entry.is_file or not entry.name.lower().endswith(CARD_SUFFIX):
            continue
        try:
            card = extract_vocabulary_fields(entry.full_path, word_field, translations_field)
        except (OSError, FormatError, ParseError) as exc:
            logger.warning("skipping vocabulary card %s: %s", entry.full_path, exc)
            deck.failures.append((entry.full_path, str(exc)))
            continue
        deck.cards.append(card)
        deck.sources.append(entry.full_path)
    logger.info(
        "loaded deck %s cards=%d failures=%d", deck.directory, len(deck.cards), len(deck.failures)
    )
    return deck


def _coerce_word(value: object, name: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        if value and isinstance(value[0], str):
            return value[0]
        raise ParseError(f"Expected a list of strings or single string in {name}")
    raise ParseError(f"Invalid type for {name} field")


def _coerce_translations(value: object, name: str) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ParseError(f"Expected a list of strings in {name}")
    return tuple(value)
