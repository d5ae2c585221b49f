"""Vocabulary whitelist loading and lookup."""
import json
import logging
from pathlib import Path
from typing import Iterable, NamedTuple, Optional

import yaml

from nederlearn.config import settings
from nederlearn.errors import CatalogLoadError, NotFoundError
from nederlearn.models import Section, VocabItem

logger = logging.getLogger(__name__)


class SectionDisplay(NamedTuple):
    icon: str
    title_key: Optional[str]


SECTION_DISPLAY = {
    "fruits": SectionDisplay("circle", "section.fruits"),
    "vegetables": SectionDisplay("leaf", "section.vegetables"),
    "animals": SectionDisplay("heart", "section.animals"),
    "colors": SectionDisplay("droplet", "section.colors"),
    "numbers": SectionDisplay("hash", "section.numbers"),
    "food_drinks": SectionDisplay("coffee", "section.food"),
    "places": SectionDisplay("map-pin", "section.places"),
    "daily_actions": SectionDisplay("activity", "section.actions"),
    "family": SectionDisplay("users", "section.family"),
    "jobs": SectionDisplay("briefcase", "section.jobs"),
    "transportation": SectionDisplay("truck", "section.transport"),
}
DEFAULT_DISPLAY = SectionDisplay("book", None)

# Legacy whitelist files name the words by language.
_WORD_KEYS = {
    "source": ("word_source", "word_en"),
    "target": ("word_target", "word_nl"),
}


def get_section_display(section_id: str) -> SectionDisplay:
    return SECTION_DISPLAY.get(section_id, DEFAULT_DISPLAY)


def _pick(raw: dict, names: tuple[str, ...], where: str) -> str:
    for name in names:
        value = raw.get(name)
        if isinstance(value, str) and value.strip():
            return value
    raise CatalogLoadError(f"{where}: missing {names[0]}")


def _parse_item(raw, where: str) -> VocabItem:
    if not isinstance(raw, dict) or not raw.get("id"):
        raise CatalogLoadError(f"{where}: item needs an id")
    where = f"{where}/{raw['id']}"
    return VocabItem(
        id=str(raw["id"]),
        source_word=_pick(raw, _WORD_KEYS["source"], where),
        target_word=_pick(raw, _WORD_KEYS["target"], where),
        image_prompt=str(raw.get("image_prompt", "")),
    )


def _parse_section(raw) -> Section:
    if not isinstance(raw, dict) or not raw.get("id"):
        raise CatalogLoadError("section needs an id")
    section_id = str(raw["id"])
    items = raw.get("items")
    if not isinstance(items, list):
        raise CatalogLoadError(f"{section_id}: items must be a list")
    max_questions = raw.get("maxQuestionsPerSession", raw.get("max_questions_per_session"))
    if max_questions is not None and (not isinstance(max_questions, int) or max_questions < 1):
        raise CatalogLoadError(f"{section_id}: maxQuestionsPerSession must be a positive integer")
    return Section(
        id=section_id,
        title=str(raw.get("title") or section_id.replace("_", " ").title()),
        items=tuple(_parse_item(item, section_id) for item in items),
        difficulty=str(raw.get("difficulty", "beginner")),
        max_questions_per_session=max_questions,
    )


def parse_document(data) -> list[Section]:
    """Turn a decoded whitelist document into sections, in document order."""
    if not isinstance(data, dict) or not isinstance(data.get("sections"), list):
        raise CatalogLoadError("whitelist must be a mapping with a 'sections' list")
    sections = [_parse_section(raw) for raw in data["sections"]]
    seen_sections, seen_items = set(), set()
    for section in sections:
        if section.id in seen_sections:
            raise CatalogLoadError(f"duplicate section id: {section.id}")
        seen_sections.add(section.id)
        for item in section.items:
            if item.id in seen_items:
                raise CatalogLoadError(f"duplicate item id: {item.id}")
            seen_items.add(item.id)
    return sections


def read_document(file_path: str):
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogLoadError(f"cannot read {file_path}: {e}") from e
    suffix = path.suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CatalogLoadError(f"cannot parse {file_path}: {e}") from e


class VocabularyCatalog:
    """Immutable, ordered set of sections. Order defines the unlock chain."""

    def __init__(self, sections: Iterable[Section]):
        self._sections = tuple(sections)
        self._by_id = {s.id: s for s in self._sections}
        self._items = {item.id: item for s in self._sections for item in s.items}
        self._item_section = {item.id: s.id for s in self._sections for item in s.items}

    @classmethod
    def from_document(cls, data) -> "VocabularyCatalog":
        return cls(parse_document(data))

    @classmethod
    def from_file(cls, file_path: str | None = None) -> "VocabularyCatalog":
        file_path = file_path or settings.VOCAB_PATH
        catalog = cls.from_document(read_document(file_path))
        logger.info(
            f"Loaded {len(catalog)} sections ({len(catalog.all_items())} items) from {file_path}"
        )
        return catalog

    def __len__(self) -> int:
        return len(self._sections)

    def list_sections(self) -> tuple[Section, ...]:
        return self._sections

    def get_section(self, section_id: str) -> Section | None:
        return self._by_id.get(section_id)

    def require_section(self, section_id: str) -> Section:
        section = self.get_section(section_id)
        if section is None:
            raise NotFoundError(f"Unknown section: {section_id}")
        return section

    def section_index(self, section_id: str) -> int:
        section = self.require_section(section_id)
        return self._sections.index(section)

    def get_item(self, item_id: str) -> VocabItem | None:
        return self._items.get(item_id)

    def require_item(self, item_id: str) -> VocabItem:
        item = self.get_item(item_id)
        if item is None:
            raise NotFoundError(f"Unknown item: {item_id}")
        return item

    def has_item(self, item_id: str) -> bool:
        return item_id in self._items

    def section_of(self, item_id: str) -> str | None:
        return self._item_section.get(item_id)

    def get_image_prompt(self, item_id: str) -> str | None:
        item = self.get_item(item_id)
        return item.image_prompt if item else None

    def all_items(self) -> list[VocabItem]:
        return [item for s in self._sections for item in s.items]

    def section_stats(self) -> list[dict]:
        return [
            {"id": s.id, "title": s.title, "item_count": len(s.items)}
            for s in self._sections
        ]
