import random

import pytest

from nederlearn.catalog import VocabularyCatalog
from nederlearn.db import SQLitePersistence, init_db
from nederlearn.models import Section, VocabItem
from nederlearn.progress import ProgressStore
from nederlearn.questions import QuestionGenerator


def build_section(section_id: str, count: int, words: list[str] | None = None) -> Section:
    words = words or [f"{section_id}woord{i}" for i in range(1, count + 1)]
    return Section(
        id=section_id,
        title=section_id.title(),
        items=tuple(
            VocabItem(id=f"{section_id}_{i:02d}", source_word=f"{section_id} word {i}", target_word=word)
            for i, word in enumerate(words, 1)
        ),
    )


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_nederlearn.db")
    return db_path


@pytest.fixture
def make_section():
    return build_section


@pytest.fixture
def persistence(tmp_db):
    init_db(tmp_db)
    return SQLitePersistence(tmp_db)


@pytest.fixture
def store(persistence):
    return ProgressStore(persistence)


@pytest.fixture
def profile(store):
    return store.init_user("Tester")


@pytest.fixture
def catalog():
    """fruits (32 items) -> animals (10) -> colors (4) -> tiny (3)."""
    return VocabularyCatalog([
        build_section("fruits", 32),
        build_section("animals", 10),
        build_section("colors", 4),
        build_section("tiny", 3),
    ])


@pytest.fixture
def generator(catalog):
    return QuestionGenerator(catalog, random.Random(42))
