from __future__ import annotations

import pytest

from services.article_store import ArticleStore
from services.database import Database


@pytest.fixture
def store(tmp_path) -> ArticleStore:
    return ArticleStore(Database(str(tmp_path / "articles.db")))
