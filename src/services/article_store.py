"""
ArticleStore - persisted history of processed articles.
Answers "have we handled this before?" by exact URL or by normalized title
on the same publish day.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

import aiosqlite

from core.entities import DedupResult, MatchedBy, ProcessedArticle
from processing.normalizer import calendar_day, date_only, normalize_title, published_day
from services.database import Database

logger = logging.getLogger(__name__)

_COLUMNS = "url, title, normalized_title, published_at, processed_at, published_date"


class DuplicateKeyError(Exception):
    """Raised by insert() when the URL is already recorded."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Article already recorded: {url}")


@dataclass(frozen=True)
class SaveResult:
    success: bool
    created: bool
    message: str


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _to_record(row) -> ProcessedArticle:
    return ProcessedArticle(
        url=row[0],
        title=row[1],
        normalized_title=row[2],
        published_at=row[3],
        processed_at=row[4],
        published_date=row[5],
    )


class ArticleStore:
    """
    Tracks processed articles in SQLite.

    The URL column is unique; (normalized_title, published_date) is only an
    indexed lookup bucket and may hold several rows. published_date is the
    UTC calendar day derived from published_at at insert time, NULL when the
    source timestamp has no usable date.
    """

    def __init__(self, database: Database):
        self.db = database
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the database tables."""
        if not self._initialized:
            await self.db.init_tables()
            self._initialized = True

    async def find_by_url(self, url: str) -> Optional[ProcessedArticle]:
        await self.initialize()
        row = await self.db.fetchone(
            f"SELECT {_COLUMNS} FROM processed_articles WHERE url = ? LIMIT 1",
            (url,),
        )
        return _to_record(row) if row else None

    async def find_by_title_and_date(
        self,
        normalized_title: str,
        published_date: str,
    ) -> Optional[ProcessedArticle]:
        """
        Match records with the same normalized title published on the same
        calendar day (YYYY-MM-DD).

        When several match, the earliest processed_at (then lowest id) wins.
        An unusable published_date yields no match.
        """
        day = calendar_day(published_date)
        if day is None:
            return None

        await self.initialize()
        row = await self.db.fetchone(
            f"""SELECT {_COLUMNS} FROM processed_articles
                WHERE normalized_title = ? AND published_date = ?
                ORDER BY processed_at ASC, id ASC
                LIMIT 1""",
            (normalized_title, day),
        )
        return _to_record(row) if row else None

    async def check_exists(
        self,
        url: str,
        title: Optional[str] = None,
        published_at: Optional[str] = None,
    ) -> DedupResult:
        """
        Check if an article was already processed: exact URL first, then
        normalized title on the same calendar day when both are supplied.
        """
        record = await self.find_by_url(url)
        if record:
            return DedupResult(
                exists=True,
                matched_by=MatchedBy.URL,
                existing_url=record.url,
                existing_title=record.title,
                processed_at=record.processed_at,
            )

        if title and published_at:
            record = await self.find_by_title_and_date(
                normalize_title(title),
                date_only(published_at),
            )
            if record:
                return DedupResult(
                    exists=True,
                    matched_by=MatchedBy.TITLE_AND_DATE,
                    existing_url=record.url,
                    existing_title=record.title,
                    processed_at=record.processed_at,
                )

        return DedupResult(exists=False)

    async def insert(self, url: str, title: str, published_at: str) -> ProcessedArticle:
        """
        Insert a new record.

        Raises:
            DuplicateKeyError: if the URL is already recorded
        """
        await self.initialize()
        record = ProcessedArticle(
            url=url,
            title=title,
            normalized_title=normalize_title(title),
            published_at=published_at,
            processed_at=_utc_now(),
            published_date=published_day(published_at),
        )
        try:
            await self.db.execute(
                f"INSERT INTO processed_articles ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
                (
                    record.url,
                    record.title,
                    record.normalized_title,
                    record.published_at,
                    record.processed_at,
                    record.published_date,
                ),
            )
        except aiosqlite.IntegrityError as e:
            raise DuplicateKeyError(url) from e
        return record

    async def save(self, url: str, title: str, published_at: str) -> SaveResult:
        """
        Record an article as processed. Saving a URL twice is a no-op
        reported as success.
        """
        try:
            await self.insert(url, title, published_at)
        except DuplicateKeyError:
            logger.info(f"Article already exists in database: {url}")
            return SaveResult(success=True, created=False, message="Article already exists in database")

        logger.debug(f"Saved article: {title} ({url})")
        return SaveResult(success=True, created=True, message="Article saved successfully")

    async def get_all_processed(self) -> List[ProcessedArticle]:
        """All records, most recently processed first."""
        await self.initialize()
        rows = await self.db.fetchall(
            f"SELECT {_COLUMNS} FROM processed_articles ORDER BY processed_at DESC, id DESC"
        )
        return [_to_record(row) for row in rows]

    async def clear_all(self) -> int:
        """Remove every record. Returns the number of rows deleted."""
        await self.initialize()
        async with self.db.connect() as conn:
            cursor = await conn.execute("DELETE FROM processed_articles")
            await conn.commit()
            count = cursor.rowcount
        logger.info(f"Cleared {count} processed article records")
        return count
