"""
Keyword-based classifier for active legal-case topics.

A `TopicStore` owns the table of case records and decides whether a piece of
text mentions one of the cases currently being taken on. The table is loaded
lazily through an injected fetcher and degrades to a single built-in record
whenever the fetcher fails, so classification always has something to match.
"""
from datetime import datetime
from typing import Callable, Iterable, List, Literal, Optional
import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class TopicRecord(BaseModel):
    case_type: str
    name: str
    description: str
    keywords: List[str]
    active: bool = True
    last_updated: Optional[datetime] = None
    source: Literal["remote", "fallback"] = "remote"


class TopicMatch(BaseModel):
    is_active: bool
    case_type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[List[str]] = None
    last_updated: Optional[datetime] = None


FALLBACK_TOPIC = TopicRecord(
    case_type="mesothelioma",
    name="Mesothelioma",
    description="Mesothelioma and asbestos exposure cases",
    keywords=["mesothelioma", "asbestos", "asbestos exposure"],
    active=True,
    source="fallback",
)

TopicFetcher = Callable[[], Iterable[TopicRecord]]


def _fetch_nothing() -> Iterable[TopicRecord]:
    raise RuntimeError("no topic source configured")


class TopicStore:
    """In-memory cache of case records with a single writer (`refresh`)."""

    def __init__(self, fetcher: Optional[TopicFetcher] = None):
        self._fetcher = fetcher or _fetch_nothing
        self._records: Optional[List[TopicRecord]] = None

    @property
    def loaded(self) -> bool:
        return self._records is not None

    @property
    def source(self) -> str:
        records = self.records()
        if records and all(r.source == "fallback" for r in records):
            return "fallback"
        return "remote"

    def refresh(self) -> List[TopicRecord]:
        """Re-fetch the record set, replacing the cache wholesale.

        Never raises: a failing or empty fetch leaves the store holding only
        the fallback record.
        """
        try:
            records = list(self._fetcher())
        except Exception:
            logger.exception("Failed to fetch active cases; using fallback record")
            records = []
        if not records:
            logger.warning("No active cases available from source; using fallback record")
            records = [FALLBACK_TOPIC]
        self._records = records
        logger.info("Loaded %d case records (%d active)", len(records), len(self.active_records()))
        return records

    def records(self) -> List[TopicRecord]:
        if self._records is None:
            self.refresh()
        return list(self._records)

    def active_records(self) -> List[TopicRecord]:
        return [r for r in (self._records or []) if r.active]

    def classify(self, text: str) -> TopicMatch:
        """Return the first active record with a keyword contained in `text`."""
        if self._records is None:
            self.refresh()
        if not text:
            return TopicMatch(is_active=False)
        lower = text.lower()
        for record in self.active_records():
            if any(kw.lower() in lower for kw in record.keywords if kw):
                return TopicMatch(
                    is_active=True,
                    case_type=record.case_type,
                    name=record.name,
                    description=record.description,
                    keywords=list(record.keywords),
                    last_updated=record.last_updated,
                )
        return TopicMatch(is_active=False)
