"""
Data integration: articles, law firms, settlements and active legal cases.

Rows are read from Google Sheets through the values REST API and cached in
memory for DATA_CACHE_TTL seconds. When Sheets is not configured or a read
fails, endpoints are served from the built-in fallback tables below.
"""
from datetime import datetime
from typing import Dict, List, Optional
import logging
import time

import requests

from injurybot.classifier import TopicRecord, TopicStore
from injurybot.config import get_cache_ttl, get_google_config, get_request_timeout

logger = logging.getLogger(__name__)

SHEETS_URL = "https://sheets.googleapis.com/v4/spreadsheets/{spreadsheet_id}/values/{range}"

ARTICLES_RANGE = "Articles!A:Z"
LAW_FIRMS_RANGE = "Law Firms!A:Z"
SETTLEMENTS_RANGE = "Settlements!A:Z"
ACTIVE_CASES_RANGE = "LIA Active Cases!A:Z"

TRUTHY = {"true", "yes", "y", "1", "active"}

FALLBACK_ARTICLES = [
    {
        "slug": "mesothelioma",
        "title": "Mesothelioma Symptoms and Diagnosis",
        "category": "mesothelioma",
        "summary": "Early warning signs of mesothelioma and how doctors confirm a diagnosis.",
        "url": "/mesothelioma.html",
    },
    {
        "slug": "legal-options",
        "title": "Understanding Your Legal Options After an Injury",
        "category": "legal",
        "summary": "When to talk to an attorney and what a personal injury claim involves.",
        "url": "/legal-options.html",
    },
    {
        "slug": "compensation",
        "title": "Compensation and Settlement Options",
        "category": "compensation",
        "summary": "Trust funds, settlements and verdicts available to injured people and families.",
        "url": "/compensation.html",
    },
    {
        "slug": "caregivers",
        "title": "Caregiver Support",
        "category": "support",
        "summary": "Practical help for people caring for someone with a serious illness.",
        "url": "/caregivers.html",
    },
    {
        "slug": "cost-of-care",
        "title": "The Cost of Treatment",
        "category": "support",
        "summary": "Medical costs, insurance and financial support during treatment.",
        "url": "/cost-of-care.html",
    },
]

FALLBACK_LAW_FIRMS = [
    {
        "name": "Legal Injury Advocates",
        "specialty": "mesothelioma, asbestos, mass tort",
        "location": "Nationwide",
        "website": "https://legalinjuryadvocates.com",
    },
]

FALLBACK_SETTLEMENTS = [
    {
        "condition": "mesothelioma",
        "state": "Nationwide",
        "average_settlement": "$1,000,000 - $1,400,000",
        "notes": "Asbestos trust fund claims are typically paid in addition to lawsuit settlements.",
    },
]


def normalise_header(header: str) -> str:
    return "_".join(header.strip().lower().replace("-", " ").split())


def rows_to_dicts(values: List[List[str]]) -> List[Dict]:
    """Turn a Sheets values payload (header row first) into dicts keyed by header."""
    if not values:
        return []
    headers = [normalise_header(h) for h in values[0]]
    rows = []
    for row in values[1:]:
        if not any(cell.strip() for cell in row if isinstance(cell, str)):
            continue
        padded = list(row) + [""] * (len(headers) - len(row))
        rows.append(dict(zip(headers, padded)))
    return rows


def parse_topic_row(row: Dict) -> Optional[TopicRecord]:
    case_type = (row.get("case_type") or "").strip()
    if not case_type:
        return None
    keywords = [k.strip() for k in (row.get("keywords") or "").split(",") if k.strip()]
    last_updated = None
    if row.get("last_updated"):
        try:
            last_updated = datetime.fromisoformat(row["last_updated"].strip())
        except ValueError:
            logger.warning("Ignoring unparseable last_updated %r for %s", row["last_updated"], case_type)
    return TopicRecord(
        case_type=case_type,
        name=(row.get("name") or case_type).strip(),
        description=(row.get("description") or "").strip(),
        keywords=keywords or [case_type.lower()],
        active=(row.get("active") or "").strip().lower() in TRUTHY,
        last_updated=last_updated,
        source="remote",
    )


def _contains(value: Optional[str], needle: Optional[str]) -> bool:
    if not needle:
        return True
    return needle.lower() in (value or "").lower()


class DataService:
    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self._cache: Dict[str, tuple] = {}

    def clear_cache(self) -> None:
        self._cache.clear()

    def read_sheet(self, range_: str) -> List[Dict]:
        """Return the rows of a sheet range. Raises if Sheets is unavailable."""
        google = get_google_config()
        if not (google["api_key"] and google["spreadsheet_id"]):
            raise RuntimeError("Google Sheets is not configured")

        cached = self._cache.get(range_)
        if cached and time.monotonic() - cached[0] < get_cache_ttl():
            return cached[1]

        url = SHEETS_URL.format(
            spreadsheet_id=google["spreadsheet_id"],
            range=requests.utils.quote(range_, safe=""),
        )
        r = self.session.get(url, params={"key": google["api_key"]}, timeout=get_request_timeout())
        r.raise_for_status()
        rows = rows_to_dicts(r.json().get("values", []))
        self._cache[range_] = (time.monotonic(), rows)
        logger.info("Loaded %d rows from sheet range %s", len(rows), range_)
        return rows

    def _rows_or_fallback(self, range_: str, fallback: List[Dict]) -> List[Dict]:
        try:
            rows = self.read_sheet(range_)
        except Exception:
            logger.exception("Reading %s failed; serving fallback data", range_)
            return [dict(row) for row in fallback]
        return rows or [dict(row) for row in fallback]

    def get_all_articles(self) -> List[Dict]:
        return self._rows_or_fallback(ARTICLES_RANGE, FALLBACK_ARTICLES)

    def get_fallback_articles(self) -> List[Dict]:
        return [dict(a) for a in FALLBACK_ARTICLES]

    def find_article(self, slug: str) -> Optional[Dict]:
        for article in self.get_all_articles() + self.get_fallback_articles():
            if article.get("slug") == slug:
                return article
        return None

    def get_law_firms(self, specialty: Optional[str] = None, location: Optional[str] = None) -> List[Dict]:
        firms = self._rows_or_fallback(LAW_FIRMS_RANGE, FALLBACK_LAW_FIRMS)
        return [
            f for f in firms
            if _contains(f.get("specialty"), specialty)
            and (_contains(f.get("location"), location) or f.get("location") == "Nationwide")
        ]

    def get_settlement_data(self, condition: Optional[str] = None, state: Optional[str] = None) -> List[Dict]:
        settlements = self._rows_or_fallback(SETTLEMENTS_RANGE, FALLBACK_SETTLEMENTS)
        return [
            s for s in settlements
            if _contains(s.get("condition"), condition)
            and (_contains(s.get("state"), state) or s.get("state") == "Nationwide")
        ]

    def search_condition(self, condition: str) -> Dict:
        needle = condition.lower()
        articles = [
            a for a in self.get_all_articles()
            if any(needle in (a.get(field) or "").lower() for field in ("slug", "title", "category", "summary"))
        ]
        return {
            "condition": condition,
            "articles": articles,
            "law_firms": self.get_law_firms(specialty=condition),
            "settlements": self.get_settlement_data(condition=condition),
        }

    def fetch_active_topics(self) -> List[TopicRecord]:
        """Fetcher for TopicStore; every failure propagates to the store."""
        rows = self.read_sheet(ACTIVE_CASES_RANGE)
        records = [parse_topic_row(row) for row in rows]
        return [r for r in records if r is not None]

    def get_active_cases(self, store: TopicStore) -> Dict:
        records = store.records()
        active = [r for r in records if r.active]
        return {
            "active_cases": [r.model_dump(mode="json") for r in active],
            "all_cases": [r.model_dump(mode="json") for r in records],
            "total_active": len(active),
            "total_cases": len(records),
            "source": store.source,
        }
