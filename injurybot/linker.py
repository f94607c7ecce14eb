"""
Article linking for chatbot responses.

Known topics mentioned in a response are turned into links to the matching
article page. The text is handled together with the character ranges that are
already inside an anchor element; every rewrite skips those ranges, which is
what keeps a phrase from being wrapped twice.

Stages, in order:
1. introduction patterns ("Learn more about X", ...) wrap the captured topic
   with the URL of the first mapping key it overlaps with
2. stray fragments of broken anchor-open tags are removed
3. literal phrases are wrapped wherever they occur as whole words
"""
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple
import logging
import re

logger = logging.getLogger(__name__)

ARTICLE_MAPPINGS: Dict[str, str] = {
    "mesothelioma symptoms and diagnosis": "/mesothelioma.html",
    "mesothelioma symptoms": "/mesothelioma.html",
    "mesothelioma diagnosis": "/mesothelioma.html",
    "mesothelioma signs": "/mesothelioma.html",
    "mesothelioma warning signs": "/mesothelioma.html",
    "mesothelioma early signs": "/mesothelioma.html",
    "mesothelioma": "/mesothelioma.html",
    "asbestos exposure": "/mesothelioma.html",
    "asbestos exposure risks": "/mesothelioma.html",
    "asbestos related diseases": "/mesothelioma.html",
    "asbestos": "/mesothelioma.html",
    "legal options": "/legal-options.html",
    "legal advice": "/legal-options.html",
    "injury diagnosis": "/legal-options.html",
    "compensation options": "/compensation.html",
    "settlement options": "/compensation.html",
    "compensation": "/compensation.html",
    "settlement": "/compensation.html",
    "caregiver support": "/caregivers.html",
    "caring for someone": "/caregivers.html",
    "medical costs": "/cost-of-care.html",
    "cost of treatment": "/cost-of-care.html",
    "treatment costs": "/cost-of-care.html",
    "financial support": "/cost-of-care.html",
    "ovarian cancer": "/ovarian-cancer.html",
    "lymphoma": "/lymphoma.html",
    "mass tort": "/mass-tort.html",
    "class action": "/class-action.html",
}

INTRO_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"For more (?:detailed )?information (?:about|on) ([^,.\n]+)",
        r"You can (?:also )?(?:read|learn) (?:more )?about ([^,.\n]+)",
        r"(?:Learn|Read) more about ([^,.\n]+)",
        r"More information (?:about|on) ([^,.\n]+)",
    )
)

# Longer phrases must precede any shorter phrase they contain.
LITERAL_PHRASES = (
    "mesothelioma symptoms and diagnosis",
    "mesothelioma symptoms",
    "mesothelioma diagnosis",
    "mesothelioma",
    "asbestos exposure risks",
    "asbestos exposure",
    "legal options",
    "compensation options",
    "medical costs",
    "ovarian cancer",
    "lymphoma",
    "mass tort",
    "class action",
)

ANCHOR_RE = re.compile(r"<a\b[^>]*>.*?</a\s*>", re.IGNORECASE | re.DOTALL)
MALFORMED_ANCHOR_RE = re.compile(r'([^"]\w+\.html)"?\s*target="?blank"?>', re.IGNORECASE)

Span = Tuple[int, int]
# (start, end, replacement, replacement_is_link)
Edit = Tuple[int, int, str, bool]


def make_anchor(url: str, label: str) -> str:
    return f'<a href="{url}" target="_blank">{label}</a>'


class LinkedText(NamedTuple):
    """Text plus the sorted ranges of it already covered by anchor elements."""

    text: str
    links: Tuple[Span, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "LinkedText":
        return cls(text, tuple(m.span() for m in ANCHOR_RE.finditer(text)))

    def is_free(self, start: int, end: int) -> bool:
        return all(end <= s or start >= e for s, e in self.links)

    def apply(self, edits: Iterable[Edit]) -> "LinkedText":
        """Return a new LinkedText with non-overlapping edits applied.

        Edits must only touch free ranges; existing links are shifted by the
        length change of every edit that precedes them.
        """
        edits = sorted(edits)
        if not edits:
            return self

        pieces: List[str] = []
        new_links: List[Span] = []
        cursor = 0
        delta = 0
        for start, end, replacement, is_link in edits:
            pieces.append(self.text[cursor:start])
            pieces.append(replacement)
            if is_link:
                new_links.append((start + delta, start + delta + len(replacement)))
            delta += len(replacement) - (end - start)
            cursor = end
        pieces.append(self.text[cursor:])

        def shift(pos: int) -> int:
            return pos + sum(len(r) - (e - s) for s, e, r, _ in edits if e <= pos)

        moved = [(shift(s), shift(s) + (e - s)) for s, e in self.links]
        return LinkedText("".join(pieces), tuple(sorted(moved + new_links)))


def check_phrase_priority(phrases: Sequence[str]) -> None:
    """Raise ValueError if a phrase is listed before a longer phrase containing it."""
    for i, shorter in enumerate(phrases):
        for longer in phrases[i + 1:]:
            if shorter.lower() in longer.lower():
                raise ValueError(f"'{longer}' must be listed before '{shorter}'")


class ArticleLinker:
    def __init__(
        self,
        mappings: Optional[Dict[str, str]] = None,
        patterns: Sequence[re.Pattern] = INTRO_PATTERNS,
        phrases: Sequence[str] = LITERAL_PHRASES,
    ):
        self.mappings = {k.lower(): v for k, v in (mappings or ARTICLE_MAPPINGS).items()}
        self.patterns = tuple(patterns)
        check_phrase_priority(phrases)
        self.phrases = tuple(p.lower() for p in phrases)
        self._phrase_res = tuple(
            (re.compile(rf"\b{re.escape(p)}\b", re.IGNORECASE), self.mappings.get(p))
            for p in self.phrases
        )

    def find_article(self, topic: str) -> Optional[str]:
        """Return the URL of the first mapping key overlapping `topic` either way."""
        topic = topic.strip().lower()
        if not topic:
            return None
        for key, url in self.mappings.items():
            if key in topic or topic in key:
                return url
        return None

    def annotate(self, text: str) -> str:
        if not text:
            return text
        doc = LinkedText.parse(text)
        for pattern in self.patterns:
            doc = doc.apply(self._introduced_topics(doc, pattern))
        # Removing one fragment can join its neighbours into a new one
        edits = self._malformed_fragments(doc)
        while edits:
            doc = doc.apply(edits)
            edits = self._malformed_fragments(doc)
        for regex, url in self._phrase_res:
            if url:
                doc = doc.apply(self._literal_phrases(doc, regex, url))
        return doc.text

    def _introduced_topics(self, doc: LinkedText, pattern: re.Pattern) -> List[Edit]:
        edits = []
        for match in pattern.finditer(doc.text):
            start, end = match.span(1)
            raw = match.group(1)
            start += len(raw) - len(raw.lstrip())
            end -= len(raw) - len(raw.rstrip())
            if start >= end or not doc.is_free(start, end):
                continue
            label = doc.text[start:end]
            url = self.find_article(label)
            if url:
                edits.append((start, end, make_anchor(url, label), True))
        return edits

    @staticmethod
    def _malformed_fragments(doc: LinkedText) -> List[Edit]:
        edits = [
            (m.start(), m.end(), "", False)
            for m in MALFORMED_ANCHOR_RE.finditer(doc.text)
            if doc.is_free(*m.span())
        ]
        if edits:
            logger.debug("Removing %d malformed anchor fragments", len(edits))
        return edits

    @staticmethod
    def _literal_phrases(doc: LinkedText, regex: re.Pattern, url: str) -> List[Edit]:
        return [
            (m.start(), m.end(), make_anchor(url, m.group(0)), True)
            for m in regex.finditer(doc.text)
            if doc.is_free(*m.span())
        ]


DEFAULT_LINKER = ArticleLinker()


def annotate(text: str) -> str:
    """Link known article topics in `text` using the default tables."""
    return DEFAULT_LINKER.annotate(text)
