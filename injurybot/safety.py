"""
Output guard for model responses.

Matches are plain substrings with no word boundaries, so "tv" also blocks
"tvs" and "stock" blocks "stockings". Over-blocking is accepted here.
"""

BANNED_TOPICS = (
    "epstein", "sex trafficking", "politics", "celebrity", "conspiracy", "terrorism",
    "violence", "murder", "suicide", "drugs", "gambling", "weapons", "extremism",
    "porn", "adult", "crypto", "bitcoin", "stock", "finance", "entertainment",
    "music", "movie", "tv", "sports", "dating", "relationship", "religion",
    "spiritual", "astrology", "horoscope", "alien", "ufo", "paranormal", "lottery",
    "casino", "scam", "fraud", "hacking", "malware", "phishing", "dark web",
    "black market", "escort",
)


def is_banned(text: str) -> bool:
    """Return True if any banned topic appears anywhere in the text."""
    if not text:
        return False
    lower = text.lower()
    return any(word in lower for word in BANNED_TOPICS)
