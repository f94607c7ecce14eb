"""
Legal referral call-to-action.

A response gets the referral footer only when it is about an active case and
also reads like the user wants legal help.
"""
from typing import Optional

from injurybot.classifier import TopicMatch, TopicStore

LEGAL_REFERRAL_KEYWORDS = (
    "consult", "speak to", "talk to", "meet with", "attorney", "lawyer",
    "file a claim", "legal advice", "legal options", "seek legal",
    "recommend", "contact a lawyer", "contact an attorney", "how to file",
    "where to file", "get compensation", "payout", "settlement",
)

REFERRAL_URL = "https://legalinjuryadvocates.com"


def referral_message(description: str) -> str:
    return (
        f"<br><br><strong>➡️ Legal Injury Advocates is currently handling {description}. "
        f'You can start your claim at <a href="{REFERRAL_URL}" target="_blank">'
        "legalinjuryadvocates.com</a>.</strong>"
    )


def has_legal_intent(text: str) -> bool:
    lower = text.lower()
    return any(keyword in lower for keyword in LEGAL_REFERRAL_KEYWORDS)


class ReferralInjector:
    def __init__(self, store: TopicStore):
        self.store = store

    def should_refer(self, text: str, match: Optional[TopicMatch] = None) -> bool:
        if not text:
            return False
        match = match or self.store.classify(text)
        return match.is_active and has_legal_intent(text)

    def maybe_append_referral(self, text: str) -> str:
        """Append the referral footer when `text` qualifies, else return it unchanged."""
        if not text:
            return text
        match = self.store.classify(text)
        if self.should_refer(text, match):
            return text + referral_message(match.description)
        return text
