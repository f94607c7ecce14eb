import pytest

from injurybot.classifier import TopicRecord, TopicStore

ENV_VARS = (
    "OPENAI_API_KEY", "OPENAI_MODEL", "OPENAI_TEMPERATURE", "OPENAI_MAX_TOKENS", "OPENAI_API_URL",
    "GOOGLE_API_KEY", "GOOGLE_SPREADSHEET_ID", "HUBSPOT_ACCESS_TOKEN", "HUBSPOT_PORTAL_ID",
    "DATA_CACHE_TTL", "REQUEST_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fallback_store():
    return TopicStore()


@pytest.fixture
def roundup_record():
    return TopicRecord(
        case_type="roundup",
        name="Roundup",
        description="Roundup weed killer cases",
        keywords=["roundup", "glyphosate"],
    )


@pytest.fixture
def sheets_response():
    """Factory for a fake requests response carrying a Sheets values payload."""
    class FakeResponse:
        def __init__(self, values):
            self._values = values

        def raise_for_status(self):
            pass

        def json(self):
            return {"values": self._values}

    return FakeResponse
