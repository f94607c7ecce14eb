"""
Runtime configuration for the injury information chatbot.

Settings are read from environment variables at call time rather than at import,
so values loaded from `.env.local` after the process starts are still picked up.
"""
from typing import Dict, List, Optional
import os

DEFAULT_OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def get_openai_config() -> Dict:
    """Return the chat provider settings as a dict."""
    return {
        "api_key": os.environ.get("OPENAI_API_KEY"),
        "model": os.environ.get("OPENAI_MODEL", "gpt-4o-mini"),
        "temperature": _float_env("OPENAI_TEMPERATURE", 0.7),
        "max_tokens": _int_env("OPENAI_MAX_TOKENS", 500),
        "api_url": os.environ.get("OPENAI_API_URL", DEFAULT_OPENAI_URL),
    }


def get_google_config() -> Dict:
    return {
        "api_key": os.environ.get("GOOGLE_API_KEY"),
        "spreadsheet_id": os.environ.get("GOOGLE_SPREADSHEET_ID"),
    }


def get_hubspot_config() -> Dict:
    return {
        "access_token": os.environ.get("HUBSPOT_ACCESS_TOKEN"),
        "portal_id": os.environ.get("HUBSPOT_PORTAL_ID"),
    }


def get_cache_ttl() -> int:
    return _int_env("DATA_CACHE_TTL", 300)


def get_request_timeout() -> int:
    return _int_env("REQUEST_TIMEOUT", 20)


def get_cors_origins() -> List[str]:
    raw = os.environ.get("CORS_ALLOWED_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def is_openai_configured() -> bool:
    return bool(get_openai_config()["api_key"])


def is_google_configured() -> bool:
    google = get_google_config()
    return bool(google["api_key"] and google["spreadsheet_id"])


def is_hubspot_configured() -> bool:
    hubspot = get_hubspot_config()
    return bool(hubspot["access_token"] and hubspot["portal_id"])


def _float_env(name: str, default: float) -> float:
    # Unparseable or zero values fall back to the default
    try:
        return float(os.environ.get(name, "")) or default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, "")) or default
    except ValueError:
        return default


REQUIRED_VARIABLES = [
    ("OPENAI_API_KEY", lambda: get_openai_config()["api_key"]),
    ("GOOGLE_API_KEY", lambda: get_google_config()["api_key"]),
    ("GOOGLE_SPREADSHEET_ID", lambda: get_google_config()["spreadsheet_id"]),
    ("HUBSPOT_ACCESS_TOKEN", lambda: get_hubspot_config()["access_token"]),
    ("HUBSPOT_PORTAL_ID", lambda: get_hubspot_config()["portal_id"]),
]


def validate_configuration() -> Dict:
    """Return `{"is_valid": bool, "errors": [...]}` listing each missing variable."""
    errors = [f"{name} is missing" for name, read in REQUIRED_VARIABLES if not read()]
    return {"is_valid": not errors, "errors": errors}


def get_configuration_status() -> Dict:
    """Summarise which integrations are configured.

    The result still contains raw identifiers (spreadsheet id, portal id);
    callers exposing it over HTTP must mask them.
    """
    google = get_google_config()
    hubspot = get_hubspot_config()
    return {
        "openai": {
            "configured": is_openai_configured(),
            "model": get_openai_config()["model"],
        },
        "google": {
            "configured": is_google_configured(),
            "spreadsheet_id": google["spreadsheet_id"],
        },
        "hubspot": {
            "configured": is_hubspot_configured(),
            "portal_id": hubspot["portal_id"],
        },
        "validation": validate_configuration(),
    }


# ---------------------- System messages ----------------------
SYSTEM_MESSAGES = {
    "general": (
        "You are an AI assistant specializing in injury and legal information. "
        "You have access to comprehensive databases containing:\n\n"
        "- Legal case information and settlements\n"
        "- Law firm directories with specialties\n"
        "- Medical condition details and symptoms\n"
        "- Injury types and their legal implications\n"
        "- Compensation and settlement data\n"
        "- Legal procedures and rights information\n\n"
        "Always be empathetic and informative, but recommend consulting with qualified "
        "medical professionals or attorneys for specific situations. Keep your responses "
        "concise (1-2 paragraphs or a short list).\n\n"
        "If someone asks about topics outside of legal/medical injury information, politely "
        "redirect them to relevant injury-related topics you can help with.\n\n"
        "IMPORTANT: When relevant to the user's query, reference helpful articles from our "
        "site by mentioning specific topics naturally in your response."
    ),
    "legal_referral": (
        "You are an AI assistant specializing in injury and legal information with access to "
        "comprehensive legal and medical databases. Please provide helpful, accurate information "
        "about injury cases, legal rights, medical conditions, settlements, and related topics.\n\n"
        "Be empathetic and informative, but always recommend consulting with qualified medical "
        "professionals or attorneys for specific situations. Keep your response concise "
        "(1-2 paragraphs or a short list).\n\n"
        "IMPORTANT: If the user asks about legal options, filing claims, consulting attorneys, or "
        "seeking legal advice, mention that they can start their claim at legalinjuryadvocates.com."
    ),
}


def article_context_message(article_title: str, article_content: str) -> str:
    """System message that grounds the assistant in a single article."""
    return (
        "You are an AI assistant specializing in injury and legal information. "
        f"The user is asking about: {article_title}.\n\n"
        f"Article Context:\n{article_content}\n\n"
        "Please provide helpful, accurate information based on this specific article. "
        "Be empathetic and informative, but always recommend consulting with qualified "
        "medical professionals or attorneys for specific situations."
    )


# ---------------------- Error messages ----------------------
ERROR_MESSAGES = {
    "api_key_invalid": "Invalid API key. Please check your OpenAI API key.",
    "rate_limit_exceeded": "Rate limit exceeded. Please try again later.",
    "service_unavailable": "OpenAI service error. Please try again later.",
    "generic": "An error occurred while processing your request.",
}

BANNED_RESPONSE_MESSAGE = (
    "I'm sorry, I can only help with injury and legal information. "
    "Feel free to ask about legal rights, compensation, or conditions like mesothelioma."
)


def get_server_error_message(status_code: Optional[int]) -> str:
    """Map a provider status code to a user-facing error message."""
    if status_code == 401:
        return ERROR_MESSAGES["api_key_invalid"]
    if status_code == 429:
        return ERROR_MESSAGES["rate_limit_exceeded"]
    if status_code == 500:
        return ERROR_MESSAGES["service_unavailable"]
    return ERROR_MESSAGES["generic"]
