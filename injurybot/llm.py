"""
LLM-client wrapper functions.
This module provides a small adapter to call the OpenAI chat completions endpoint.

Behavior:
- If OPENAI_API_KEY is set, call the provider over REST.
- If credentials are missing, return a mocked response so frontend testing can continue.

Do NOT hardcode API keys in this code. The module reads keys from environment variables.
"""
from typing import Dict, List, Optional
import logging
import requests

from injurybot.config import get_openai_config, get_request_timeout

logger = logging.getLogger(__name__)

OPTIONAL_PARAMETERS = ("top_p", "frequency_penalty", "presence_penalty")


class LLMError(Exception):
    """Raised when the provider call fails; carries the upstream HTTP status if any."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def create_chat_request(messages: List[Dict], options: Optional[Dict] = None) -> Dict:
    """Build the request body, keeping only parameters the provider accepts."""
    options = options or {}
    config = get_openai_config()
    body = {
        "model": options.get("model") or config["model"],
        "messages": messages,
        "temperature": options.get("temperature") or config["temperature"],
        "max_tokens": options.get("max_tokens") or config["max_tokens"],
    }
    for name in OPTIONAL_PARAMETERS:
        if options.get(name) is not None:
            body[name] = options[name]
    return body


def build_messages(message: str, system_message: Optional[str] = None) -> List[Dict]:
    messages = []
    if system_message:
        messages.append({"role": "system", "content": system_message})
    messages.append({"role": "user", "content": message})
    return messages


def call_llm(messages: List[Dict], options: Optional[Dict] = None) -> Dict:
    """Call the provider and return a dictionary with `answer`, `usage` and `source`.

    Returns a mocked reply if no key is configured. Raises LLMError on HTTP or
    transport failures.
    """
    config = get_openai_config()
    if not config["api_key"]:
        logger.warning("OPENAI_API_KEY not configured at call time; returning mock response")
        return {"answer": "LLM not configured (mock reply).", "usage": None, "source": "mock"}

    body = create_chat_request(messages, options)
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {config['api_key']}",
    }
    logger.debug("Calling chat completions url=%s model=%s", config["api_url"], body["model"])
    try:
        r = requests.post(config["api_url"], json=body, headers=headers, timeout=get_request_timeout())
    except requests.exceptions.RequestException as e:
        logger.exception("Chat completion request failed before a response arrived")
        raise LLMError(str(e)) from e

    try:
        r.raise_for_status()
    except requests.exceptions.HTTPError as e:
        logger.error("LLM response status=%s body=%s", r.status_code, r.text[:500])
        raise LLMError(str(e), status_code=r.status_code) from e

    try:
        data = r.json()
    except ValueError as e:
        logger.error("Chat completion reply is not JSON: %s", r.text[:500])
        raise LLMError("Malformed response from chat provider", status_code=502) from e
    try:
        answer = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        logger.error("Unexpected chat completion payload: %s", str(data)[:500])
        raise LLMError("Malformed response from chat provider", status_code=502) from e

    logger.info("LLM response received: %s...", (answer or "")[:100])
    return {"answer": answer or "", "usage": data.get("usage"), "source": f"llm:{body['model']}"}
