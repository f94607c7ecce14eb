"""
FastAPI backend for the injury and legal information chatbot.

Features:
- Proxies chat messages to the OpenAI chat completions API and post-processes
  the answer (safety filter, article links, legal referral, Markdown to HTML).
- Serves read-only content from Google Sheets: articles, law firms, settlements.
- Exposes the active legal cases used to decide when a referral is shown.

Run the server:
    uvicorn injurybot.main:app --reload

Configuration is read from `.env.local` / `.env`; see injurybot/config.py.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from injurybot import config
from injurybot import llm as llm_mod
from injurybot.classifier import TopicStore
from injurybot.data_service import DataService
from injurybot.pipeline import ResponsePipeline

load_dotenv(".env.local")
load_dotenv()

# Logging for clarity
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    message: str
    system_message: Optional[str] = None
    # Used when no system_message is given; an article title takes precedence
    mode: Literal["general", "legal_referral"] = "general"
    article_title: Optional[str] = None
    article_content: Optional[str] = None
    options: Dict[str, Any] = {}

    def resolve_system_message(self) -> str:
        if self.system_message:
            return self.system_message
        if self.article_title:
            return config.article_context_message(self.article_title, self.article_content or "")
        return config.SYSTEM_MESSAGES[self.mode]


class CaseCheckRequest(BaseModel):
    query: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


app = FastAPI(title="Injury & Legal Information Chatbot")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.data_service = DataService()
app.state.topic_store = TopicStore(app.state.data_service.fetch_active_topics)
app.state.pipeline = ResponsePipeline(app.state.topic_store)


@app.on_event("startup")
async def startup_event():
    """Log which integrations are configured and what is missing."""
    status = config.get_configuration_status()
    logger.info("Configuration status:")
    logger.info("  OpenAI: %s", "configured" if status["openai"]["configured"] else "missing")
    logger.info("  Google Sheets: %s", "configured" if status["google"]["configured"] else "missing")
    logger.info("  HubSpot: %s", "configured" if status["hubspot"]["configured"] else "missing")
    for error in status["validation"]["errors"]:
        logger.warning("Configuration issue: %s", error)


@app.post("/api/chat")
def chat(req: ChatRequest, request: Request):
    """
    Send the user's message to the chat provider and return the processed answer.

    Example request body:
        { "message": "What are the early signs of mesothelioma?" }

    Optional: `system_message`, or `mode` ("general" | "legal_referral"), or
    `article_title` / `article_content` to ground the answer in one article.

    Returns `response` (raw model text), `html` (post-processed), `banned` and `usage`.
    """
    message = req.message.strip()
    if not message:
        raise HTTPException(status_code=400, detail="Message is required")

    logger.info("Received chat request: %s", message[:100])
    system_message = req.resolve_system_message()
    options = {k: v for k, v in req.options.items() if k != "system_message"}

    try:
        result = llm_mod.call_llm(llm_mod.build_messages(message, system_message), options)
    except llm_mod.LLMError as e:
        raise HTTPException(
            status_code=e.status_code or 500,
            detail=config.get_server_error_message(e.status_code),
        )

    processed = request.app.state.pipeline.process(result["answer"])
    return {
        "response": result["answer"],
        "html": processed.html,
        "banned": processed.banned,
        "usage": result.get("usage"),
    }


@app.get("/api/articles")
def list_articles(request: Request):
    try:
        articles = request.app.state.data_service.get_all_articles()
    except Exception:
        logger.exception("Error fetching articles")
        raise HTTPException(status_code=500, detail="Failed to fetch articles")
    logger.info("Returning %d articles", len(articles))
    return articles


@app.get("/api/articles/{slug}")
def get_article(slug: str, request: Request):
    try:
        article = request.app.state.data_service.find_article(slug)
    except Exception:
        logger.exception("Error fetching article %s", slug)
        raise HTTPException(status_code=500, detail="Failed to fetch article")
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@app.get("/api/law-firms")
def law_firms(request: Request, specialty: Optional[str] = None, location: Optional[str] = None):
    try:
        firms = request.app.state.data_service.get_law_firms(specialty, location)
    except Exception:
        logger.exception("Error fetching law firms")
        raise HTTPException(status_code=500, detail="Failed to fetch law firms")
    logger.info("Returning %d law firms (specialty=%s, location=%s)", len(firms), specialty, location)
    return firms


@app.get("/api/settlements")
def settlements(request: Request, condition: Optional[str] = None, state: Optional[str] = None):
    try:
        data = request.app.state.data_service.get_settlement_data(condition, state)
    except Exception:
        logger.exception("Error fetching settlement data")
        raise HTTPException(status_code=500, detail="Failed to fetch settlement data")
    logger.info("Returning %d settlement records for %s", len(data), condition)
    return data


@app.get("/api/search/{condition}")
def search_condition(condition: str, request: Request):
    try:
        return request.app.state.data_service.search_condition(condition)
    except Exception:
        logger.exception("Error searching condition %s", condition)
        raise HTTPException(status_code=500, detail="Failed to search condition")


@app.post("/api/cache/clear")
async def clear_cache(request: Request):
    request.app.state.data_service.clear_cache()
    logger.info("Cache cleared")
    return {"message": "Cache cleared successfully"}


@app.get("/api/test")
def test_provider():
    """Send a tiny prompt to the provider to check the API key works."""
    if not config.is_openai_configured():
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "OPENAI_API_KEY is missing", "details": "Check your API key in .env.local"},
        )
    try:
        result = llm_mod.call_llm(
            llm_mod.build_messages("Hello, this is a test."),
            {"max_tokens": 50},
        )
    except llm_mod.LLMError as e:
        logger.exception("Provider test failed")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e), "details": "Check your API key in .env.local"},
        )
    return {"success": True, "message": "OpenAI API connection successful", "response": result["answer"]}


@app.get("/api/config/status")
async def config_status():
    # Never expose keys; identifiers are masked too
    status = config.get_configuration_status()
    return {
        "openai": status["openai"],
        "google": {
            "configured": status["google"]["configured"],
            "spreadsheet_id": "***configured***" if status["google"]["spreadsheet_id"] else None,
        },
        "hubspot": {
            "configured": status["hubspot"]["configured"],
            "portal_id": "***configured***" if status["hubspot"]["portal_id"] else None,
        },
        "validation": status["validation"],
    }


def _active_cases_payload(request: Request) -> Dict:
    data = request.app.state.data_service.get_active_cases(request.app.state.topic_store)
    data["message"] = (
        "Using fallback data - Google Sheets not available"
        if data["source"] == "fallback"
        else "Data loaded from Google Sheets"
    )
    return data


@app.get("/api/lia/active-cases")
def active_cases(request: Request):
    return _active_cases_payload(request)


@app.post("/api/lia/refresh")
def refresh_active_cases(request: Request):
    logger.info("Refreshing active cases")
    request.app.state.data_service.clear_cache()
    request.app.state.topic_store.refresh()
    return _active_cases_payload(request)


@app.post("/api/lia/check-case")
def check_case(req: CaseCheckRequest, request: Request):
    query = req.query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Query is required")
    logger.info("Checking active case for query: %s", query[:100])
    match = request.app.state.topic_store.classify(query)
    return {"query": query, **match.model_dump(mode="json"), "timestamp": _now()}


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": _now(),
        "openai_configured": config.is_openai_configured(),
        "google_configured": config.is_google_configured(),
    }


if __name__ == "__main__":
    # Using uvicorn directly is recommended:
    # uvicorn injurybot.main:app --reload
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 3000)))
