"""
Post-processing applied to every model response before it reaches the browser:
safety filter, article links, legal referral, then Markdown rendering.
"""
from typing import Optional
import logging

from pydantic import BaseModel

from injurybot import markdown
from injurybot.classifier import TopicStore
from injurybot.config import BANNED_RESPONSE_MESSAGE
from injurybot.linker import DEFAULT_LINKER, ArticleLinker
from injurybot.referral import ReferralInjector
from injurybot.safety import is_banned

logger = logging.getLogger(__name__)


class PipelineResult(BaseModel):
    html: str
    banned: bool = False


class ResponsePipeline:
    def __init__(self, store: TopicStore, linker: Optional[ArticleLinker] = None):
        self.store = store
        self.linker = linker or DEFAULT_LINKER
        self.referral = ReferralInjector(store)

    def process(self, text: str) -> PipelineResult:
        """Run a raw model response through every stage.

        A response that trips the safety filter is replaced with a fixed
        redirect message; links and referral are skipped for it.
        """
        if is_banned(text):
            logger.warning("Model response contained a banned topic; replacing it")
            return PipelineResult(html=markdown.render(BANNED_RESPONSE_MESSAGE), banned=True)

        linked = self.linker.annotate(text)
        referred = self.referral.maybe_append_referral(linked)
        return PipelineResult(html=markdown.render(referred))
