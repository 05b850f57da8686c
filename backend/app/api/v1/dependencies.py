"""Service providers injected into the v1 endpoints"""
from fastapi import Depends

from app.config.config_loader import get_keyword_matcher
from app.modules.storage import ImageStorageManager, get_image_storage
from app.services.ai_chat_service import AIChatService
from app.services.layout_service import LayoutService
from app.services.template_matcher import KeywordMatcher
from app.services.template_service import TemplateService
from app.utils.claude_client import ClaudeClient, get_claude_client


def get_template_service(matcher: KeywordMatcher = Depends(get_keyword_matcher)) -> TemplateService:
    return TemplateService(matcher)


def get_layout_service(storage: ImageStorageManager = Depends(get_image_storage)) -> LayoutService:
    return LayoutService(storage)


def get_ai_chat_service(client: ClaudeClient = Depends(get_claude_client)) -> AIChatService:
    return AIChatService(client)
