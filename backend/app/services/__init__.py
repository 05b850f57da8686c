from app.services.template_service import TemplateService
from app.services.layout_service import LayoutService
from app.services.ai_chat_service import AIChatService

__all__ = [
    "TemplateService",
    "LayoutService",
    "AIChatService",
]
