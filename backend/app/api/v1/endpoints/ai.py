"""
AI Assistant API

POST /ai/chat proxies one conversation turn to Claude.
"""
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from typing import List, Optional

from app.api.v1.dependencies import get_ai_chat_service
from app.core.rate_limiter import limiter, AI_CHAT_LIMIT
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.services.ai_chat_service import AIChatService, AttachmentInfo, parse_history

router = APIRouter()


@router.post("/chat")
@limiter.limit(AI_CHAT_LIMIT)
async def chat(
    request: Request,
    message: str = Form(""),
    history: Optional[str] = Form(None),
    files: List[UploadFile] = File(default=[]),
    current_user: User = Depends(get_current_user),
    service: AIChatService = Depends(get_ai_chat_service),
):
    """
    Multipart form:
    - message: the user's text
    - history: JSON list of {role, content} from earlier turns
    - files: optional attachments, described to the model by name, type and size
    """
    turns = parse_history(history)

    attachments = []
    for upload in files:
        data = await upload.read()
        attachments.append(
            AttachmentInfo(
                name=upload.filename or "unnamed",
                content_type=upload.content_type or "",
                size=len(data),
            )
        )

    reply = await service.chat(message, history=turns, attachments=attachments)
    return {"message": reply}
