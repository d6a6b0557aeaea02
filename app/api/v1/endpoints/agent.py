from fastapi import APIRouter
from typing import Dict, Any

from app.core.config import settings
from app.core.prompts import SYSTEM_PROMPT
from app.agent.tools import CONFIRMATION_REQUIRED_TOOLS, tool_names

router = APIRouter()


@router.get("/config", response_model=Dict[str, Any])
async def agent_config():
    """Configuration the chat layer needs to start a conversation."""
    return {
        "assistant": settings.ASSISTANT_NAME,
        "model": settings.ANTHROPIC_MODEL,
        "max_tokens": settings.ANTHROPIC_MAX_TOKENS,
        "llm_configured": bool(settings.ANTHROPIC_API_KEY),
        "system_prompt": SYSTEM_PROMPT,
        "tools": tool_names(),
        "confirmation_required": CONFIRMATION_REQUIRED_TOOLS,
    }
