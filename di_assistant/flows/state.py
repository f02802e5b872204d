"""State definition for the per-turn LangGraph pipeline."""

from __future__ import annotations

from typing import Dict, List, Optional, TypedDict

from di_assistant.domain.models import ChatMessage, ChatRequest


class PipelineState(TypedDict, total=False):
    """State shared across enrich / compose / complete nodes."""

    query: str
    history: List[ChatMessage]
    supplemental: str
    request: Optional[ChatRequest]
    reply: Optional[str]
    error: Optional[Exception]
    usage: Dict[str, int]
