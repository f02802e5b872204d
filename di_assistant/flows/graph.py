"""LangGraph construction for one conversational turn.

enrich (并发检索) -> compose (构建 ChatRequest) -> complete (调用模型)
"""

from __future__ import annotations

from typing import List, Optional

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from di_assistant.domain.exceptions import BusinessError
from di_assistant.domain.models import ChatMessage, ChatRequest
from di_assistant.flows.state import PipelineState
from di_assistant.infrastructure.logging.logger import logger
from di_assistant.lookups.synthesizer import ContextSynthesizer
from di_assistant.prompts import build_system_prompt
from di_assistant.providers.base import ProviderClient


def compose_request(
    query: str,
    history: List[ChatMessage],
    supplemental: str,
    provider_name: str,
    model_name: str,
    temperature: Optional[float] = None,
    agent_type: str = "di-assistant",
) -> ChatRequest:
    messages = [ChatMessage(role="system", content=build_system_prompt(supplemental, agent_type))]
    messages.extend(history)
    messages.append(ChatMessage(role="user", content=query))
    return ChatRequest(
        provider=provider_name,
        model=model_name,
        messages=messages,
        temperature=temperature,
    )


def build_turn_graph(
    synthesizer: ContextSynthesizer,
    provider: ProviderClient,
    *,
    model_name: str,
    temperature: Optional[float] = None,
    agent_type: str = "di-assistant",
) -> CompiledStateGraph:
    provider_name = getattr(provider, "name", "unknown")

    async def enrich_node(state: PipelineState) -> PipelineState:
        supplemental = await synthesizer.synthesize(state["query"])
        logger.info("enrich_node.end", extra={"extra": {"supplemental_chars": len(supplemental)}})
        return {"supplemental": supplemental}

    async def compose_node(state: PipelineState) -> PipelineState:
        req = compose_request(
            state["query"],
            state.get("history") or [],
            state.get("supplemental") or "",
            provider_name,
            model_name,
            temperature,
            agent_type,
        )
        return {"request": req}

    async def complete_node(state: PipelineState) -> PipelineState:
        req = state["request"]
        logger.info(
            "complete_node.start",
            extra={"extra": {"provider": provider_name, "model": model_name, "message_count": len(req.messages)}},
        )
        try:
            result = await provider.chat(req)
            reply = result.first_content()
        except BusinessError as e:
            return {"reply": None, "error": e}
        usage = {}
        if result.usage:
            usage = {
                "prompt_tokens": result.usage.prompt_tokens,
                "completion_tokens": result.usage.completion_tokens,
                "total_tokens": result.usage.total_tokens,
            }
        return {"reply": reply, "error": None, "usage": usage}

    graph = StateGraph(PipelineState)
    graph.add_node("enrich", enrich_node)
    graph.add_node("compose", compose_node)
    graph.add_node("complete", complete_node)
    graph.set_entry_point("enrich")
    graph.add_edge("enrich", "compose")
    graph.add_edge("compose", "complete")
    graph.add_edge("complete", END)
    return graph.compile()
