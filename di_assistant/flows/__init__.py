"""Per-turn enrichment and completion pipeline built on LangGraph."""

from di_assistant.flows.graph import build_turn_graph, compose_request

__all__ = ["build_turn_graph", "compose_request"]
