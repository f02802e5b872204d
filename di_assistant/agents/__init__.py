from di_assistant.agents.di_assistant_agent import AssistantConfig, ConversationOrchestrator, TurnState

__all__ = ["AssistantConfig", "ConversationOrchestrator", "TurnState"]
