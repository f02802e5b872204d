"""DI Assistant 24/7 顶层包。

面向药剂信息问答的对话助手：每轮对话并发检索 PubMed 与 DrugBank，
把结果作为出典信息注入 system prompt，再调用 LLM 生成回答。
"""

from di_assistant.agents.di_assistant_agent import AssistantConfig, ConversationOrchestrator, TurnState

__all__ = ["AssistantConfig", "ConversationOrchestrator", "TurnState"]
