"""领域层模型与协议。

包含：
- models: 统一的 ChatMessage / ChatRequest / ChatResult 模型。
- conversation: Turn 与 Transcript（会话记录）。
- citation: 外部检索结果的引用格式。
- exceptions: 业务异常类型定义。
"""
