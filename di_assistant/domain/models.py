"""统一的对话请求与结果数据模型。

- ChatMessage: 一条发给模型的消息（system/user/assistant）。
- ChatRequest: 发给底层 LLM Provider 的完整请求，每次调用重新构建，不做保留。
- ChatResult: 从 Provider 解析后的统一响应结果。

Provider 适配器（如 OpenAIClient）只依赖这些模型，
并负责在各自的 API JSON 和这些模型之间做转换。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from di_assistant.domain.exceptions import MalformedResponseError


# 与 OpenAI 的 role 字段对应
Role = Literal["system", "user", "assistant"]


@dataclass
class ChatMessage:
    role: Role
    content: str
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ChatRequest:
    """一次完整的聊天请求。

    messages 的顺序即上下文顺序：system prompt 在前，随后是会话记录，
    最后一条是本轮用户输入。
    """

    provider: str  # 逻辑 Provider 名，如 "openai"
    model: str  # 逻辑模型名，如 "di-chat"
    messages: List[ChatMessage]
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


@dataclass
class ChatUsage:
    """Provider 返回的 token 统计信息。"""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class ChatChoice:
    index: int
    message: ChatMessage
    finish_reason: Optional[str] = None


@dataclass
class ChatResult:
    """一次对话调用的最终结果。"""

    provider: str
    model: str
    choices: List[ChatChoice]
    usage: Optional[ChatUsage] = None
    raw: Optional[dict] = None

    def first_content(self) -> str:
        """返回第一个候选回答的正文（已去除首尾空白）。

        没有候选或正文为空时抛出 MalformedResponseError。
        """

        if not self.choices:
            raise MalformedResponseError(code="MISSING_CHOICES", message="response has no choices")
        content = (self.choices[0].message.content or "").strip()
        if not content:
            raise MalformedResponseError(code="EMPTY_CONTENT", message="first choice has no message content")
        return content
