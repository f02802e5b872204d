"""DI 助手会话编排核心模块。

持有会话记录（Transcript），每轮依次执行：
追加用户消息 -> 并发检索补充上下文 -> 构建请求 -> 调用模型 -> 追加助手回复或兜底回复。
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from di_assistant.config.settings import settings
from di_assistant.domain.conversation import FALLBACK_REPLY, Transcript, Turn
from di_assistant.domain.exceptions import BusinessError
from di_assistant.domain.models import ChatMessage
from di_assistant.flows.graph import build_turn_graph
from di_assistant.infrastructure.logging.logger import logger
from di_assistant.lookups.synthesizer import ContextSynthesizer
from di_assistant.providers.base import ProviderClient
from di_assistant.voice.base import VoiceSource


class TurnState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class AssistantConfig:
    agent_type: str = "di-assistant"
    provider: str = "openai"
    model: str = "di-chat"
    temperature: Optional[float] = None  # None 时使用 registry 中的默认温度


class ConversationOrchestrator:
    """单会话编排器。

    同一时刻只处理一轮对话：状态不是 IDLE 时的 submit() 直接忽略，
    不修改 Transcript，也不发起任何网络请求。
    """

    def __init__(
        self,
        provider_client: ProviderClient,
        synthesizer: Optional[ContextSynthesizer] = None,
        voice_source: Optional[VoiceSource] = None,
        config: Optional[AssistantConfig] = None,
        transcript: Optional[Transcript] = None,
    ):
        self._provider_client = provider_client
        self._synthesizer = synthesizer or ContextSynthesizer()
        self._voice_source = voice_source
        self._config = config or AssistantConfig(
            provider=getattr(provider_client, "name", "openai"),
            model=getattr(settings, "default_model", "di-chat"),
        )
        self._transcript = transcript or Transcript()
        self._state = TurnState.IDLE
        self._pending_input = ""
        self._graph = build_turn_graph(
            self._synthesizer,
            provider_client,
            model_name=self._config.model,
            temperature=self._config.temperature,
            agent_type=self._config.agent_type,
        )

    @property
    def transcript(self) -> Tuple[Turn, ...]:
        return self._transcript.snapshot()

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def pending_input(self) -> str:
        return self._pending_input

    @pending_input.setter
    def pending_input(self, value: str) -> None:
        self._pending_input = value or ""

    @property
    def voice_available(self) -> bool:
        return self._voice_source is not None

    async def submit(self, text: Optional[str] = None) -> Optional[Turn]:
        """提交一轮用户输入。

        Args:
            text: 用户输入；为 None 时使用 pending_input。

        Returns:
            本轮追加的助手消息（成功回复或兜底回复）；
            输入为空或正在发送中时返回 None，且不产生任何副作用。
        """
        if self._state is not TurnState.IDLE:
            logger.info("Submission ignored while sending", extra={"extra": {"state": self._state.value}})
            return None
        user_input = self._pending_input if text is None else text
        if not (user_input or "").strip():
            return None

        # 在第一个 await 之前完成检查与状态切换，保证同一事件循环内不会重入
        history = self._transcript.to_messages()
        self._transcript.append(Turn(sender="user", text=user_input))
        self._pending_input = ""
        self._state = TurnState.SENDING

        start_time = time.time()
        log_ctx: Dict[str, Any] = {
            "trace_id": f"tr-{uuid4().hex}",
            "agent_type": self._config.agent_type,
        }
        self._log(logging.INFO, "Turn started", log_ctx, transcript_len=len(self._transcript))

        reply: Optional[str] = None
        try:
            reply = await self._generate_reply(user_input, history, log_ctx)
        finally:
            # 被取消时同样补上兜底回复，Transcript 始终成对增长
            if reply is not None:
                turn = Turn(sender="assistant", text=reply)
                self._state = TurnState.SUCCESS
            else:
                turn = Turn(sender="assistant", text=FALLBACK_REPLY)
                self._state = TurnState.FAILURE
            self._transcript.append(turn)
            self._log(
                logging.INFO,
                "Turn finished",
                log_ctx,
                outcome=self._state.value,
                elapsed_seconds=round(time.time() - start_time, 2),
            )
            self._state = TurnState.IDLE
        return turn

    async def capture_voice(self) -> Optional[str]:
        """从语音输入获取一段文本，写入 pending_input。

        未配置语音源时为空操作；语音源失败只记录日志，不向用户报错。
        """
        if self._voice_source is None:
            return None
        try:
            text = await self._voice_source.listen()
        except Exception as e:
            logger.warning("Voice capture failed", extra={"extra": {"error": repr(e)}})
            return None
        if not text or not text.strip():
            return None
        self._pending_input = text
        return text

    async def _generate_reply(
        self,
        user_input: str,
        history: List[ChatMessage],
        log_ctx: Dict[str, Any],
    ) -> Optional[str]:
        try:
            final = await self._graph.ainvoke({"query": user_input, "history": history})
        except Exception as e:
            self._log(logging.ERROR, "Turn pipeline crashed", log_ctx, error=repr(e))
            return None

        error = final.get("error")
        if error is not None:
            code = error.code if isinstance(error, BusinessError) else type(error).__name__
            self._log(
                logging.ERROR,
                "Model call failed",
                log_ctx,
                code=code,
                error=str(error),
                provider=self._config.provider,
                model=self._config.model,
            )
            return None

        if final.get("usage"):
            self._log(logging.INFO, "Token usage", log_ctx, **final["usage"])
        return final.get("reply")

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
