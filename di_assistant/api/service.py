"""对外 API 服务模块。

提供简化的函数接口供上层 UI 调用。
"""

from typing import Any, Dict, List, Optional

from di_assistant.agents.di_assistant_agent import ConversationOrchestrator
from di_assistant.config.settings import settings
from di_assistant.infrastructure.logging.logger import logger
from di_assistant.lookups.synthesizer import ContextSynthesizer
from di_assistant.providers import create_provider
from di_assistant.voice import AudioProvider, create_voice_source


_assistant: Optional[ConversationOrchestrator] = None


def get_default_assistant(audio_provider: Optional[AudioProvider] = None) -> ConversationOrchestrator:
    """获取默认的编排器实例（单例，会话只保存在进程内存中）。"""
    global _assistant
    if _assistant is None:
        if not settings.openai_configured:
            logger.warning("OPENAI_API_KEY not set, every turn will get the fallback reply")
        _assistant = ConversationOrchestrator(
            provider_client=create_provider(),
            synthesizer=ContextSynthesizer(),
            voice_source=create_voice_source(settings, audio_provider),
        )
    return _assistant


def reset_default_assistant() -> None:
    global _assistant
    _assistant = None


def get_transcript() -> List[Dict[str, str]]:
    assistant = get_default_assistant()
    return [{"sender": t.sender, "text": t.text} for t in assistant.transcript]


async def run_di_chat(user_input: str) -> Dict[str, Any]:
    """提交一轮对话。

    Returns:
        包含助手回复（被拒绝时为 None）、当前状态与完整会话记录的字典
    """
    assistant = get_default_assistant()
    try:
        turn = await assistant.submit(user_input)
    except Exception as e:
        logger.error(f"Chat failed: {e}", extra={"extra": {"error": str(e)}})
        raise
    return {
        "reply": turn.text if turn else None,
        "state": assistant.state.value,
        "transcript": get_transcript(),
    }
