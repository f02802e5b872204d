"""语音输入。

语音是可选能力：create_voice_source() 在未启用、缺少 API Key
或没有录音来源时返回 None，编排器把 None 当作正常配置处理。
"""

from typing import Optional

from di_assistant.config.settings import settings
from di_assistant.voice.base import AudioClip, AudioProvider, VoiceSource
from di_assistant.voice.whisper import WhisperVoiceSource


def create_voice_source(cfg=settings, audio_provider: Optional[AudioProvider] = None) -> Optional[VoiceSource]:
    if not getattr(cfg, "voice_enabled", False):
        return None
    if not getattr(cfg, "openai_api_key", None) or audio_provider is None:
        return None
    return WhisperVoiceSource(audio_provider, cfg)


__all__ = ["AudioClip", "AudioProvider", "VoiceSource", "WhisperVoiceSource", "create_voice_source"]
