"""OpenAI Whisper 语音转写。

录音由外部 AudioProvider 完成，这里只负责把音频上传到
{base_url}/audio/transcriptions 并取回文本。
"""

from typing import Optional

import httpx

from di_assistant.config.settings import settings
from di_assistant.domain.exceptions import ApiError, MalformedResponseError, NetworkError, ValidationError
from di_assistant.voice.base import AudioProvider


WHISPER_MODEL = "whisper-1"


class WhisperVoiceSource:
    def __init__(self, audio_provider: AudioProvider, cfg=settings):
        self._audio_provider = audio_provider
        self._settings = cfg

    async def listen(self) -> Optional[str]:
        clip = await self._audio_provider()
        if clip is None:
            return None
        filename, audio_bytes, content_type = clip
        if not audio_bytes:
            return None
        if not getattr(self._settings, "openai_api_key", None):
            raise ValidationError(code="MISSING_API_KEY", message="OPENAI_API_KEY not set")
        # Whisper 只接受基础 MIME 类型，例如 "audio/webm;codecs=opus" -> "audio/webm"
        base_type = (content_type or "audio/webm").lower().split(";")[0].strip()
        try:
            async with httpx.AsyncClient(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = await client.post(
                    f"{self._settings.openai_base_url.rstrip('/')}/audio/transcriptions",
                    data={"model": WHISPER_MODEL, "language": self._settings.voice_language},
                    files={"file": (filename, audio_bytes, base_type)},
                    headers={"Authorization": f"Bearer {self._settings.openai_api_key}"},
                )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e) or type(e).__name__)
        if resp.status_code >= 400:
            raise ApiError(code="API_ERROR", message=resp.text, http_status=resp.status_code)
        try:
            text = resp.json().get("text")
        except (ValueError, AttributeError) as e:
            raise MalformedResponseError(code="INVALID_JSON", message=str(e))
        if not isinstance(text, str) or not text.strip():
            return None
        return text.strip()
