"""OpenAI 兼容 Provider 适配器。

- URL: {base_url}/chat/completions
- 认证: Authorization: Bearer <api_key>

只依赖公共字段：model/messages/temperature/max_tokens。
"""

from typing import Any, Dict

import httpx

from di_assistant.config.settings import settings
from di_assistant.domain.exceptions import (
    ApiError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
    ValidationError,
)
from di_assistant.domain.models import ChatChoice, ChatMessage, ChatRequest, ChatResult, ChatUsage
from di_assistant.providers.registry import OPENAI_CONFIG, ModelConfig


class OpenAIClient:
    """OpenAI chat/completions 客户端实现。"""

    name = "openai"

    def __init__(self, cfg=settings):
        self._settings = cfg

    async def chat(self, req: ChatRequest) -> ChatResult:
        if not getattr(self._settings, "openai_api_key", None):
            raise ValidationError(code="MISSING_API_KEY", message="OPENAI_API_KEY not set")
        model_cfg = OPENAI_CONFIG.resolve(req.model)
        payload = self._build_payload(req, model_cfg)
        base = getattr(self._settings, "openai_base_url", None) or OPENAI_CONFIG.base_url
        try:
            async with httpx.AsyncClient(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = await client.post(
                    f"{base}/chat/completions",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {self._settings.openai_api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.RequestError as e:
            # 包含连接失败与超时
            raise NetworkError(code="NETWORK_ERROR", message=str(e) or type(e).__name__)
        if resp.status_code == 429:
            raise RateLimitError(code="RATE_LIMIT", message="OpenAI rate limit", http_status=429)
        if resp.status_code >= 400:
            raise ApiError(code="API_ERROR", message=resp.text, http_status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(code="INVALID_JSON", message=str(e))
        if not isinstance(data, dict):
            raise MalformedResponseError(code="INVALID_JSON", message="response body is not an object")
        return self._parse_response(data, req)

    # ---- 辅助方法 ----

    def _build_payload(self, req: ChatRequest, model_cfg: ModelConfig) -> dict:
        return {
            "model": model_cfg.provider_model,
            "messages": [self._message_to_payload(m) for m in req.messages],
            "temperature": req.temperature if req.temperature is not None else model_cfg.default_temperature,
            "max_tokens": req.max_tokens or model_cfg.max_tokens,
        }

    def _parse_response(self, data: dict, req: ChatRequest) -> ChatResult:
        raw_choices = data.get("choices") or []
        if not isinstance(raw_choices, list):
            raise MalformedResponseError(code="INVALID_CHOICES", message="choices is not a list")
        choices: list[ChatChoice] = []
        for i, ch in enumerate(raw_choices):
            ch = ch or {}
            msg = (ch.get("message") or {}) if isinstance(ch, dict) else None
            if not isinstance(msg, dict):
                raise MalformedResponseError(code="INVALID_CHOICES", message=f"choices[{i}] has no message object")
            content = msg.get("content") or ""
            if not isinstance(content, str):
                raise MalformedResponseError(code="INVALID_CONTENT", message=f"choices[{i}].message.content is not a string")
            choices.append(
                ChatChoice(
                    index=ch.get("index", i),
                    message=ChatMessage(role=msg.get("role") or "assistant", content=content),
                    finish_reason=ch.get("finish_reason"),
                )
            )
        usage = None
        usage_raw = data.get("usage") or {}
        if isinstance(usage_raw, dict) and usage_raw:
            usage = ChatUsage(
                prompt_tokens=usage_raw.get("prompt_tokens", 0),
                completion_tokens=usage_raw.get("completion_tokens", 0),
                total_tokens=usage_raw.get("total_tokens", 0),
            )
        return ChatResult(provider=self.name, model=req.model, choices=choices, usage=usage, raw=data)

    @staticmethod
    def _message_to_payload(message: ChatMessage) -> Dict[str, Any]:
        return {"role": message.role, "content": message.content}
