"""LLM Provider 集成层。

- base: Provider 抽象接口。
- registry: Provider 与模型配置。
- openai_client: OpenAI 兼容实现。
"""

from typing import Optional

from di_assistant.config.settings import settings
from di_assistant.providers.base import ProviderClient
from di_assistant.providers.openai_client import OpenAIClient
from di_assistant.providers.registry import get_provider_config


def create_provider(name: Optional[str] = None) -> ProviderClient:
    """根据名称创建 Provider 实例，默认取配置中的 provider。"""

    provider_name = (name or getattr(settings, "default_provider", "openai")).lower()
    get_provider_config(provider_name)
    return OpenAIClient(settings)
