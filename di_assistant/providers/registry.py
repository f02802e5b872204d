"""Provider 与模型配置。

代码里只使用逻辑模型名（如 "di-chat"），由这里映射到厂商模型 ID（如 "gpt-4"），
更换底层模型时只需修改本文件。
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping

from di_assistant.domain.exceptions import ValidationError


@dataclass(frozen=True)
class ModelConfig:
    logical_name: str
    provider_model: str
    max_tokens: int
    default_temperature: float


@dataclass(frozen=True)
class ProviderConfig:
    name: str
    base_url: str
    models: Dict[str, ModelConfig] = field(default_factory=dict)

    def resolve(self, logical_name: str) -> ModelConfig:
        """逻辑模型名 -> ModelConfig；未登记的模型抛出 ValidationError。"""
        model_cfg = self.models.get(logical_name)
        if model_cfg is None:
            raise ValidationError(code="UNKNOWN_MODEL", message=f"Unknown model: {logical_name!r}")
        return model_cfg


DI_CHAT = ModelConfig(
    logical_name="di-chat",
    provider_model="gpt-4",
    max_tokens=2048,
    default_temperature=0.3,
)

OPENAI_CONFIG = ProviderConfig(
    name="openai",
    base_url="https://api.openai.com/v1",
    models={DI_CHAT.logical_name: DI_CHAT},
)

PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {OPENAI_CONFIG.name: OPENAI_CONFIG}


def get_provider_config(name: str) -> ProviderConfig:
    """按名称（不区分大小写）查找 Provider，未知名称抛出 KeyError。"""
    cfg = PROVIDER_REGISTRY.get(name.strip().lower())
    if cfg is None:
        raise KeyError(f"Unknown provider: {name!r}")
    return cfg
