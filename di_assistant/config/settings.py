"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("DI_ASSISTANT_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """DI 助手配置（使用 Pydantic Settings）。"""

    # ---- Provider ----
    default_provider: str = Field(default="openai", description="默认 Provider 名称")
    default_model: str = Field(
        default="di-chat",
        description="逻辑模型名，由 registry 映射为具体厂商模型",
    )
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API 密钥")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI 兼容 API 基础URL",
    )
    http_timeout: float = Field(default=30.0, ge=1.0, description="模型调用超时时间（秒）")

    # ---- 外部检索 ----
    lookup_timeout: float = Field(default=10.0, ge=1.0, description="文献/药品检索超时时间（秒）")
    pubmed_base_url: str = Field(
        default="https://eutils.ncbi.nlm.nih.gov/entrez/eutils",
        description="PubMed E-utilities 基础URL",
    )
    pubmed_db: str = Field(default="pubmed")
    drugbank_base_url: str = Field(default="https://go.drugbank.com")
    drugbank_searcher: str = Field(default="drugs")
    drug_reference_relay_url: Optional[str] = Field(
        default=None,
        description="设置后经由中继服务器访问 DrugBank，例如 http://localhost:3001",
    )

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    # ---- 语音输入 ----
    voice_enabled: bool = Field(default=False, description="是否启用语音输入")
    voice_language: str = Field(default="ja")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("openai_api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key)


settings = Settings()
