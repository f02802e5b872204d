"""系统提示词加载工具。

按语言(locale) 从 prompts/<locale> 目录读取 persona 文本，
并在有补充上下文时追加出典说明。
"""

from pathlib import Path


PROMPTS_DIR = Path(__file__).resolve().parent

CITATION_SECTION = "必要に応じて以下の出典情報を活用してください。"


def load_system_prompt(agent_type: str = "di-assistant", locale: str = "ja") -> str:
    """根据 Agent 类型和语言加载系统提示词文本。"""

    fname = PROMPTS_DIR / locale / f"{agent_type.replace('-', '_')}_system.md"
    return fname.read_text(encoding="utf-8").strip()


def build_system_prompt(supplemental: str, agent_type: str = "di-assistant", locale: str = "ja") -> str:
    """persona + 补充上下文。补充上下文为空时不出现出典段落。"""

    prompt = load_system_prompt(agent_type, locale)
    if not supplemental:
        return prompt
    return f"{prompt}\n\n{CITATION_SECTION}\n\n{supplemental}"
