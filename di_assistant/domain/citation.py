from dataclasses import dataclass


@dataclass(frozen=True)
class Citation:
    """外部来源的一条引用，格式化后注入 system prompt。"""

    label: str
    title: str
    source_url: str

    def render(self) -> str:
        return f"{self.label}（{self.title}）\n出典: {self.source_url}"
