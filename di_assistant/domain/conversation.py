from dataclasses import dataclass
from typing import Iterator, List, Literal, Tuple

from .models import ChatMessage, Role


Sender = Literal["user", "assistant"]

SEED_GREETING = "こんにちは！ご用件をどうぞ。"
FALLBACK_REPLY = "すみません、応答に失敗しました。"

_SENDER_ROLES: dict[str, Role] = {"user": "user", "assistant": "assistant"}


@dataclass(frozen=True)
class Turn:
    sender: Sender
    text: str

    def to_message(self) -> ChatMessage:
        return ChatMessage(role=_SENDER_ROLES[self.sender], content=self.text)


class Transcript:
    """当前会话的有序消息记录。

    总是以一条助手问候开头，只追加、不删除。
    外部只能拿到 snapshot() 返回的不可变元组。
    """

    def __init__(self, greeting: str = SEED_GREETING):
        self._turns: List[Turn] = [Turn(sender="assistant", text=greeting)]

    def append(self, turn: Turn) -> None:
        self._turns.append(turn)

    def snapshot(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    def to_messages(self) -> List[ChatMessage]:
        return [t.to_message() for t in self._turns]

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))
