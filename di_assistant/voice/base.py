"""语音输入抽象接口。"""

from typing import Awaitable, Callable, Optional, Protocol, Tuple


# (filename, audio bytes, content type)；录音设备不可用或用户取消时返回 None
AudioClip = Tuple[str, bytes, str]
AudioProvider = Callable[[], Awaitable[Optional[AudioClip]]]


class VoiceSource(Protocol):
    """每次 listen() 最多产出一段文本；没有识别结果时返回 None。"""

    async def listen(self) -> Optional[str]:
        ...
