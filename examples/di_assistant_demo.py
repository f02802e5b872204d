"""Terminal demo of the DI assistant.

Type a question and press Enter. "/voice <audio file>" transcribes a recording
into the input line (requires VOICE_ENABLED=true), "/quit" exits.
"""

import asyncio
import mimetypes
from pathlib import Path
from typing import Optional

from di_assistant.api.service import get_default_assistant
from di_assistant.voice import AudioClip

_next_clip: Optional[Path] = None


async def _audio_from_file() -> Optional[AudioClip]:
    if _next_clip is None or not _next_clip.exists():
        return None
    content_type = mimetypes.guess_type(_next_clip.name)[0] or "audio/webm"
    return _next_clip.name, _next_clip.read_bytes(), content_type


async def main() -> None:
    global _next_clip
    assistant = get_default_assistant(audio_provider=_audio_from_file)
    print(f"DI アシスタント24/7: {assistant.transcript[0].text}")
    while True:
        line = await asyncio.to_thread(input, f"You [{assistant.pending_input}]: ")
        if line.strip() == "/quit":
            break
        if line.startswith("/voice"):
            if not assistant.voice_available:
                print("(voice input is disabled: set VOICE_ENABLED=true and OPENAI_API_KEY)")
                continue
            _next_clip = Path(line[len("/voice"):].strip())
            if await assistant.capture_voice() is None:
                print("(voice input unavailable)")
            continue
        turn = await assistant.submit(line or None)
        if turn is not None:
            print(f"DI アシスタント24/7: {turn.text}")


if __name__ == "__main__":
    asyncio.run(main())
