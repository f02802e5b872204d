import httpx
import pytest

from di_assistant.agents.di_assistant_agent import ConversationOrchestrator
from di_assistant.domain.exceptions import ApiError, NetworkError
from di_assistant.lookups.synthesizer import ContextSynthesizer
from di_assistant.voice import WhisperVoiceSource, create_voice_source
from http_fakes import FakeResponse


def _clip(data=b"RIFF....WAVE", content_type="audio/webm;codecs=opus"):
    async def provider():
        return ("question.webm", data, content_type)

    return provider


async def _no_clip():
    return None


class FakeProvider:
    name = "fake"

    async def chat(self, req):
        raise AssertionError("voice capture must not call the model")


class FixedVoice:
    def __init__(self, text=None, error=None):
        self._text = text
        self._error = error

    async def listen(self):
        if self._error:
            raise self._error
        return self._text


def _orchestrator(voice_source):
    return ConversationOrchestrator(FakeProvider(), synthesizer=ContextSynthesizer([]), voice_source=voice_source)


def test_create_voice_source_requires_flag_key_and_recorder(stub_settings):
    assert isinstance(create_voice_source(stub_settings, _clip()), WhisperVoiceSource)
    assert create_voice_source(stub_settings, None) is None

    stub_settings.voice_enabled = False
    assert create_voice_source(stub_settings, _clip()) is None

    stub_settings.voice_enabled = True
    stub_settings.openai_api_key = None
    assert create_voice_source(stub_settings, _clip()) is None


@pytest.mark.asyncio
async def test_whisper_uploads_clip_and_returns_text(fake_http, stub_settings):
    calls = fake_http(lambda method, url, payload, kw: FakeResponse(json_data={"text": " アスピリンの用量 "}))

    text = await WhisperVoiceSource(_clip(), stub_settings).listen()

    assert text == "アスピリンの用量"
    method, url, kw = calls[0]
    assert url == "https://api.openai.test/v1/audio/transcriptions"
    assert kw["data"] == {"model": "whisper-1", "language": "ja"}
    assert kw["files"]["file"] == ("question.webm", b"RIFF....WAVE", "audio/webm")


@pytest.mark.asyncio
async def test_whisper_without_clip_makes_no_request(fake_http, stub_settings):
    calls = fake_http(lambda method, url, payload, kw: FakeResponse(json_data={"text": "x"}))

    assert await WhisperVoiceSource(_no_clip, stub_settings).listen() is None
    assert await WhisperVoiceSource(_clip(data=b""), stub_settings).listen() is None
    assert calls == []


@pytest.mark.asyncio
async def test_whisper_error_mapping(fake_http, stub_settings):
    fake_http(lambda method, url, payload, kw: FakeResponse(status_code=401, text="bad key"))
    with pytest.raises(ApiError):
        await WhisperVoiceSource(_clip(), stub_settings).listen()

    def handler(method, url, payload, kw):
        raise httpx.ConnectError("offline")

    fake_http(handler)
    with pytest.raises(NetworkError):
        await WhisperVoiceSource(_clip(), stub_settings).listen()


@pytest.mark.asyncio
async def test_capture_voice_without_source_is_noop():
    orch = _orchestrator(None)
    orch.pending_input = "draft"

    assert orch.voice_available is False
    assert await orch.capture_voice() is None
    assert orch.pending_input == "draft"


@pytest.mark.asyncio
async def test_capture_voice_sets_pending_input():
    orch = _orchestrator(FixedVoice(text="イブプロフェンの副作用"))

    assert await orch.capture_voice() == "イブプロフェンの副作用"
    assert orch.pending_input == "イブプロフェンの副作用"
    assert len(orch.transcript) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("voice", [FixedVoice(error=RuntimeError("mic busy")), FixedVoice(text="  ")])
async def test_capture_voice_failure_keeps_pending_input(voice):
    orch = _orchestrator(voice)
    orch.pending_input = "draft"

    assert await orch.capture_voice() is None
    assert orch.pending_input == "draft"
