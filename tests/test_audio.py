import io
import json

import httpx
import pytest

from cozekit.audio import (
    Audio,
    AudioCodec,
    AudioFormat,
    AudioRooms,
    AudioSpeech,
    AudioTranscriptions,
    AudioVoices,
    LanguageCode,
    RoomConfig,
    SpeechResult,
    Voice,
)
from cozekit.core import COM_BASE_URL, Core, CozeAPIError

LOG_HEADERS = {"X-Tt-Logid": "test_log_id"}


def make_core(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return Core(base_url=COM_BASE_URL, client=client)


def json_response(status, payload):
    return httpx.Response(status, json=payload, headers=LOG_HEADERS)


def error_handler(request):
    return json_response(400, {"code": 0, "msg": ""})


ROOM_DATA = {"room_id": "room1", "app_id": "app1", "token": "token", "uid": "uid1"}


def test_create_audio_room_success():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return json_response(200, {"data": ROOM_DATA})

    rooms = AudioRooms(make_core(handler))
    resp = rooms.create(
        bot_id="bot1",
        conversation_id="conv1",
        voice_id="voice1",
        config=RoomConfig(codec=AudioCodec.OPUS),
    )
    assert seen["method"] == "POST"
    assert seen["path"] == "/v1/audio/rooms"
    assert seen["body"] == {
        "bot_id": "bot1",
        "conversation_id": "conv1",
        "voice_id": "voice1",
        "config": {"audio_config": {"codec": "OPUS"}},
    }
    assert resp.log_id() == "test_log_id"
    assert resp.room_id == "room1"
    assert resp.app_id == "app1"
    assert resp.token == "token"
    assert resp.uid == "uid1"


def test_create_audio_room_minimal_fields():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return json_response(200, {"data": ROOM_DATA})

    resp = AudioRooms(make_core(handler)).create(bot_id="bot1")
    assert seen["body"] == {"bot_id": "bot1"}
    assert resp.log_id() == "test_log_id"
    assert resp.room_id == "room1"


def test_create_audio_room_error():
    rooms = AudioRooms(make_core(error_handler))
    with pytest.raises(CozeAPIError):
        rooms.create(bot_id="invalid_bot")


def test_audio_codec_values():
    assert AudioCodec("AACLC") is AudioCodec.AACLC
    assert AudioCodec.G711A.value == "G711A"
    assert AudioCodec.OPUS.value == "OPUS"
    assert AudioCodec.G722.value == "G722"


def test_create_speech_success():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, content=b"mock audio data", headers=LOG_HEADERS)

    speech = AudioSpeech(make_core(handler))
    resp = speech.create(
        input="Hello, world!",
        voice_id="voice1",
        response_format=AudioFormat.MP3,
        speed=1.0,
    )
    assert seen["method"] == "POST"
    assert seen["path"] == "/v1/audio/speech"
    assert seen["body"] == {
        "input": "Hello, world!",
        "voice_id": "voice1",
        "response_format": "mp3",
        "speed": 1.0,
    }
    assert resp.log_id() == "test_log_id"
    assert resp.data == b"mock audio data"


def test_create_speech_error():
    speech = AudioSpeech(make_core(error_handler))
    with pytest.raises(CozeAPIError):
        speech.create("Hello, world!", "invalid_voice", AudioFormat.MP3, 1.0)


def test_create_speech_invalid_speed():
    speech = AudioSpeech(make_core(error_handler))
    with pytest.raises(CozeAPIError):
        speech.create("Hello, world!", "voice1", AudioFormat.MP3, -1.0)


def test_speech_write_to_file(tmp_path):
    target = tmp_path / "out.mp3"
    SpeechResult(data=b"mock audio data").write_to_file(target)
    assert target.read_bytes() == b"mock audio data"


def test_transcription_success():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["content"] = request.read()
        return json_response(200, {"data": {"text": "this_test"}})

    transcriptions = AudioTranscriptions(make_core(handler))
    resp = transcriptions.create(io.BytesIO(b"testmp3"), "testmp3")
    assert seen["method"] == "POST"
    assert seen["path"] == "/v1/audio/transcriptions"
    assert b"testmp3" in seen["content"]
    assert resp.log_id() == "test_log_id"
    assert resp.text == "this_test"


def test_transcription_error():
    transcriptions = AudioTranscriptions(make_core(error_handler))
    with pytest.raises(CozeAPIError):
        transcriptions.create(io.BytesIO(b"testmp3"), "testmp3")


def test_clone_voice_success():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["content"] = request.read()
        return json_response(200, {"data": {"voice_id": "voice1"}})

    voices = AudioVoices(make_core(handler))
    resp = voices.clone(
        voice_name="test_voice",
        file=io.BytesIO(b"mock audio data"),
        audio_format=AudioFormat.MP3,
        language=LanguageCode.EN,
        voice_id="base_voice",
        preview_text="Hello",
        text="Sample text",
        space_id="test_space",
        description="Test voice",
    )
    assert seen["method"] == "POST"
    assert seen["path"] == "/v1/audio/voices/clone"
    body = seen["content"]
    assert b'name="voice_name"' in body
    assert b"test_space" in body
    assert b"mock audio data" in body
    assert resp.log_id() == "test_log_id"
    assert resp.voice_id == "voice1"


def test_clone_voice_error():
    voices = AudioVoices(make_core(error_handler))
    with pytest.raises(CozeAPIError):
        voices.clone("test_voice", io.BytesIO(b"invalid audio data"))


def test_clone_voice_without_file():
    voices = AudioVoices(make_core(error_handler))
    with pytest.raises(ValueError, match="file is required"):
        voices.clone("test_voice", None)


VOICE_LIST = [
    {
        "voice_id": "voice1",
        "name": "Voice 1",
        "is_system_voice": False,
        "language_code": "en-US",
        "language_name": "English (US)",
        "preview_text": "Hello",
        "preview_audio": "url1",
        "available_training_times": 5,
        "create_time": 1234567890,
        "update_time": 1234567891,
    },
    {
        "voice_id": "voice2",
        "name": "Voice 2",
        "is_system_voice": True,
        "language_code": "zh-CN",
        "language_name": "Chinese (Simplified)",
        "preview_text": "你好",
        "preview_audio": "url2",
        "available_training_times": 3,
        "create_time": 1234567892,
        "update_time": 1234567893,
    },
]


def test_list_voices_success():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["query"] = dict(request.url.params)
        return json_response(200, {"data": {"voice_list": VOICE_LIST}})

    voices = AudioVoices(make_core(handler))
    paged = voices.list(filter_system_voice=True, page_num=1, page_size=20)
    assert seen["method"] == "GET"
    assert seen["path"] == "/v1/audio/voices"
    assert seen["query"] == {
        "page_num": "1",
        "page_size": "20",
        "filter_system_voice": "true",
    }
    assert paged.has_more is False
    items = paged.items
    assert len(items) == 2

    first, second = items
    assert first.voice_id == "voice1"
    assert first.name == "Voice 1"
    assert first.is_system_voice is False
    assert first.language_code == "en-US"
    assert first.language_name == "English (US)"
    assert first.preview_text == "Hello"
    assert first.preview_audio == "url1"
    assert first.available_training_times == 5
    assert first.create_time == 1234567890
    assert first.update_time == 1234567891

    assert second.voice_id == "voice2"
    assert second.name == "Voice 2"
    assert second.is_system_voice is True
    assert second.language_code == "zh-CN"
    assert second.language_name == "Chinese (Simplified)"
    assert second.preview_text == "你好"
    assert second.preview_audio == "url2"
    assert second.available_training_times == 3
    assert second.create_time == 1234567892
    assert second.update_time == 1234567893


def test_list_voices_default_pagination():
    seen = {}

    def handler(request):
        seen["query"] = dict(request.url.params)
        return json_response(200, {"data": {"voice_list": []}})

    paged = AudioVoices(make_core(handler)).list()
    assert seen["query"]["page_num"] == "1"
    assert seen["query"]["page_size"] == "20"
    assert seen["query"]["filter_system_voice"] == "false"
    assert paged.has_more is False
    assert paged.items == []


def test_list_voices_error():
    voices = AudioVoices(make_core(error_handler))
    with pytest.raises(CozeAPIError):
        voices.list(page_num=-1, page_size=20)


def test_list_voices_full_page_walks_next_page():
    calls = []

    def handler(request):
        page_num = request.url.params["page_num"]
        calls.append(page_num)
        data = VOICE_LIST if page_num == "1" else VOICE_LIST[:1]
        return json_response(200, {"data": {"voice_list": data}})

    paged = AudioVoices(make_core(handler)).list(page_size=2)
    assert paged.has_more is True
    ids = [voice.voice_id for voice in paged]
    assert ids == ["voice1", "voice2", "voice1"]
    assert calls == ["1", "2"]


def test_voice_from_dict_defaults():
    voice = Voice.from_dict({"voice_id": "v"})
    assert voice == Voice(voice_id="v")


def test_audio_groups_endpoints():
    def handler(request):
        return json_response(200, {"data": ROOM_DATA})

    audio = Audio(make_core(handler))
    assert audio.rooms.create(bot_id="bot1").room_id == "room1"
    assert isinstance(audio.voices, AudioVoices)
    assert isinstance(audio.speech, AudioSpeech)
    assert isinstance(audio.transcriptions, AudioTranscriptions)