"""Audio endpoints: real-time rooms, speech synthesis, transcription and voices."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from os import PathLike
from pathlib import Path
from typing import Any, BinaryIO, Mapping

from .core import ApiModel, Core, HTTPResponse, Page


class _StrEnum(str, Enum):
    def __str__(self) -> str:
        return self.value


class AudioFormat(_StrEnum):
    """Encoding of an audio file."""

    WAV = "wav"
    PCM = "pcm"
    OGG_OPUS = "ogg_opus"
    M4A = "m4a"
    AAC = "aac"
    MP3 = "mp3"


class LanguageCode(_StrEnum):
    """Language of a voice."""

    ZH = "zh"
    EN = "en"
    JA = "ja"
    ES = "es"
    ID = "id"
    PT = "pt"


class AudioCodec(_StrEnum):
    """Codec used inside an audio room."""

    AACLC = "AACLC"
    G711A = "G711A"
    OPUS = "OPUS"
    G722 = "G722"


def _wire(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _data(response: HTTPResponse) -> Mapping[str, Any]:
    payload = response.payload if isinstance(response.payload, dict) else {}
    data = payload.get("data")
    return data if isinstance(data, dict) else {}


@dataclass
class RoomConfig:
    """Configuration of an audio room."""

    codec: AudioCodec | str | None = None

    def to_dict(self) -> dict[str, Any]:
        audio_config = None if self.codec is None else {"codec": _wire(self.codec)}
        return {"audio_config": audio_config}


@dataclass
class AudioRoom(ApiModel):
    """Credentials for joining a newly created audio room."""

    room_id: str = ""
    app_id: str = ""
    token: str = ""
    uid: str = ""


@dataclass
class SpeechResult(ApiModel):
    """Synthesised speech audio."""

    data: bytes = b""

    def write_to_file(self, path: str | PathLike[str]) -> None:
        """Write the audio bytes to ``path``, replacing any existing file."""
        Path(path).write_bytes(self.data)


@dataclass
class Transcription(ApiModel):
    """Text recognised in an audio file."""

    text: str = ""


@dataclass
class ClonedVoice(ApiModel):
    """Result of cloning a voice."""

    voice_id: str = ""


@dataclass
class Voice:
    """A voice that can be used for speech synthesis."""

    voice_id: str = ""
    name: str = ""
    is_system_voice: bool = False
    language_code: str = ""
    language_name: str = ""
    preview_text: str = ""
    preview_audio: str = ""
    available_training_times: int = 0
    create_time: int = 0
    update_time: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Voice:
        return cls(
            voice_id=data.get("voice_id") or "",
            name=data.get("name") or "",
            is_system_voice=bool(data.get("is_system_voice")),
            language_code=data.get("language_code") or "",
            language_name=data.get("language_name") or "",
            preview_text=data.get("preview_text") or "",
            preview_audio=data.get("preview_audio") or "",
            available_training_times=int(data.get("available_training_times") or 0),
            create_time=int(data.get("create_time") or 0),
            update_time=int(data.get("update_time") or 0),
        )


class AudioRooms:
    """Real-time audio rooms."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def create(
        self,
        bot_id: str,
        conversation_id: str | None = None,
        voice_id: str | None = None,
        uid: str | None = None,
        config: RoomConfig | None = None,
    ) -> AudioRoom:
        """Create a room in which a user can talk to the bot."""
        body: dict[str, Any] = {"bot_id": bot_id}
        if conversation_id:
            body["conversation_id"] = conversation_id
        if voice_id:
            body["voice_id"] = voice_id
        if uid:
            body["uid"] = uid
        if config is not None:
            body["config"] = config.to_dict()
        response = self._core.request("POST", "/v1/audio/rooms", body)
        data = _data(response)
        room = AudioRoom(
            room_id=data.get("room_id") or "",
            app_id=data.get("app_id") or "",
            token=data.get("token") or "",
            uid=data.get("uid") or "",
        )
        room.http_response = response
        return room


class AudioSpeech:
    """Text-to-speech synthesis."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def create(
        self,
        input: str,
        voice_id: str,
        response_format: AudioFormat | str | None = None,
        speed: float | None = None,
    ) -> SpeechResult:
        """Synthesise ``input`` with the given voice."""
        body = {
            "input": input,
            "voice_id": voice_id,
            "response_format": _wire(response_format),
            "speed": speed,
        }
        response = self._core.raw_request("POST", "/v1/audio/speech", body)
        result = SpeechResult(data=response.content)
        result.http_response = response
        return result


class AudioTranscriptions:
    """Speech-to-text recognition."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def create(self, audio: BinaryIO | bytes, filename: str) -> Transcription:
        """Upload an audio file and return the recognised text."""
        response = self._core.upload_file("/v1/audio/transcriptions", audio, filename)
        result = Transcription(text=_data(response).get("text") or "")
        result.http_response = response
        return result


class AudioVoices:
    """Voice cloning and listing."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def clone(
        self,
        voice_name: str,
        file: BinaryIO | bytes | None = None,
        audio_format: AudioFormat | str = "",
        language: LanguageCode | str | None = None,
        voice_id: str | None = None,
        preview_text: str | None = None,
        text: str | None = None,
        space_id: str | None = None,
        description: str | None = None,
    ) -> ClonedVoice:
        """Clone a voice from a sample recording."""
        if file is None:
            raise ValueError("file is required")
        fields: dict[str, str] = {
            "voice_name": voice_name,
            "audio_format": str(_wire(audio_format)),
        }
        optional = {
            "language": _wire(language),
            "voice_id": voice_id,
            "preview_text": preview_text,
            "text": text,
            "description": description,
            "space_id": space_id,
        }
        fields.update({key: str(value) for key, value in optional.items() if value is not None})
        response = self._core.upload_file("/v1/audio/voices/clone", file, voice_name, fields)
        result = ClonedVoice(voice_id=_data(response).get("voice_id") or "")
        result.http_response = response
        return result

    def list(
        self,
        filter_system_voice: bool = False,
        page_num: int = 0,
        page_size: int = 0,
    ) -> Page[Voice]:
        """List available voices, one page at a time."""
        page_size = page_size or 20
        page_num = page_num or 1

        def fetch(num: int, size: int) -> tuple[list[Voice], bool, int, str]:
            response = self._core.request(
                "GET",
                "/v1/audio/voices",
                params={
                    "page_num": str(num),
                    "page_size": str(size),
                    "filter_system_voice": "true" if filter_system_voice else "false",
                },
            )
            voices = [Voice.from_dict(item) for item in _data(response).get("voice_list") or []]
            return voices, len(voices) >= size, 0, response.log_id()

        return Page(fetch, page_num, page_size)


class Audio:
    """Entry point to all audio endpoints."""

    def __init__(self, core: Core) -> None:
        self.rooms = AudioRooms(core)
        self.speech = AudioSpeech(core)
        self.voices = AudioVoices(core)
        self.transcriptions = AudioTranscriptions(core)