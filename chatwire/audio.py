"""Audio transcription and translation requests, multipart forms and responses."""

from __future__ import annotations

import os
import secrets
import shutil
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, BinaryIO

WHISPER_1 = "whisper-1"


class AudioResponseFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    SRT = "srt"
    VERBOSE_JSON = "verbose_json"
    VTT = "vtt"


class TranscriptionTimestampGranularity(str, Enum):
    WORD = "word"
    SEGMENT = "segment"


class AudioFormError(Exception):
    """Raised when the multipart form for an audio request cannot be built."""


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class FormBuilder:
    """Writes a multipart/form-data body to a binary stream."""

    def __init__(self, out: BinaryIO, boundary: str | None = None) -> None:
        self.out = out
        self.boundary = boundary or secrets.token_hex(30)
        self.content_type = f"multipart/form-data; boundary={self.boundary}"
        self._parts = 0
        self._closed = False

    def _begin_part(self, headers: list[str]) -> None:
        if self._closed:
            raise ValueError("form is already closed")
        prefix = "\r\n" if self._parts else ""
        self._parts += 1
        head = f"{prefix}--{self.boundary}\r\n" + "".join(f"{h}\r\n" for h in headers) + "\r\n"
        self.out.write(head.encode("utf-8"))

    def create_form_file(self, fieldname: str, file: BinaryIO) -> None:
        """Add a file part named after the base name of an open file."""
        filename = os.path.basename(str(getattr(file, "name", "") or ""))
        self.create_form_file_reader(fieldname, file, filename)

    def create_form_file_reader(self, fieldname: str, reader: BinaryIO, filename: str) -> None:
        """Add a file part whose contents come from a binary reader."""
        self._begin_part(
            [
                f'Content-Disposition: form-data; name="{_escape(fieldname)}"; '
                f'filename="{_escape(filename)}"',
                "Content-Type: application/octet-stream",
            ]
        )
        shutil.copyfileobj(reader, self.out)

    def write_field(self, fieldname: str, value: str) -> None:
        """Add a plain text field."""
        self._begin_part([f'Content-Disposition: form-data; name="{_escape(fieldname)}"'])
        self.out.write(value.encode("utf-8"))

    def close(self) -> None:
        """Write the closing boundary."""
        if self._closed:
            return
        prefix = "\r\n" if self._parts else ""
        self.out.write(f"{prefix}--{self.boundary}--\r\n".encode("utf-8"))
        self._closed = True


@dataclass
class AudioRequest:
    model: str = ""
    # An existing file, or the file name to report for the contents of reader.
    file_path: str = ""
    reader: BinaryIO | None = None
    prompt: str = ""
    temperature: float = 0.0
    language: str = ""
    format: str = ""
    timestamp_granularities: list[str] = field(default_factory=list)

    def has_json_response(self) -> bool:
        return _text(self.format) in ("", AudioResponseFormat.JSON.value, AudioResponseFormat.VERBOSE_JSON.value)


@dataclass
class AudioSegment:
    id: int = 0
    seek: int = 0
    start: float = 0.0
    end: float = 0.0
    text: str = ""
    tokens: list[int] = field(default_factory=list)
    temperature: float = 0.0
    avg_logprob: float = 0.0
    compression_ratio: float = 0.0
    no_speech_prob: float = 0.0
    transient: bool = False


@dataclass
class AudioWord:
    word: str = ""
    start: float = 0.0
    end: float = 0.0


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"cannot decode {what} from {type(data).__name__}")
    return data


@dataclass
class AudioResponse:
    task: str = ""
    language: str = ""
    duration: float = 0.0
    segments: list[AudioSegment] = field(default_factory=list)
    words: list[AudioWord] = field(default_factory=list)
    text: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AudioResponse:
        data = _mapping(data, "audio response")
        segments = []
        for raw in data.get("segments") or []:
            raw = _mapping(raw, "audio segment")
            segments.append(
                AudioSegment(
                    id=raw.get("id") or 0,
                    seek=raw.get("seek") or 0,
                    start=raw.get("start") or 0.0,
                    end=raw.get("end") or 0.0,
                    text=raw.get("text") or "",
                    tokens=list(raw.get("tokens") or []),
                    temperature=raw.get("temperature") or 0.0,
                    avg_logprob=raw.get("avg_logprob") or 0.0,
                    compression_ratio=raw.get("compression_ratio") or 0.0,
                    no_speech_prob=raw.get("no_speech_prob") or 0.0,
                    transient=bool(raw.get("transient")),
                )
            )
        words = []
        for raw in data.get("words") or []:
            raw = _mapping(raw, "audio word")
            words.append(
                AudioWord(word=raw.get("word") or "", start=raw.get("start") or 0.0, end=raw.get("end") or 0.0)
            )
        return cls(
            task=data.get("task") or "",
            language=data.get("language") or "",
            duration=data.get("duration") or 0.0,
            segments=segments,
            words=words,
            text=data.get("text") or "",
        )

    @classmethod
    def from_text(cls, text: str) -> AudioResponse:
        """Build a response from a plain-text (text, srt, vtt) reply."""
        return cls(text=text)


def audio_endpoint_path(endpoint: str) -> str:
    """Return the path of an audio endpoint such as "transcriptions"."""
    return f"/audio/{endpoint}"


def create_file_field(request: AudioRequest, builder: FormBuilder) -> None:
    """Add the "file" part from the request's reader or from its file path."""
    if request.reader is not None:
        try:
            builder.create_form_file_reader("file", request.reader, request.file_path)
        except Exception as err:
            raise AudioFormError(f"creating form using reader: {err}") from err
        return

    try:
        f = open(request.file_path, "rb")
    except OSError as err:
        raise AudioFormError(f"opening audio file: {err}") from err
    with f:
        try:
            builder.create_form_file("file", f)
        except Exception as err:
            raise AudioFormError(f"creating form file: {err}") from err


def _write(builder: FormBuilder, fieldname: str, value: str, label: str) -> None:
    try:
        builder.write_field(fieldname, value)
    except Exception as err:
        raise AudioFormError(f"writing {label}: {err}") from err


def audio_multipart_form(request: AudioRequest, builder: FormBuilder) -> None:
    """Fill a form with the audio file and the request's parameters, then close it."""
    create_file_field(request, builder)
    _write(builder, "model", request.model, "model name")
    if request.prompt:
        _write(builder, "prompt", request.prompt, "prompt")
    if request.format:
        _write(builder, "response_format", _text(request.format), "format")
    if request.temperature != 0:
        _write(builder, "temperature", f"{request.temperature:.2f}", "temperature")
    if request.language:
        _write(builder, "language", request.language, "language")
    for granularity in request.timestamp_granularities:
        _write(builder, "timestamp_granularities[]", _text(granularity), "timestamp_granularities[]")
    builder.close()