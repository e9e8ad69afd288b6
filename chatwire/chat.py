"""Chat completion data types and their JSON wire form."""

from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ChatMessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"
    TOOL = "tool"
    DEVELOPER = "developer"


class ImageURLDetail(str, Enum):
    HIGH = "high"
    LOW = "low"
    AUTO = "auto"


class ChatMessagePartType(str, Enum):
    TEXT = "text"
    IMAGE_URL = "image_url"


class ToolType(str, Enum):
    FUNCTION = "function"


class ChatCompletionResponseFormatType(str, Enum):
    JSON_OBJECT = "json_object"
    JSON_SCHEMA = "json_schema"
    TEXT = "text"


class FinishReason(str, Enum):
    STOP = "stop"
    LENGTH = "length"
    FUNCTION_CALL = "function_call"
    TOOL_CALLS = "tool_calls"
    CONTENT_FILTER = "content_filter"
    NULL = "null"


class ChatError(ValueError):
    """Base class for errors raised while building chat payloads."""


class ContentFieldsMisusedError(ChatError):
    """Raised when a message sets both text content and multi-part content."""

    def __init__(self) -> None:
        super().__init__("can't use both Content and MultiContent properties simultaneously")


def _text(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _plain(value: Any) -> Any:
    """Turn a value into plain JSON-compatible Python data."""
    if isinstance(value, Enum):
        return value.value
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, Mapping):
        return {str(_text(k)): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _sorted_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _sorted_keys(value[k]) for k in sorted(value)}
    if isinstance(value, list):
        return [_sorted_keys(v) for v in value]
    return value


def _put(out: dict[str, Any], key: str, value: Any) -> None:
    """Add a key only when its value is not empty."""
    if value:
        out[key] = _plain(value)


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"cannot decode {what} from {type(data).__name__}")
    return data


def _decode_bytes(value: Any) -> bytes | None:
    if value is None:
        return None
    if isinstance(value, str):
        return base64.b64decode(value)
    return bytes(value)


def to_json(value: Any) -> str:
    """Serialise a value (objects, lists, dicts) to compact JSON."""
    return json.dumps(_plain(value), separators=(",", ":"), ensure_ascii=False)


@dataclass
class ChatMessageImageURL:
    url: str = ""
    detail: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "url", self.url)
        _put(out, "detail", _text(self.detail))
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatMessageImageURL:
        data = _require_mapping(data, "image url")
        return cls(url=data.get("url") or "", detail=data.get("detail") or "")


@dataclass
class ChatMessagePart:
    type: str = ""
    text: str = ""
    image_url: ChatMessageImageURL | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "type", _text(self.type))
        _put(out, "text", self.text)
        if self.image_url is not None:
            out["image_url"] = self.image_url.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatMessagePart:
        data = _require_mapping(data, "message part")
        image = data.get("image_url")
        return cls(
            type=data.get("type") or "",
            text=data.get("text") or "",
            image_url=ChatMessageImageURL.from_dict(image) if image is not None else None,
        )


@dataclass
class FunctionCall:
    name: str = ""
    arguments: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "name", self.name)
        _put(out, "arguments", self.arguments)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FunctionCall:
        data = _require_mapping(data, "function call")
        return cls(name=data.get("name") or "", arguments=data.get("arguments") or "")


@dataclass
class ToolCall:
    type: str = ""
    function: FunctionCall = field(default_factory=FunctionCall)
    id: str = ""
    index: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.index is not None:
            out["index"] = self.index
        _put(out, "id", self.id)
        out["type"] = _text(self.type)
        out["function"] = self.function.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ToolCall:
        data = _require_mapping(data, "tool call")
        function = data.get("function")
        return cls(
            type=data.get("type") or "",
            function=FunctionCall.from_dict(function) if function is not None else FunctionCall(),
            id=data.get("id") or "",
            index=data.get("index"),
        )


@dataclass
class FunctionDefinition:
    name: str = ""
    description: str = ""
    strict: bool = False
    parameters: Any = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name}
        _put(out, "description", self.description)
        _put(out, "strict", self.strict)
        out["parameters"] = _plain(self.parameters)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FunctionDefinition:
        data = _require_mapping(data, "function definition")
        return cls(
            name=data.get("name") or "",
            description=data.get("description") or "",
            strict=bool(data.get("strict")),
            parameters=data.get("parameters"),
        )


@dataclass
class Tool:
    type: str = ToolType.FUNCTION
    function: FunctionDefinition | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": _text(self.type)}
        if self.function is not None:
            out["function"] = self.function.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Tool:
        data = _require_mapping(data, "tool")
        function = data.get("function")
        return cls(
            type=data.get("type") or "",
            function=FunctionDefinition.from_dict(function) if function is not None else None,
        )


@dataclass
class ToolFunction:
    name: str = ""


@dataclass
class ToolChoice:
    type: str = ToolType.FUNCTION
    function: ToolFunction = field(default_factory=ToolFunction)

    def to_dict(self) -> dict[str, Any]:
        return {"type": _text(self.type), "function": {"name": self.function.name}}


@dataclass
class ChatCompletionResponseFormatJSONSchema:
    name: str = ""
    description: str = ""
    schema: Any = None
    strict: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name}
        _put(out, "description", self.description)
        out["schema"] = _plain(self.schema)
        out["strict"] = self.strict
        return out


@dataclass
class ChatCompletionResponseFormat:
    type: str = ""
    json_schema: ChatCompletionResponseFormatJSONSchema | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "type", _text(self.type))
        if self.json_schema is not None:
            out["json_schema"] = self.json_schema.to_dict()
        return out


def _response_format_from(data: Mapping[str, Any]) -> ChatCompletionResponseFormat:
    data = _require_mapping(data, "response format")
    schema = data.get("json_schema")
    json_schema = None
    if schema is not None:
        schema = _require_mapping(schema, "json schema")
        json_schema = ChatCompletionResponseFormatJSONSchema(
            name=schema.get("name") or "",
            description=schema.get("description") or "",
            schema=schema.get("schema"),
            strict=bool(schema.get("strict")),
        )
    return ChatCompletionResponseFormat(type=data.get("type") or "", json_schema=json_schema)


@dataclass
class StreamOptions:
    include_usage: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put(out, "include_usage", self.include_usage)
        return out


@dataclass
class ChatCompletionMessage:
    role: str = ""
    content: str = ""
    reasoning_content: str = ""
    refusal: str = ""
    multi_content: list[ChatMessagePart] | None = None
    name: str = ""
    function_call: FunctionCall | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    tool_call_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        if self.content and self.multi_content is not None:
            raise ContentFieldsMisusedError()
        out: dict[str, Any] = {"role": _text(self.role)}
        if self.multi_content:
            out["content"] = [part.to_dict() for part in self.multi_content]
        else:
            _put(out, "content", self.content)
        _put(out, "reasoning_content", self.reasoning_content)
        _put(out, "refusal", self.refusal)
        _put(out, "name", self.name)
        if self.function_call is not None:
            out["function_call"] = self.function_call.to_dict()
        _put(out, "tool_calls", self.tool_calls)
        _put(out, "tool_call_id", self.tool_call_id)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatCompletionMessage:
        data = _require_mapping(data, "chat message")
        raw_content = data.get("content")
        content = ""
        multi_content = None
        if isinstance(raw_content, list):
            multi_content = [ChatMessagePart.from_dict(part) for part in raw_content]
        elif isinstance(raw_content, str):
            content = raw_content
        elif raw_content is not None:
            raise TypeError(f"cannot decode message content from {type(raw_content).__name__}")
        function_call = data.get("function_call")
        return cls(
            role=data.get("role") or "",
            content=content,
            reasoning_content=data.get("reasoning_content") or "",
            refusal=data.get("refusal") or "",
            multi_content=multi_content,
            name=data.get("name") or "",
            function_call=FunctionCall.from_dict(function_call) if function_call is not None else None,
            tool_calls=[ToolCall.from_dict(c) for c in data.get("tool_calls") or []],
            tool_call_id=data.get("tool_call_id") or "",
        )


@dataclass
class ChatCompletionRequest:
    model: str = ""
    messages: list[ChatCompletionMessage] | None = None
    max_tokens: int = 0
    max_completion_tokens: int = 0
    temperature: float = 0.0
    top_p: float = 0.0
    n: int = 0
    stream: bool = False
    stop: list[str] = field(default_factory=list)
    presence_penalty: float = 0.0
    response_format: ChatCompletionResponseFormat | None = None
    seed: int | None = None
    frequency_penalty: float = 0.0
    logit_bias: dict[str, int] = field(default_factory=dict)
    logprobs: bool = False
    top_logprobs: int = 0
    user: str = ""
    functions: list[FunctionDefinition] = field(default_factory=list)
    function_call: Any = None
    tools: list[Tool] = field(default_factory=list)
    tool_choice: Any = None
    stream_options: StreamOptions | None = None
    parallel_tool_calls: Any = None
    store: bool = False
    reasoning_effort: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    extra_body: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"model": self.model, "messages": _plain(self.messages)}
        _put(out, "max_tokens", self.max_tokens)
        _put(out, "max_completion_tokens", self.max_completion_tokens)
        _put(out, "temperature", self.temperature)
        _put(out, "top_p", self.top_p)
        _put(out, "n", self.n)
        _put(out, "stream", self.stream)
        _put(out, "stop", self.stop)
        _put(out, "presence_penalty", self.presence_penalty)
        if self.response_format is not None:
            out["response_format"] = self.response_format.to_dict()
        if self.seed is not None:
            out["seed"] = self.seed
        _put(out, "frequency_penalty", self.frequency_penalty)
        _put(out, "logit_bias", self.logit_bias)
        _put(out, "logprobs", self.logprobs)
        _put(out, "top_logprobs", self.top_logprobs)
        _put(out, "user", self.user)
        _put(out, "functions", self.functions)
        if self.function_call is not None:
            out["function_call"] = _plain(self.function_call)
        _put(out, "tools", self.tools)
        if self.tool_choice is not None:
            out["tool_choice"] = _plain(self.tool_choice)
        if self.stream_options is not None:
            out["stream_options"] = self.stream_options.to_dict()
        if self.parallel_tool_calls is not None:
            out["parallel_tool_calls"] = _plain(self.parallel_tool_calls)
        _put(out, "store", self.store)
        _put(out, "reasoning_effort", self.reasoning_effort)
        _put(out, "metadata", self.metadata)
        if not self.extra_body:
            return out
        # Extra fields are flattened into the top level; the merged body has sorted keys.
        out.update(_plain(self.extra_body))
        return _sorted_keys(out)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatCompletionRequest:
        data = _require_mapping(data, "chat completion request")
        messages = data.get("messages")
        response_format = data.get("response_format")
        stream_options = data.get("stream_options")
        return cls(
            model=data.get("model") or "",
            messages=(
                [ChatCompletionMessage.from_dict(m) for m in messages] if messages is not None else None
            ),
            max_tokens=data.get("max_tokens") or 0,
            max_completion_tokens=data.get("max_completion_tokens") or 0,
            temperature=data.get("temperature") or 0.0,
            top_p=data.get("top_p") or 0.0,
            n=data.get("n") or 0,
            stream=bool(data.get("stream")),
            stop=list(data.get("stop") or []),
            presence_penalty=data.get("presence_penalty") or 0.0,
            response_format=(
                _response_format_from(response_format) if response_format is not None else None
            ),
            seed=data.get("seed"),
            frequency_penalty=data.get("frequency_penalty") or 0.0,
            logit_bias=dict(data.get("logit_bias") or {}),
            logprobs=bool(data.get("logprobs")),
            top_logprobs=data.get("top_logprobs") or 0,
            user=data.get("user") or "",
            functions=[FunctionDefinition.from_dict(f) for f in data.get("functions") or []],
            function_call=data.get("function_call"),
            tools=[Tool.from_dict(t) for t in data.get("tools") or []],
            tool_choice=data.get("tool_choice"),
            stream_options=(
                StreamOptions(include_usage=bool(stream_options.get("include_usage")))
                if stream_options is not None
                else None
            ),
            parallel_tool_calls=data.get("parallel_tool_calls"),
            store=bool(data.get("store")),
            reasoning_effort=data.get("reasoning_effort") or "",
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass
class SeverityFilter:
    filtered: bool = False
    severity: str = ""

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"filtered": self.filtered}
        _put(out, "severity", self.severity)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> SeverityFilter:
        if data is None:
            return cls()
        data = _require_mapping(data, "severity filter")
        return cls(filtered=bool(data.get("filtered")), severity=data.get("severity") or "")


@dataclass
class DetectionFilter:
    filtered: bool = False
    detected: bool = False

    def _to_dict(self) -> dict[str, Any]:
        return {"filtered": self.filtered, "detected": self.detected}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> DetectionFilter:
        if data is None:
            return cls()
        data = _require_mapping(data, "detection filter")
        return cls(filtered=bool(data.get("filtered")), detected=bool(data.get("detected")))


@dataclass
class ContentFilterResults:
    hate: SeverityFilter = field(default_factory=SeverityFilter)
    self_harm: SeverityFilter = field(default_factory=SeverityFilter)
    sexual: SeverityFilter = field(default_factory=SeverityFilter)
    violence: SeverityFilter = field(default_factory=SeverityFilter)
    jailbreak: DetectionFilter = field(default_factory=DetectionFilter)
    profanity: DetectionFilter = field(default_factory=DetectionFilter)

    def _to_dict(self) -> dict[str, Any]:
        return {
            "hate": self.hate._to_dict(),
            "self_harm": self.self_harm._to_dict(),
            "sexual": self.sexual._to_dict(),
            "violence": self.violence._to_dict(),
            "jailbreak": self.jailbreak._to_dict(),
            "profanity": self.profanity._to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ContentFilterResults:
        if data is None:
            return cls()
        data = _require_mapping(data, "content filter results")
        return cls(
            hate=SeverityFilter.from_dict(data.get("hate")),
            self_harm=SeverityFilter.from_dict(data.get("self_harm")),
            sexual=SeverityFilter.from_dict(data.get("sexual")),
            violence=SeverityFilter.from_dict(data.get("violence")),
            jailbreak=DetectionFilter.from_dict(data.get("jailbreak")),
            profanity=DetectionFilter.from_dict(data.get("profanity")),
        )


@dataclass
class PromptAnnotation:
    prompt_index: int = 0
    content_filter_results: ContentFilterResults = field(default_factory=ContentFilterResults)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PromptAnnotation:
        data = _require_mapping(data, "prompt annotation")
        return cls(
            prompt_index=data.get("prompt_index") or 0,
            content_filter_results=ContentFilterResults.from_dict(data.get("content_filter_results")),
        )


@dataclass
class PromptFilterResult:
    index: int = 0
    content_filter_results: ContentFilterResults = field(default_factory=ContentFilterResults)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PromptFilterResult:
        data = _require_mapping(data, "prompt filter result")
        return cls(
            index=data.get("index") or 0,
            content_filter_results=ContentFilterResults.from_dict(data.get("content_filter_results")),
        )


@dataclass
class TopLogProbs:
    token: str = ""
    logprob: float = 0.0
    bytes: bytes | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"token": self.token, "logprob": self.logprob}
        _put(out, "bytes", self.bytes)
        return out


def _top_logprobs_from(data: Mapping[str, Any]) -> TopLogProbs:
    data = _require_mapping(data, "top logprob")
    return TopLogProbs(
        token=data.get("token") or "",
        logprob=data.get("logprob") or 0.0,
        bytes=_decode_bytes(data.get("bytes")),
    )


@dataclass
class LogProb:
    token: str = ""
    logprob: float = 0.0
    bytes: bytes | None = None
    top_logprobs: list[TopLogProbs] | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"token": self.token, "logprob": self.logprob}
        _put(out, "bytes", self.bytes)
        out["top_logprobs"] = (
            None if self.top_logprobs is None else [t._to_dict() for t in self.top_logprobs]
        )
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LogProb:
        data = _require_mapping(data, "logprob")
        top = data.get("top_logprobs")
        return cls(
            token=data.get("token") or "",
            logprob=data.get("logprob") or 0.0,
            bytes=_decode_bytes(data.get("bytes")),
            top_logprobs=[_top_logprobs_from(t) for t in top] if top is not None else None,
        )


@dataclass
class LogProbs:
    content: list[LogProb] | None = None

    def _to_dict(self) -> dict[str, Any]:
        return {"content": None if self.content is None else [c._to_dict() for c in self.content]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LogProbs:
        data = _require_mapping(data, "logprobs")
        content = data.get("content")
        return cls(content=[LogProb.from_dict(c) for c in content] if content is not None else None)


@dataclass
class ChatCompletionChoice:
    index: int = 0
    message: ChatCompletionMessage = field(default_factory=ChatCompletionMessage)
    finish_reason: str = ""
    logprobs: LogProbs | None = None
    content_filter_results: ContentFilterResults = field(default_factory=ContentFilterResults)

    def to_dict(self) -> dict[str, Any]:
        reason = _text(self.finish_reason)
        out: dict[str, Any] = {
            "index": self.index,
            "message": self.message.to_dict(),
            "finish_reason": None if reason in ("", FinishReason.NULL.value) else reason,
        }
        if self.logprobs is not None:
            out["logprobs"] = self.logprobs._to_dict()
        out["content_filter_results"] = self.content_filter_results._to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatCompletionChoice:
        data = _require_mapping(data, "chat completion choice")
        message = data.get("message")
        logprobs = data.get("logprobs")
        return cls(
            index=data.get("index") or 0,
            message=(
                ChatCompletionMessage.from_dict(message) if message is not None else ChatCompletionMessage()
            ),
            finish_reason=data.get("finish_reason") or "",
            logprobs=LogProbs.from_dict(logprobs) if logprobs is not None else None,
            content_filter_results=ContentFilterResults.from_dict(data.get("content_filter_results")),
        )


@dataclass
class ChatCompletionResponse:
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[ChatCompletionChoice] = field(default_factory=list)
    usage: dict[str, Any] = field(default_factory=dict)
    system_fingerprint: str = ""
    prompt_filter_results: list[PromptFilterResult] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatCompletionResponse:
        data = _require_mapping(data, "chat completion response")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created=data.get("created") or 0,
            model=data.get("model") or "",
            choices=[ChatCompletionChoice.from_dict(c) for c in data.get("choices") or []],
            usage=dict(data.get("usage") or {}),
            system_fingerprint=data.get("system_fingerprint") or "",
            prompt_filter_results=[
                PromptFilterResult.from_dict(p) for p in data.get("prompt_filter_results") or []
            ],
        )