"""Streamed chat completion chunks and their JSON wire form."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from chatwire.chat import (
    ContentFilterResults,
    FunctionCall,
    PromptAnnotation,
    PromptFilterResult,
    ToolCall,
)


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"cannot decode {what} from {type(data).__name__}")
    return data


def _int_list(value: Any) -> list[int] | None:
    if value is None:
        return None
    return [int(v) for v in value]


@dataclass
class ChatCompletionStreamChoiceDelta:
    content: str = ""
    reasoning_content: str = ""
    role: str = ""
    function_call: FunctionCall | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    refusal: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ChatCompletionStreamChoiceDelta:
        if data is None:
            return cls()
        data = _mapping(data, "stream delta")
        function_call = data.get("function_call")
        return cls(
            content=data.get("content") or "",
            reasoning_content=data.get("reasoning_content") or "",
            role=data.get("role") or "",
            function_call=FunctionCall.from_dict(function_call) if function_call is not None else None,
            tool_calls=[ToolCall.from_dict(c) for c in data.get("tool_calls") or []],
            refusal=data.get("refusal") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.content:
            out["content"] = self.content
        if self.reasoning_content:
            out["reasoning_content"] = self.reasoning_content
        if self.role:
            out["role"] = self.role
        if self.function_call is not None:
            out["function_call"] = self.function_call.to_dict()
        if self.tool_calls:
            out["tool_calls"] = [c.to_dict() for c in self.tool_calls]
        if self.refusal:
            out["refusal"] = self.refusal
        return out


@dataclass
class ChatCompletionTokenLogprobTopLogprob:
    token: str = ""
    bytes: list[int] | None = None
    logprob: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatCompletionTokenLogprobTopLogprob:
        data = _mapping(data, "top logprob")
        return cls(
            token=data.get("token") or "",
            bytes=_int_list(data.get("bytes")),
            logprob=data.get("logprob") or 0.0,
        )


@dataclass
class ChatCompletionTokenLogprob:
    token: str = ""
    bytes: list[int] | None = None
    logprob: float = 0.0
    top_logprobs: list[ChatCompletionTokenLogprobTopLogprob] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatCompletionTokenLogprob:
        data = _mapping(data, "token logprob")
        top = data.get("top_logprobs")
        return cls(
            token=data.get("token") or "",
            bytes=_int_list(data.get("bytes")),
            logprob=data.get("logprob") or 0.0,
            top_logprobs=(
                [ChatCompletionTokenLogprobTopLogprob.from_dict(t) for t in top] if top is not None else None
            ),
        )


@dataclass
class ChatCompletionStreamChoiceLogprobs:
    content: list[ChatCompletionTokenLogprob] | None = None
    refusal: list[ChatCompletionTokenLogprob] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatCompletionStreamChoiceLogprobs:
        data = _mapping(data, "stream logprobs")
        content = data.get("content")
        refusal = data.get("refusal")
        return cls(
            content=[ChatCompletionTokenLogprob.from_dict(c) for c in content] if content is not None else None,
            refusal=[ChatCompletionTokenLogprob.from_dict(r) for r in refusal] if refusal is not None else None,
        )


@dataclass
class ChatCompletionStreamChoice:
    index: int = 0
    delta: ChatCompletionStreamChoiceDelta = field(default_factory=ChatCompletionStreamChoiceDelta)
    logprobs: ChatCompletionStreamChoiceLogprobs | None = None
    finish_reason: str = ""
    content_filter_results: ContentFilterResults = field(default_factory=ContentFilterResults)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatCompletionStreamChoice:
        data = _mapping(data, "stream choice")
        logprobs = data.get("logprobs")
        return cls(
            index=data.get("index") or 0,
            delta=ChatCompletionStreamChoiceDelta.from_dict(data.get("delta")),
            logprobs=ChatCompletionStreamChoiceLogprobs.from_dict(logprobs) if logprobs is not None else None,
            finish_reason=data.get("finish_reason") or "",
            content_filter_results=ContentFilterResults.from_dict(data.get("content_filter_results")),
        )


@dataclass
class ChatCompletionStreamResponse:
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[ChatCompletionStreamChoice] = field(default_factory=list)
    system_fingerprint: str = ""
    prompt_annotations: list[PromptAnnotation] = field(default_factory=list)
    prompt_filter_results: list[PromptFilterResult] = field(default_factory=list)
    # Present only on the final chunk when usage reporting was requested.
    usage: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatCompletionStreamResponse:
        data = _mapping(data, "stream response")
        usage = data.get("usage")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created=data.get("created") or 0,
            model=data.get("model") or "",
            choices=[ChatCompletionStreamChoice.from_dict(c) for c in data.get("choices") or []],
            system_fingerprint=data.get("system_fingerprint") or "",
            prompt_annotations=[PromptAnnotation.from_dict(p) for p in data.get("prompt_annotations") or []],
            prompt_filter_results=[
                PromptFilterResult.from_dict(p) for p in data.get("prompt_filter_results") or []
            ],
            usage=dict(_mapping(usage, "usage")) if usage is not None else None,
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> ChatCompletionStreamResponse:
        """Decode one chunk from the JSON text of a server-sent event."""
        return cls.from_dict(json.loads(text))