"""Batch job requests, JSONL upload files and batch responses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import urlencode

from chatwire.chat import ChatCompletionRequest, to_json

BATCHES_PATH = "/batches"
DEFAULT_BATCH_FILE_NAME = "@batchinput.jsonl"
DEFAULT_COMPLETION_WINDOW = "24h"


class BatchEndpoint(str, Enum):
    CHAT_COMPLETIONS = "/v1/chat/completions"
    COMPLETIONS = "/v1/completions"
    EMBEDDINGS = "/v1/embeddings"


def _text(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"cannot decode {what} from {type(data).__name__}")
    return data


def list_batch_query(after=None, limit=None) -> str:
    """Build the query string for listing batches, or "" when nothing is set."""
    values: dict[str, str] = {}
    if limit is not None:
        values["limit"] = str(int(limit))
    if after is not None:
        values["after"] = after
    if not values:
        return ""
    return "?" + urlencode(sorted(values.items()))


@dataclass
class BatchLineItem:
    """One request line of a batch input file."""

    custom_id: str
    body: Any
    url: str
    method: str = "POST"

    def to_dict(self) -> dict[str, Any]:
        body = self.body.to_dict() if hasattr(self.body, "to_dict") else self.body
        return {
            "custom_id": self.custom_id,
            "body": body,
            "method": self.method,
            "url": _text(self.url),
        }

    def marshal(self) -> bytes:
        return to_json(self.to_dict()).encode("utf-8")


@dataclass
class BatchRequestCounts:
    total: int = 0
    completed: int = 0
    failed: int = 0


@dataclass
class BatchErrorDetail:
    code: str = ""
    message: str = ""
    param: str | None = None
    line: int | None = None


def _int_or_none(value: Any) -> int | None:
    return None if value is None else int(value)


@dataclass
class Batch:
    id: str = ""
    object: str = ""
    endpoint: str = ""
    errors_object: str = ""
    errors: list[BatchErrorDetail] | None = None
    input_file_id: str = ""
    completion_window: str = ""
    status: str = ""
    output_file_id: str | None = None
    error_file_id: str | None = None
    created_at: int = 0
    in_progress_at: int | None = None
    expires_at: int | None = None
    finalizing_at: int | None = None
    completed_at: int | None = None
    failed_at: int | None = None
    expired_at: int | None = None
    cancelling_at: int | None = None
    cancelled_at: int | None = None
    request_counts: BatchRequestCounts = field(default_factory=BatchRequestCounts)
    metadata: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Batch:
        data = _mapping(data, "batch")
        raw_errors = data.get("errors")
        errors_object = ""
        errors = None
        if raw_errors is not None:
            raw_errors = _mapping(raw_errors, "batch errors")
            errors_object = raw_errors.get("object") or ""
            errors = [
                BatchErrorDetail(
                    code=e.get("code") or "",
                    message=e.get("message") or "",
                    param=e.get("param"),
                    line=_int_or_none(e.get("line")),
                )
                for e in (_mapping(item, "batch error") for item in raw_errors.get("data") or [])
            ]
        counts = _mapping(data.get("request_counts") or {}, "request counts")
        metadata = data.get("metadata")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            endpoint=data.get("endpoint") or "",
            errors_object=errors_object,
            errors=errors,
            input_file_id=data.get("input_file_id") or "",
            completion_window=data.get("completion_window") or "",
            status=data.get("status") or "",
            output_file_id=data.get("output_file_id"),
            error_file_id=data.get("error_file_id"),
            created_at=data.get("created_at") or 0,
            in_progress_at=_int_or_none(data.get("in_progress_at")),
            expires_at=_int_or_none(data.get("expires_at")),
            finalizing_at=_int_or_none(data.get("finalizing_at")),
            completed_at=_int_or_none(data.get("completed_at")),
            failed_at=_int_or_none(data.get("failed_at")),
            expired_at=_int_or_none(data.get("expired_at")),
            cancelling_at=_int_or_none(data.get("cancelling_at")),
            cancelled_at=_int_or_none(data.get("cancelled_at")),
            request_counts=BatchRequestCounts(
                total=counts.get("total") or 0,
                completed=counts.get("completed") or 0,
                failed=counts.get("failed") or 0,
            ),
            metadata=dict(metadata) if metadata is not None else None,
        )


@dataclass
class CreateBatchRequest:
    input_file_id: str = ""
    endpoint: str = ""
    completion_window: str = ""
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "input_file_id": self.input_file_id,
            "endpoint": _text(self.endpoint),
            "completion_window": self.completion_window or DEFAULT_COMPLETION_WINDOW,
            "metadata": self.metadata,
        }


@dataclass
class UploadBatchFileRequest:
    file_name: str = DEFAULT_BATCH_FILE_NAME
    lines: list[BatchLineItem] = field(default_factory=list)

    def marshal_jsonl(self) -> bytes:
        return b"\n".join(line.marshal() for line in self.lines)

    def add_chat_completion(self, custom_id: str, body: ChatCompletionRequest) -> None:
        self.lines.append(BatchLineItem(custom_id, body, BatchEndpoint.CHAT_COMPLETIONS))

    def add_completion(self, custom_id: str, body: Any) -> None:
        self.lines.append(BatchLineItem(custom_id, body, BatchEndpoint.COMPLETIONS))

    def add_embedding(self, custom_id: str, body: Any) -> None:
        self.lines.append(BatchLineItem(custom_id, body, BatchEndpoint.EMBEDDINGS))


@dataclass
class CreateBatchWithUploadFileRequest(UploadBatchFileRequest):
    endpoint: str = ""
    completion_window: str = ""
    metadata: dict[str, Any] | None = None

    def create_batch_request(self, input_file_id: str) -> CreateBatchRequest:
        """Return the batch request to send once the input file is uploaded."""
        return CreateBatchRequest(
            input_file_id=input_file_id,
            endpoint=self.endpoint,
            completion_window=self.completion_window,
            metadata=self.metadata,
        )


@dataclass
class ListBatchResponse:
    object: str = ""
    data: list[Batch] = field(default_factory=list)
    first_id: str = ""
    last_id: str = ""
    has_more: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ListBatchResponse:
        data = _mapping(data, "batch list")
        return cls(
            object=data.get("object") or "",
            data=[Batch.from_dict(b) for b in data.get("data") or []],
            first_id=data.get("first_id") or "",
            last_id=data.get("last_id") or "",
            has_more=bool(data.get("has_more")),
        )