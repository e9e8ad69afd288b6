"""Assistant data types, query strings and resource paths."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import quote, urlencode

from chatwire.chat import FunctionDefinition

ASSISTANTS_PATH = "/assistants"
ASSISTANT_FILES_SEGMENT = "/files"


class AssistantToolType(str, Enum):
    CODE_INTERPRETER = "code_interpreter"
    RETRIEVAL = "retrieval"
    FUNCTION = "function"
    FILE_SEARCH = "file_search"


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"cannot decode {what} from {type(data).__name__}")
    return data


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return value


def list_query(limit=None, order=None, after=None, before=None) -> str:
    """Build the query string for list calls, or "" when nothing is set."""
    values: dict[str, str] = {}
    if limit is not None:
        values["limit"] = str(int(limit))
    if order is not None:
        values["order"] = order
    if after is not None:
        values["after"] = after
    if before is not None:
        values["before"] = before
    if not values:
        return ""
    return "?" + urlencode(sorted(values.items()))


def assistant_path(assistant_id: str = "", file_id: str | None = None) -> str:
    """Return the resource path for assistants.

    With no assistant id the collection path is returned.  A file id of
    None addresses the assistant itself, "" its file collection, and any
    other value a single file.
    """
    if not assistant_id:
        if file_id is not None:
            raise ValueError("a file path needs an assistant id")
        return ASSISTANTS_PATH
    path = f"{ASSISTANTS_PATH}/{assistant_id}"
    if file_id is None:
        return path
    path += ASSISTANT_FILES_SEGMENT
    if file_id:
        path += f"/{file_id}"
    return path


@dataclass
class AssistantTool:
    type: str = ""
    function: FunctionDefinition | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": _plain(self.type)}
        if self.function is not None:
            out["function"] = self.function.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssistantTool:
        data = _mapping(data, "assistant tool")
        function = data.get("function")
        return cls(
            type=data.get("type") or "",
            function=FunctionDefinition.from_dict(function) if function is not None else None,
        )


@dataclass
class AssistantToolFileSearch:
    vector_store_ids: list[str] | None = None


@dataclass
class AssistantToolCodeInterpreter:
    file_ids: list[str] | None = None


@dataclass
class AssistantToolResource:
    file_search: AssistantToolFileSearch | None = None
    code_interpreter: AssistantToolCodeInterpreter | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.file_search is not None:
            out["file_search"] = {"vector_store_ids": self.file_search.vector_store_ids}
        if self.code_interpreter is not None:
            out["code_interpreter"] = {"file_ids": self.code_interpreter.file_ids}
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssistantToolResource:
        data = _mapping(data, "tool resources")
        search = data.get("file_search")
        code = data.get("code_interpreter")
        return cls(
            file_search=(
                AssistantToolFileSearch(vector_store_ids=_mapping(search, "file search").get("vector_store_ids"))
                if search is not None
                else None
            ),
            code_interpreter=(
                AssistantToolCodeInterpreter(file_ids=_mapping(code, "code interpreter").get("file_ids"))
                if code is not None
                else None
            ),
        )


def _tools_from(value: Any) -> list[AssistantTool] | None:
    if value is None:
        return None
    return [AssistantTool.from_dict(t) for t in value]


def _resources_from(value: Any) -> AssistantToolResource | None:
    return AssistantToolResource.from_dict(value) if value is not None else None


@dataclass
class Assistant:
    id: str = ""
    object: str = ""
    created_at: int = 0
    name: str | None = None
    description: str | None = None
    model: str = ""
    instructions: str | None = None
    tools: list[AssistantTool] | None = None
    tool_resources: AssistantToolResource | None = None
    file_ids: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    temperature: float | None = None
    top_p: float | None = None
    response_format: Any = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "object": self.object, "created_at": self.created_at}
        if self.name is not None:
            out["name"] = self.name
        if self.description is not None:
            out["description"] = self.description
        out["model"] = self.model
        if self.instructions is not None:
            out["instructions"] = self.instructions
        out["tools"] = None if self.tools is None else [t.to_dict() for t in self.tools]
        if self.tool_resources is not None:
            out["tool_resources"] = self.tool_resources.to_dict()
        if self.file_ids:
            out["file_ids"] = list(self.file_ids)
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        if self.temperature is not None:
            out["temperature"] = self.temperature
        if self.top_p is not None:
            out["top_p"] = self.top_p
        if self.response_format is not None:
            out["response_format"] = _plain(self.response_format)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Assistant:
        data = _mapping(data, "assistant")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            name=data.get("name"),
            description=data.get("description"),
            model=data.get("model") or "",
            instructions=data.get("instructions"),
            tools=_tools_from(data.get("tools")),
            tool_resources=_resources_from(data.get("tool_resources")),
            file_ids=list(data.get("file_ids") or []),
            metadata=dict(data.get("metadata") or {}),
            temperature=data.get("temperature"),
            top_p=data.get("top_p"),
            response_format=data.get("response_format"),
        )


@dataclass
class AssistantRequest:
    """Parameters for creating or modifying an assistant.

    ``tools`` left as None leaves the assistant's tools unchanged; an empty
    list removes them all; a populated list replaces them.
    """

    model: str = ""
    name: str | None = None
    description: str | None = None
    instructions: str | None = None
    tools: list[AssistantTool] | None = None
    file_ids: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    tool_resources: AssistantToolResource | None = None
    response_format: Any = None
    temperature: float | None = None
    top_p: float | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.tools is not None:
            out["tools"] = [t.to_dict() for t in self.tools]
        out["model"] = self.model
        if self.name is not None:
            out["name"] = self.name
        if self.description is not None:
            out["description"] = self.description
        if self.instructions is not None:
            out["instructions"] = self.instructions
        if self.file_ids:
            out["file_ids"] = list(self.file_ids)
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        if self.tool_resources is not None:
            out["tool_resources"] = self.tool_resources.to_dict()
        if self.response_format is not None:
            out["response_format"] = _plain(self.response_format)
        if self.temperature is not None:
            out["temperature"] = self.temperature
        if self.top_p is not None:
            out["top_p"] = self.top_p
        return out


@dataclass
class AssistantsList:
    assistants: list[Assistant] = field(default_factory=list)
    last_id: str | None = None
    first_id: str | None = None
    has_more: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssistantsList:
        data = _mapping(data, "assistants list")
        return cls(
            assistants=[Assistant.from_dict(a) for a in data.get("data") or []],
            last_id=data.get("last_id"),
            first_id=data.get("first_id"),
            has_more=bool(data.get("has_more")),
        )


@dataclass
class AssistantDeleteResponse:
    id: str = ""
    object: str = ""
    deleted: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssistantDeleteResponse:
        data = _mapping(data, "delete response")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            deleted=bool(data.get("deleted")),
        )


@dataclass
class AssistantFile:
    id: str = ""
    object: str = ""
    created_at: int = 0
    assistant_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "object": self.object,
            "created_at": self.created_at,
            "assistant_id": self.assistant_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssistantFile:
        data = _mapping(data, "assistant file")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            assistant_id=data.get("assistant_id") or "",
        )


@dataclass
class AssistantFileRequest:
    file_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"file_id": self.file_id}


@dataclass
class AssistantFilesList:
    assistant_files: list[AssistantFile] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssistantFilesList:
        data = _mapping(data, "assistant files list")
        return cls(assistant_files=[AssistantFile.from_dict(f) for f in data.get("data") or []])


__all__ = [
    "AssistantToolType",
    "AssistantTool",
    "AssistantToolFileSearch",
    "AssistantToolCodeInterpreter",
    "AssistantToolResource",
    "Assistant",
    "AssistantRequest",
    "AssistantsList",
    "AssistantDeleteResponse",
    "AssistantFile",
    "AssistantFileRequest",
    "AssistantFilesList",
    "list_query",
    "assistant_path",
    "quote",
]