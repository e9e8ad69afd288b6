import json

import pytest

from chatwire.assistant import (
    Assistant,
    AssistantDeleteResponse,
    AssistantFile,
    AssistantFileRequest,
    AssistantFilesList,
    AssistantRequest,
    AssistantsList,
    AssistantTool,
    AssistantToolCodeInterpreter,
    AssistantToolFileSearch,
    AssistantToolResource,
    AssistantToolType,
    assistant_path,
    list_query,
)
from chatwire.chat import FunctionDefinition

ASSISTANT_ID = "asst_abc123"
ASSISTANT_NAME = "Ambrogio"
ASSISTANT_DESCRIPTION = "Ambrogio is a friendly assistant."
ASSISTANT_INSTRUCTIONS = (
    "You are a personal math tutor. \n"
    "When asked a question, write and run Python code to answer the question."
)
FILE_ID = "file-wB6RM6wHdA49HfS2DJ9fEyrH"
MODEL = "gpt-4-turbo-preview"


def _request(tools=None):
    return AssistantRequest(
        model=MODEL,
        name=ASSISTANT_NAME,
        description=ASSISTANT_DESCRIPTION,
        instructions=ASSISTANT_INSTRUCTIONS,
        tools=tools,
    )


def _echo(request):
    """Decode the request body the way the mock server does and answer with an assistant."""
    body = json.loads(json.dumps(request.to_dict()))
    received = Assistant.from_dict(body)
    return Assistant(
        id=ASSISTANT_ID,
        object="assistant",
        created_at=1234567890,
        name=received.name,
        model=received.model,
        description=received.description,
        instructions=received.instructions,
        tools=received.tools,
    )


def test_modify_assistant_no_tools():
    assistant = _echo(_request())
    assert assistant.tools is None
    assert assistant.name == ASSISTANT_NAME
    assert assistant.instructions == ASSISTANT_INSTRUCTIONS


def test_modify_assistant_with_tools():
    assistant = _echo(_request([AssistantTool(type=AssistantToolType.FUNCTION)]))
    assert assistant.tools == [AssistantTool(type="function")]


def test_modify_assistant_empty_tools():
    assistant = _echo(_request([]))
    assert assistant.tools == []


def test_request_tools_field_presence():
    assert "tools" not in _request().to_dict()
    assert _request([]).to_dict()["tools"] == []
    assert list(_request([]).to_dict())[0] == "tools"


def test_request_omits_unset_fields():
    assert AssistantRequest(model=MODEL).to_dict() == {"model": MODEL}


def test_assistant_to_dict_has_null_tools():
    data = Assistant(id=ASSISTANT_ID, object="assistant", created_at=1234567890, model=MODEL).to_dict()
    assert data == {
        "id": ASSISTANT_ID,
        "object": "assistant",
        "created_at": 1234567890,
        "model": MODEL,
        "tools": None,
    }


def test_assistant_round_trip():
    assistant = Assistant(
        id=ASSISTANT_ID,
        object="assistant",
        created_at=1234567890,
        name=ASSISTANT_NAME,
        description=ASSISTANT_DESCRIPTION,
        model=MODEL,
        instructions=ASSISTANT_INSTRUCTIONS,
        tools=[
            AssistantTool(type="function", function=FunctionDefinition(name="calc", parameters={"type": "object"}))
        ],
        tool_resources=AssistantToolResource(
            file_search=AssistantToolFileSearch(vector_store_ids=["vs_1"]),
            code_interpreter=AssistantToolCodeInterpreter(file_ids=[FILE_ID]),
        ),
        metadata={"k": "v"},
        temperature=0.5,
        top_p=1.0,
        response_format="auto",
    )
    assert Assistant.from_dict(json.loads(json.dumps(assistant.to_dict()))) == assistant


def test_list_query_full():
    assert list_query(20, "desc", "asst_abc122", "asst_abc124") == (
        "?after=asst_abc122&before=asst_abc124&limit=20&order=desc"
    )


def test_list_query_empty_and_partial():
    assert list_query() == ""
    assert list_query(limit=5) == "?limit=5"
    assert list_query(order="a b") == "?order=a+b"


@pytest.mark.parametrize(
    "assistant_id, file_id, expected",
    [
        ("", None, "/assistants"),
        (ASSISTANT_ID, None, "/assistants/asst_abc123"),
        (ASSISTANT_ID, "", "/assistants/asst_abc123/files"),
        (ASSISTANT_ID, FILE_ID, "/assistants/asst_abc123/files/file-wB6RM6wHdA49HfS2DJ9fEyrH"),
    ],
)
def test_assistant_path(assistant_id, file_id, expected):
    assert assistant_path(assistant_id, file_id) == expected


def test_assistant_path_file_without_assistant():
    with pytest.raises(ValueError):
        assistant_path("", FILE_ID)


def test_assistants_list_parse():
    listing = {
        "data": [
            Assistant(
                id=ASSISTANT_ID,
                object="assistant",
                created_at=1234567890,
                name=ASSISTANT_NAME,
                model=MODEL,
                description=ASSISTANT_DESCRIPTION,
                instructions=ASSISTANT_INSTRUCTIONS,
            ).to_dict()
        ],
        "last_id": ASSISTANT_ID,
        "first_id": ASSISTANT_ID,
        "has_more": False,
    }
    parsed = AssistantsList.from_dict(listing)
    assert parsed.first_id == ASSISTANT_ID
    assert parsed.last_id == ASSISTANT_ID
    assert parsed.has_more is False
    assert parsed.assistants[0].name == ASSISTANT_NAME
    assert parsed.assistants[0].tools is None


def test_delete_response_parse():
    parsed = AssistantDeleteResponse.from_dict(
        json.loads('{"id": "asst_abc123", "object": "assistant.deleted", "deleted": true}')
    )
    assert parsed == AssistantDeleteResponse(id=ASSISTANT_ID, object="assistant.deleted", deleted=True)


def test_assistant_file_round_trip_and_request():
    request = AssistantFileRequest(file_id=FILE_ID)
    assert request.to_dict() == {"file_id": FILE_ID}
    created = AssistantFile(
        id=request.file_id, object="assistant.file", created_at=1234567890, assistant_id=ASSISTANT_ID
    )
    assert AssistantFile.from_dict(created.to_dict()) == created


def test_assistant_files_list_parse():
    item = AssistantFile(id=FILE_ID, object="assistant.file", created_at=1234567890, assistant_id=ASSISTANT_ID)
    parsed = AssistantFilesList.from_dict({"data": [item.to_dict()]})
    assert parsed.assistant_files == [item]


def test_from_dict_rejects_non_mapping():
    with pytest.raises(TypeError):
        Assistant.from_dict(["not", "an", "assistant"])