import json

import pytest

from chatwire.chat import (
    ChatCompletionChoice,
    ChatCompletionMessage,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatCompletionResponseFormat,
    ChatCompletionResponseFormatType,
    ChatError,
    ChatMessageImageURL,
    ChatMessagePart,
    ChatMessagePartType,
    ChatMessageRole,
    ContentFieldsMisusedError,
    ContentFilterResults,
    FinishReason,
    FunctionCall,
    FunctionDefinition,
    ImageURLDetail,
    LogProb,
    LogProbs,
    PromptAnnotation,
    StreamOptions,
    Tool,
    ToolCall,
    ToolChoice,
    ToolFunction,
    to_json,
)

MULTIPART_JSON = (
    '[{"role":"system","content":"system-message"},'
    '{"role":"user","content":[{"type":"text","text":"nice-text"},'
    '{"type":"image_url","image_url":{"url":"URL","detail":"high"}}]}]'
)


def test_chat_request_omit_empty():
    assert to_json(ChatCompletionRequest(model="gpt-4")) == '{"model":"gpt-4","messages":null}'


def test_chat_request_basic_body():
    request = ChatCompletionRequest(
        model="gpt-3.5-turbo",
        max_tokens=5,
        messages=[ChatCompletionMessage(role=ChatMessageRole.USER, content="Hello!")],
    )
    assert to_json(request) == (
        '{"model":"gpt-3.5-turbo","messages":[{"role":"user","content":"Hello!"}],"max_tokens":5}'
    )


def test_multipart_message_deserialization():
    msgs = [ChatCompletionMessage.from_dict(d) for d in json.loads(MULTIPART_JSON)]
    assert len(msgs) == 2
    assert msgs[0].role == "system"
    assert msgs[0].content == "system-message"
    assert msgs[0].multi_content is None
    assert msgs[1].role == "user"
    assert msgs[1].content == ""
    parts = msgs[1].multi_content
    assert len(parts) == 2
    assert parts[0].type == "text" and parts[0].text == "nice-text"
    assert parts[1].type == "image_url"
    assert parts[1].image_url.url == "URL"
    assert parts[1].image_url.detail == "high"


def test_multipart_message_round_trip():
    msgs = [ChatCompletionMessage.from_dict(d) for d in json.loads(MULTIPART_JSON)]
    assert to_json(msgs).replace(" ", "") == MULTIPART_JSON


def test_content_fields_misused():
    invalid = [
        ChatCompletionMessage(
            role="user",
            content="some-text",
            multi_content=[ChatMessagePart(type="text", text="nice-text")],
        )
    ]
    with pytest.raises(ContentFieldsMisusedError):
        to_json(invalid)
    assert issubclass(ContentFieldsMisusedError, ChatError)


def test_message_from_non_mapping_fails():
    with pytest.raises(TypeError):
        ChatCompletionMessage.from_dict("not-a-message")


def test_empty_multi_content_message():
    msg = ChatCompletionMessage(role="user", multi_content=[])
    assert to_json(msg) == '{"role":"user"}'


def test_multipart_with_enums():
    msg = ChatCompletionMessage(
        role=ChatMessageRole.USER,
        multi_content=[
            ChatMessagePart(type=ChatMessagePartType.TEXT, text="Hello!"),
            ChatMessagePart(
                type=ChatMessagePartType.IMAGE_URL,
                image_url=ChatMessageImageURL(url="URL", detail=ImageURLDetail.LOW),
            ),
        ],
    )
    assert msg.to_dict() == {
        "role": "user",
        "content": [
            {"type": "text", "text": "Hello!"},
            {"type": "image_url", "image_url": {"url": "URL", "detail": "low"}},
        ],
    }


@pytest.mark.parametrize("reason", [FinishReason.NULL, ""])
def test_finish_reason_null(reason):
    choice = ChatCompletionChoice(finish_reason=reason)
    assert '"finish_reason":null' in to_json(choice)


@pytest.mark.parametrize(
    "reason",
    [FinishReason.STOP, FinishReason.LENGTH, FinishReason.FUNCTION_CALL, FinishReason.CONTENT_FILTER],
)
def test_finish_reason_quoted(reason):
    choice = ChatCompletionChoice(finish_reason=reason)
    assert f'"finish_reason":"{reason.value}"' in to_json(choice)


def test_extra_body_merged_and_sorted():
    request = ChatCompletionRequest(
        model="qwen",
        messages=[ChatCompletionMessage(role="user", content="hi")],
        extra_body={"enable_search": True, "model": "override"},
    )
    assert to_json(request) == (
        '{"enable_search":true,"messages":[{"content":"hi","role":"user"}],"model":"override"}'
    )


def test_request_round_trip():
    request = ChatCompletionRequest(
        model="gpt-4",
        messages=[ChatCompletionMessage(role="user", content="Hello!")],
        temperature=0.5,
        seed=7,
        stop=["x"],
        functions=[FunctionDefinition(name="test", parameters={"type": "object"})],
        tools=[Tool(function=FunctionDefinition(name="f"))],
        tool_choice="auto",
        stream_options=StreamOptions(include_usage=True),
        parallel_tool_calls=False,
        response_format=ChatCompletionResponseFormat(type=ChatCompletionResponseFormatType.JSON_OBJECT),
    )
    data = json.loads(to_json(request))
    assert data["parallel_tool_calls"] is False
    assert data["response_format"] == {"type": "json_object"}
    assert ChatCompletionRequest.from_dict(data).to_dict() == data


def test_function_definition_keeps_null_parameters():
    assert to_json(FunctionDefinition(name="test")) == '{"name":"test","parameters":null}'


def test_function_definition_strict_and_nested_parameters():
    definition = FunctionDefinition(name="test", strict=True, parameters=Tool(type="function"))
    assert definition.to_dict() == {"name": "test", "strict": True, "parameters": {"type": "function"}}


def test_tool_call_index_omitted_when_absent():
    call = ToolCall(type="function", function=FunctionCall(name="f", arguments="{}"))
    assert to_json(call) == '{"type":"function","function":{"name":"f","arguments":"{}"}}'
    indexed = ToolCall(type="function", index=0, id="call_1")
    assert indexed.to_dict() == {"index": 0, "id": "call_1", "type": "function", "function": {}}
    assert ToolCall.from_dict(indexed.to_dict()) == indexed


def test_tool_choice_serialization():
    choice = ToolChoice(function=ToolFunction(name="lookup"))
    assert to_json(choice) == '{"type":"function","function":{"name":"lookup"}}'


def test_response_from_dict():
    payload = {
        "id": "1",
        "object": "chat.completion",
        "created": 1598069254,
        "model": "gpt-3.5-turbo",
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "function",
                    "function_call": {"name": "test", "arguments": "{}"},
                },
                "finish_reason": None,
            }
        ],
        "usage": {"prompt_tokens": 1, "completion_tokens": 5, "total_tokens": 6},
        "system_fingerprint": "fp",
        "prompt_filter_results": [
            {"index": 0, "content_filter_results": {"hate": {"filtered": True, "severity": "low"}}}
        ],
    }
    response = ChatCompletionResponse.from_dict(payload)
    assert response.created == 1598069254
    assert response.choices[0].message.function_call == FunctionCall(name="test", arguments="{}")
    assert response.choices[0].finish_reason == ""
    assert response.usage["total_tokens"] == 6
    hate = response.prompt_filter_results[0].content_filter_results.hate
    assert hate.filtered is True and hate.severity == "low"


def test_content_filter_results_parse():
    results = ContentFilterResults.from_dict(
        {"jailbreak": {"filtered": False, "detected": True}, "violence": {"filtered": True}}
    )
    assert results.jailbreak.detected is True
    assert results.violence.filtered is True
    assert results.profanity.detected is False


def test_prompt_annotation_parse():
    annotation = PromptAnnotation.from_dict(
        {"prompt_index": 2, "content_filter_results": {"sexual": {"filtered": True, "severity": "safe"}}}
    )
    assert annotation.prompt_index == 2
    assert annotation.content_filter_results.sexual.severity == "safe"


def test_logprob_bytes_base64():
    logprob = LogProb.from_dict({"token": "Hi", "logprob": -0.5, "bytes": "SGk=", "top_logprobs": []})
    assert logprob.bytes == b"Hi"
    assert logprob.top_logprobs == []
    choice = ChatCompletionChoice(logprobs=LogProbs(content=[logprob]))
    data = json.loads(to_json(choice))
    assert data["logprobs"]["content"][0]["bytes"] == "SGk="


def test_choice_round_trip():
    choice = ChatCompletionChoice(
        index=1,
        message=ChatCompletionMessage(role="assistant", content="aaaaa"),
        finish_reason=FinishReason.STOP,
    )
    restored = ChatCompletionChoice.from_dict(json.loads(to_json(choice)))
    assert restored.index == 1
    assert restored.message.content == "aaaaa"
    assert restored.finish_reason == "stop"