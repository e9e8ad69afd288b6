# chatwire

Plain Python dataclasses for the wire format of chat completion style
APIs: chat requests and responses, streamed chunks, assistants, audio
transcription forms and batch jobs. Request models turn into the JSON
bodies the service expects; response models are built back from the
decoded JSON it returns.

There are no runtime dependencies.

## Install

```
pip install chatwire
```

## Chat requests and responses (`chatwire.chat`)

```python
from chatwire.chat import (
    ChatCompletionMessage,
    ChatCompletionRequest,
    ChatMessageRole,
    to_json,
)

request = ChatCompletionRequest(
    model="gpt-4",
    messages=[ChatCompletionMessage(role=ChatMessageRole.USER, content="Hello!")],
    max_tokens=5,
)
body = to_json(request)
# {"model":"gpt-4","messages":[{"role":"user","content":"Hello!"}],"max_tokens":5}
```

- `to_json(value)` writes compact JSON for a model, or for lists and dicts
  of them.
- `ChatCompletionRequest.to_dict()` always writes `model` and `messages`
  (`messages` is `null` when unset) and leaves out every other field that
  is empty, zero or unset. Keys in `extra_body` are merged into the top
  level of the body; when any are given, the keys of the whole body are
  sorted.
- A `ChatCompletionMessage` carries either plain `content` or a list of
  `ChatMessagePart` objects in `multi_content`. If `content` is non-empty
  and `multi_content` is set (even to an empty list), `to_dict()` raises
  `ContentFieldsMisusedError`, a `ChatError`. `from_dict` accepts `content`
  as a string or as a list of parts.
- `ChatCompletionChoice.to_dict()` writes a `finish_reason` of `""` or
  `FinishReason.NULL` as JSON `null`.
- Parse replies with `ChatCompletionResponse.from_dict(...)`. Tools,
  function definitions, tool calls, response formats, log probabilities
  and content filter results have their own models.

## Streamed chunks (`chatwire.chat_stream`)

Give the JSON payload of each `data:` line of a streamed reply to
`ChatCompletionStreamResponse.from_json`:

```python
from chatwire.chat_stream import ChatCompletionStreamResponse

chunk = ChatCompletionStreamResponse.from_json(payload)
for choice in chunk.choices:
    print(choice.delta.content, end="")
```

`usage` is `None` unless the chunk carries it.

## Assistants (`chatwire.assistant`)

`AssistantRequest.to_dict()` keeps the three meanings of `tools`: left as
`None`, the field is omitted and the assistant's tools stay as they are;
an empty list clears them; a list with items replaces them.

`list_query(limit, order, after, before)` returns the query string for
list calls (for example `"?after=a&limit=20"`), or `""` when nothing is
set. `assistant_path(assistant_id, file_id)` returns `/assistants`,
`/assistants/<id>`, `/assistants/<id>/files` (file id `""`) or
`/assistants/<id>/files/<file id>`.

Replies parse with `Assistant.from_dict`, `AssistantsList.from_dict`,
`AssistantDeleteResponse.from_dict`, `AssistantFile.from_dict` and
`AssistantFilesList.from_dict`.

## Audio (`chatwire.audio`)

`FormBuilder(out, boundary=None)` writes a `multipart/form-data` body to a
binary stream; its `content_type` attribute holds the matching header
value. `audio_multipart_form(request, builder)` writes an `AudioRequest`
into it: the file (from `reader` if given, else opened from `file_path`),
the model, then prompt, response format, temperature (two decimals),
language and each timestamp granularity when set, and closes the form.
Failures raise `AudioFormError`.

```python
import io
from chatwire.audio import AudioRequest, FormBuilder, audio_multipart_form

body = io.BytesIO()
builder = FormBuilder(body)
audio_multipart_form(
    AudioRequest(model="whisper-1", file_path="clip.mp3", reader=io.BytesIO(b"...")),
    builder,
)
```

`AudioRequest.has_json_response()` tells you whether to parse the reply
with `AudioResponse.from_dict` (JSON formats) or `AudioResponse.from_text`.
`audio_endpoint_path("transcriptions")` returns `/audio/transcriptions`.

## Batches (`chatwire.batch`)

```python
from chatwire.batch import UploadBatchFileRequest

upload = UploadBatchFileRequest()
upload.add_chat_completion("req-1", request)
upload.add_chat_completion("req-2", request)
data = upload.marshal_jsonl()  # one JSON line per request, joined by "\n"
```

`add_completion` and `add_embedding` add lines for the other endpoints;
each line is a `BatchLineItem` with method `POST`. The default upload
file name is `@batchinput.jsonl`.

`CreateBatchRequest.to_dict()` fills in a completion window of `24h`
when none is set. `CreateBatchWithUploadFileRequest` holds the lines and
the batch settings together, and `create_batch_request(file_id)` gives the
`CreateBatchRequest` to send after the file is uploaded.
`list_batch_query(after, limit)` builds the list query string. Parse batch
status with `Batch.from_dict` and listings with `ListBatchResponse.from_dict`.

## What it does not do

chatwire has no HTTP client: it does not send requests, upload files,
read server-sent event streams, handle authentication or map error
replies to exceptions. It builds bodies, paths and query strings, and
parses the JSON you get back; use any HTTP library to do the transport.

## Tests

```
pip install "chatwire[test]"
pytest
```