import json

import pytest
from botocore.exceptions import ClientError

from docwise.services.bedrock_client import (
    SERVICE_BUSY_MESSAGE,
    document_name,
    is_throttling_error,
    parse_model_json,
)
from docwise.utils.logging_helper import ModelInvocationError, ServiceBusyError
from tests.conftest import converse_reply, model_json


def client_error(code="InternalServerException", status=500):
    return ClientError(
        {"Error": {"Code": code, "Message": "boom"}, "ResponseMetadata": {"HTTPStatusCode": status}},
        "Converse",
    )


def test_parse_model_json_plain():
    assert parse_model_json('{"accessible_html": "<p>x</p>", "summary": "s"}') == {
        "accessible_html": "<p>x</p>",
        "summary": "s",
    }


def test_parse_model_json_strips_code_fence():
    reply = '```json\n{"accessible_html": "<p>x</p>", "summary": "s"}\n```'
    assert parse_model_json(reply)["summary"] == "s"


def test_parse_model_json_finds_embedded_object():
    reply = 'Here you go: {"accessible_html": "<p>x</p>", "summary": "s"} Enjoy!'
    assert parse_model_json(reply)["accessible_html"] == "<p>x</p>"


def test_parse_model_json_rejects_non_objects():
    assert parse_model_json("not json") is None
    assert parse_model_json("[1, 2]") is None
    assert parse_model_json("") is None


def test_document_name_is_sanitized():
    assert document_name("reports/Q1_report v2.final.pdf") == "Q1 report v2 final"
    assert document_name("___.pdf") == "document"


def test_is_throttling_error():
    assert is_throttling_error(client_error("ThrottlingException", 400))
    assert is_throttling_error(client_error("SomethingElse", 429))
    assert not is_throttling_error(client_error())
    assert not is_throttling_error(ValueError("x"))


def test_process_document_bytes_success(model, runtime, usage_tracker):
    result = model.process_document_bytes(b"%PDF-1.7", "application/pdf", "report.pdf")

    assert result.accessible_html == "<article><h1>Title</h1></article>"
    assert result.summary == "A short summary."

    kwargs = runtime.converse.call_args.kwargs
    assert kwargs["modelId"] == "test-model"
    assert kwargs["inferenceConfig"] == {"maxTokens": 4096, "temperature": 0.1, "topP": 0.8}
    content = kwargs["messages"][0]["content"]
    assert content[1]["document"]["format"] == "pdf"
    assert content[1]["document"]["name"] == "report"
    assert content[1]["document"]["source"] == {"bytes": b"%PDF-1.7"}

    assert usage_tracker.model_usage["total_calls"] == 1
    assert "document_extraction" in usage_tracker.model_usage["calls_by_purpose"]


def test_process_document_bytes_retries_with_linear_backoff(model, runtime, sleeps):
    runtime.converse.side_effect = [client_error(), client_error(), converse_reply(model_json())]

    result = model.process_document_bytes(b"%PDF", "application/pdf", "a.pdf")

    assert result.summary == "A short summary."
    assert runtime.converse.call_count == 3
    assert sleeps == [1.0, 2.0]


def test_process_document_bytes_gives_up_after_three_attempts(model, runtime, sleeps, usage_tracker):
    runtime.converse.side_effect = client_error()

    with pytest.raises(ModelInvocationError, match="failed after 3 attempts"):
        model.process_document_bytes(b"%PDF", "application/pdf", "a.pdf")

    assert runtime.converse.call_count == 3
    assert sleeps == [1.0, 2.0]
    assert usage_tracker.model_usage["failed_calls"] == 3


def test_process_document_bytes_throttling_is_not_retried(model, runtime, sleeps):
    runtime.converse.side_effect = client_error("ThrottlingException", 429)

    with pytest.raises(ServiceBusyError) as excinfo:
        model.process_document_bytes(b"%PDF", "application/pdf", "a.pdf")

    assert str(excinfo.value) == SERVICE_BUSY_MESSAGE
    assert runtime.converse.call_count == 1
    assert sleeps == []


def test_process_document_bytes_unparseable_reply(model, runtime):
    runtime.converse.return_value = converse_reply("<p>Just some html</p>")

    result = model.process_document_bytes(b"%PDF", "application/pdf", "a.pdf")

    assert result.accessible_html == (
        "<article><h1>Document Content</h1><div><p>Just some html</p></div></article>"
    )
    assert result.summary == "Document processing encountered a parsing error."


def test_process_document_bytes_missing_summary_is_a_parse_error(model, runtime):
    runtime.converse.return_value = converse_reply(json.dumps({"accessible_html": "<p>x</p>"}))

    result = model.process_document_bytes(b"%PDF", "application/pdf", "a.pdf")

    assert result.summary == "Document processing encountered a parsing error."


def test_process_document_bytes_rejects_unsupported_type(model, runtime):
    with pytest.raises(ModelInvocationError, match="Unsupported document type"):
        model.process_document_bytes(b"zip", "application/zip", "archive.zip")
    runtime.converse.assert_not_called()


def test_process_document_bytes_sends_images_as_image_blocks(model, runtime):
    model.process_document_bytes(b"\x89PNG", "image/png", "chart.png")
    content = runtime.converse.call_args.kwargs["messages"][0]["content"]
    assert content[1] == {"image": {"format": "png", "source": {"bytes": b"\x89PNG"}}}


def test_process_text_embeds_text_in_prompt(model, runtime):
    result = model.process_text("Hello there", "notes.txt")

    assert result.summary == "A short summary."
    kwargs = runtime.converse.call_args.kwargs
    prompt = kwargs["messages"][0]["content"][0]["text"]
    assert "Hello there" in prompt
    assert "topP" not in kwargs["inferenceConfig"]


def test_process_text_fallback_escapes_plain_text(model, runtime):
    runtime.converse.return_value = converse_reply("sorry, no json")

    result = model.process_text("5 < 6 & 7")

    assert result.accessible_html == "<article><div>5 &lt; 6 &amp; 7</div></article>"
    assert result.summary == "Text content processed with basic formatting"


def test_process_text_fallback_keeps_office_html(model, runtime):
    runtime.converse.return_value = converse_reply("sorry, no json")

    result = model.process_text("<h1>Report</h1><p>Body</p>")

    assert result.accessible_html == "<article><div><h1>Report</h1><p>Body</p></div></article>"


def test_process_text_single_attempt(model, runtime, sleeps):
    runtime.converse.side_effect = client_error()

    with pytest.raises(ModelInvocationError, match="Failed to process text"):
        model.process_text("Hello")

    assert runtime.converse.call_count == 1
    assert sleeps == []


def test_process_text_throttling(model, runtime):
    runtime.converse.side_effect = client_error("ServiceQuotaExceededException", 400)

    with pytest.raises(ServiceBusyError):
        model.process_text("Hello")
