import json
from unittest.mock import MagicMock

import pytest

from components.accessibility_toolbar import build_accessibility_css, is_focus_mode, toggle_option
from config.app_config_local import Config
from docwise.extract.text_extractor import DOCX_TYPE, PDF_TYPE, PPT_TYPE
from docwise.services.bedrock_client import SERVICE_BUSY_MESSAGE, AccessibleDocument
from docwise.utils.logging_helper import DocumentAccessibilityError, InvalidRequestError, ModelInvocationError, ServiceBusyError
from docwise.utils.usage_tracker import SessionUsageTracker
from processors.document_processor import (
    PROCESSING_STEPS,
    SERVER_OVERLOAD_MESSAGE,
    describe_error,
    run_document_pipeline,
)
from ui_helpers.html_preview import prepare_preview_html
from ui_helpers.narration import NARRATION_LANGUAGES, build_narration_script, narration_text
from utils.file_utils import UploadedDocument, detect_file_type, format_file_size


@pytest.fixture()
def storage():
    storage = MagicMock()
    storage.upload_file.side_effect = lambda data, name, content_type: f"s3://docwise-test/incoming/1/{name}"
    storage.upload_processed_html.return_value = "https://cdn.example.com/processed/1.html"
    storage.fetch.return_value = (b"%PDF-1.7", PDF_TYPE)
    return storage


@pytest.fixture()
def fake_model():
    model = MagicMock()
    model.process_text.return_value = AccessibleDocument("<article>text</article>", "Text summary")
    model.process_document_bytes.return_value = AccessibleDocument("<article>pdf</article>", "PDF summary")
    return model


# Accessibility toolbar

def test_no_options_no_css():
    assert build_accessibility_css({}) == ""


def test_large_and_xl_text_are_exclusive():
    options = toggle_option({}, "large_text")
    assert options["large_text"]
    options = toggle_option(options, "xl_text")
    assert options == {"large_text": False, "xl_text": True}
    options = toggle_option(options, "large_text")
    assert options == {"large_text": True, "xl_text": False}


def test_toggle_turns_option_off():
    assert toggle_option({"high_contrast": True}, "high_contrast") == {"high_contrast": False}


def test_css_for_active_options():
    css = build_accessibility_css({"high_contrast": True, "xl_text": True, "large_text": True})
    assert css.startswith("<style>") and css.endswith("</style>")
    assert "#000000" in css
    assert "1.5rem" in css
    assert "1.25rem" not in css


def test_focus_mode():
    assert is_focus_mode({"enhanced_focus": True})
    assert not is_focus_mode({})
    assert "outline" in build_accessibility_css({"enhanced_focus": True})


# Narration

def test_twenty_five_locales():
    assert len(NARRATION_LANGUAGES) == 25
    assert {"en-US", "ar-SA", "he-IL", "zh-CN"} <= set(NARRATION_LANGUAGES)


def test_narration_script_escapes_text():
    script = build_narration_script('He said "hi" </script>', "fr-FR")
    assert 'const lang = "fr-FR";' in script
    assert '"He said \\"hi\\" <\\/script>"' in script
    assert "</script>\"" not in script
    assert "utterance.rate = 1.0;" in script
    assert "startsWith(prefix)" in script


def test_narration_script_unknown_locale():
    assert 'const lang = "en-US";' in build_narration_script("x", "xx-XX")


def test_stop_script_cancels():
    script = build_narration_script("ignored", action="stop")
    assert "cancel()" in script
    assert "ignored" not in script


def test_narration_text_prefers_content():
    assert narration_text("<h1>Title</h1><p>Body</p>", "Summary") == "Title\nBody"
    assert narration_text("", "Summary") == "Summary"
    assert narration_text("<div></div>", "") == ""


# Preview

def test_preview_strips_scripts():
    html = prepare_preview_html("<p>Hi</p><script>alert(1)</script>")
    assert "<script>" not in html
    assert '<div class="docwise-preview" role="document"><p>Hi</p></div>' in html
    assert ".docwise-preview {" in html


# Files and config

def test_detect_file_type():
    assert detect_file_type("a.PDF") == "pdf"
    assert detect_file_type("a.doc") == "word"
    assert detect_file_type("a.pptx") == "powerpoint"
    assert detect_file_type("a.zip") is None


def test_format_file_size():
    assert format_file_size(512) == "512 B"
    assert format_file_size(2048) == "2.0 KB"
    assert format_file_size(5 * 1024 * 1024) == "5.0 MB"


def test_app_config(monkeypatch):
    monkeypatch.setenv("DOCUMENT_ACCESSIBILITY_S3_BUCKET", "legacy-bucket")
    monkeypatch.setenv("DOCWISE_MODEL_ID", "custom-model")
    app_config = Config()
    assert app_config.aws_configured
    assert app_config.default_format == "pdf"

    manager = app_config.build_config_manager()
    assert manager.get_config(section="storage")["bucket"] == "legacy-bucket"
    assert manager.get_config(section="model")["model_id"] == "custom-model"


def test_app_config_without_bucket():
    assert not Config().aws_configured


# Processing pipeline

def test_docx_is_processed_without_upload(storage, fake_model, config, docx_bytes):
    steps = []
    documents = [UploadedDocument("report.docx", docx_bytes, DOCX_TYPE)]

    result = run_document_pipeline(
        documents, storage, fake_model,
        on_progress=lambda step, label, percent: steps.append((step, label, percent)),
        config=config,
    )

    storage.upload_file.assert_not_called()
    text, _ = fake_model.process_text.call_args.args
    assert "<h1>Quarterly Report</h1>" in text
    assert result["summary"] == "Text summary"
    assert steps == [(i, label, percent) for i, (label, percent) in enumerate(PROCESSING_STEPS)]
    assert [percent for _, _, percent in steps] == [10, 40, 70, 100]


def test_pdf_uploads_every_file(storage, fake_model, config):
    documents = [
        UploadedDocument("scan.pdf", b"%PDF-1.7", PDF_TYPE),
        UploadedDocument("extra.pdf", b"%PDF-1.4", PDF_TYPE),
    ]

    result = run_document_pipeline(documents, storage, fake_model, config=config)

    assert storage.upload_file.call_count == 2
    fake_model.process_document_bytes.assert_called_once_with(b"%PDF-1.7", PDF_TYPE, "scan.pdf")
    storage.remove.assert_called_once_with(
        ["s3://docwise-test/incoming/1/scan.pdf", "s3://docwise-test/incoming/1/extra.pdf"]
    )
    assert result["processed_document_url"] == "https://cdn.example.com/processed/1.html"


def test_descriptive_text_when_nothing_else_is_available(storage, fake_model, config):
    storage.upload_file.side_effect = None
    storage.upload_file.return_value = ""
    documents = [UploadedDocument("scan.pdf", b"%PDF", PDF_TYPE)]

    run_document_pipeline(documents, storage, fake_model, config=config)

    fake_model.process_text.assert_called_once_with(
        "Process file 'scan.pdf' with content-type application/pdf. "
        "Create accessible content from this document.",
        "user-provided-text",
    )


def test_pipeline_requires_documents(storage, fake_model, config):
    with pytest.raises(DocumentAccessibilityError):
        run_document_pipeline([], storage, fake_model, config=config)


def test_legacy_powerpoint_is_rejected_before_upload(storage, fake_model, config):
    documents = [UploadedDocument("deck.ppt", b"\xd0\xcf\x11\xe0", PPT_TYPE)]

    with pytest.raises(InvalidRequestError, match=r"\.pptx"):
        run_document_pipeline(documents, storage, fake_model, config=config)

    storage.upload_file.assert_not_called()
    fake_model.process_document_bytes.assert_not_called()


def test_usage_tracker_reset_after_each_run(storage, fake_model, config):
    before = SessionUsageTracker.get_instance()
    documents = [UploadedDocument("scan.pdf", b"%PDF-1.7", PDF_TYPE)]

    run_document_pipeline(documents, storage, fake_model, config=config)

    assert SessionUsageTracker.get_instance() is not before
    storage.client.put_object.assert_not_called()


def test_usage_tracker_reset_after_failed_run(storage, fake_model, config):
    fake_model.process_document_bytes.side_effect = ModelInvocationError("Failed to process document")
    before = SessionUsageTracker.get_instance()
    before.track_failed_call()

    with pytest.raises(ModelInvocationError):
        run_document_pipeline([UploadedDocument("scan.pdf", b"%PDF-1.7", PDF_TYPE)], storage, fake_model, config=config)

    assert SessionUsageTracker.get_instance().model_usage["failed_calls"] == 0


def test_usage_saved_when_prefix_configured(storage, fake_model, config):
    storage.bucket = "docwise-test"
    config.set_user_config({"usage_data_prefix": "usage"}, "processing")

    run_document_pipeline([UploadedDocument("scan.pdf", b"%PDF-1.7", PDF_TYPE)], storage, fake_model, config=config)

    kwargs = storage.client.put_object.call_args.kwargs
    assert kwargs["Key"].startswith("usage/docwise-usage/")
    assert json.loads(kwargs["Body"])["documents_processed"] == 1


def test_busy_errors_show_server_overload():
    title, message = describe_error(ServiceBusyError(SERVICE_BUSY_MESSAGE))
    assert "Server Overload" in title
    assert message == SERVER_OVERLOAD_MESSAGE


def test_other_errors_show_processing_failed():
    assert describe_error(RuntimeError("Failed to fetch file: 404")) == (
        "Processing Failed",
        "Failed to fetch file: 404",
    )


# Results view

@pytest.fixture()
def analyze_view(monkeypatch):
    import views.analyze_view as view

    monkeypatch.setattr(view, "st", MagicMock())
    for name in (
        "display_accessibility_toolbar",
        "display_html_content",
        "display_narration_controls",
        "create_download_section",
    ):
        monkeypatch.setattr(view, name, MagicMock())
    return view


RESULTS = {
    "accessible_content": "<article>ok</article>",
    "summary": "Summary",
    "processed_document_url": "https://cdn.example.com/processed/1.html",
}


def test_focus_mode_shows_only_document_and_narration(analyze_view, monkeypatch):
    monkeypatch.setattr(analyze_view.SessionState, "get_accessibility_options", lambda: {"enhanced_focus": True})

    analyze_view.display_analyze_view(RESULTS, "a.pdf")

    analyze_view.display_html_content.assert_called_once_with("<article>ok</article>")
    analyze_view.display_narration_controls.assert_called_once_with("<article>ok</article>", "Summary")
    analyze_view.create_download_section.assert_not_called()
    analyze_view.st.info.assert_not_called()
    analyze_view.st.button.assert_not_called()


def test_normal_mode_offers_downloads_and_reset(analyze_view, monkeypatch):
    monkeypatch.setattr(analyze_view.SessionState, "get_accessibility_options", lambda: {})
    analyze_view.st.button.return_value = False

    analyze_view.display_analyze_view(RESULTS, "a.pdf", "html")

    analyze_view.create_download_section.assert_called_once_with("<article>ok</article>", "a.pdf", "html")
    analyze_view.st.info.assert_called_once_with("Summary")
    analyze_view.st.button.assert_called_once_with("Process another document")
