import io
import os
import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure project root and the Streamlit app directory are on path
ROOT = Path(__file__).resolve().parents[1]
WEBAPP = ROOT / "webapp"
for path in (ROOT, WEBAPP):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from docwise.services.bedrock_client import BedrockClient  # noqa: E402
from docwise.utils.config import build_config_manager  # noqa: E402
from docwise.utils.usage_tracker import SessionUsageTracker  # noqa: E402

ENV_VARS = (
    "DOCWISE_S3_BUCKET",
    "DOCWISE_PUBLIC_BASE_URL",
    "DOCWISE_MODEL_ID",
    "DOCUMENT_ACCESSIBILITY_S3_BUCKET",
    "AWS_PROFILE",
    "AWS_REGION",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Keep developer AWS settings out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("DOCWISE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    yield


@pytest.fixture(autouse=True)
def usage_tracker():
    """Fresh usage tracker for every test."""
    return SessionUsageTracker.reset()


@pytest.fixture()
def config(monkeypatch):
    """Fresh configuration manager wired into the api and cli modules."""
    manager = build_config_manager()
    manager.set_user_config({"bucket": "docwise-test"}, "storage")
    import docwise.api
    import docwise.cli
    monkeypatch.setattr(docwise.api, "config_manager", manager)
    monkeypatch.setattr(docwise.cli, "config_manager", manager)
    return manager


@pytest.fixture()
def sleeps(monkeypatch):
    """Record backoff delays instead of sleeping."""
    calls = []
    import docwise.services.bedrock_client as bedrock_module
    monkeypatch.setattr(bedrock_module.time, "sleep", lambda seconds: calls.append(seconds))
    return calls


def converse_reply(text):
    """Shape of a converse() response carrying a single text block."""
    return {"output": {"message": {"role": "assistant", "content": [{"text": text}]}}}


def model_json(html="<article><h1>Title</h1></article>", summary="A short summary."):
    return json.dumps({"accessible_html": html, "summary": summary})


@pytest.fixture()
def runtime():
    """Mocked bedrock-runtime client."""
    client = MagicMock()
    client.converse.return_value = converse_reply(model_json())
    return client


@pytest.fixture()
def model(runtime):
    return BedrockClient(model_id="test-model", client=runtime)


@pytest.fixture()
def docx_bytes():
    from docx import Document

    document = Document()
    document.add_heading("Quarterly Report", level=1)
    document.add_paragraph("Revenue grew in every region.")
    document.add_paragraph("First point", style="List Bullet")
    document.add_paragraph("Second point", style="List Bullet")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Region"
    table.cell(0, 1).text = "Sales"
    table.cell(1, 0).text = "North"
    table.cell(1, 1).text = "42"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture()
def pptx_bytes():
    from pptx import Presentation

    presentation = Presentation()
    slide = presentation.slides.add_slide(presentation.slide_layouts[1])
    slide.shapes.title.text = "Welcome & Overview"
    slide.placeholders[1].text_frame.text = "Accessible slides matter"
    buffer = io.BytesIO()
    presentation.save(buffer)
    return buffer.getvalue()
