import pytest

from docwise.utils.config import build_config_manager, load_config_file, save_config
from docwise.utils.logging_helper import ConfigurationError


def test_defaults():
    manager = build_config_manager()
    model = manager.get_config(section="model")
    assert model["model_id"] == "us.amazon.nova-lite-v1:0"
    assert model["max_attempts"] == 3
    assert model["backoff_seconds"] == 1.0
    assert manager.get_config(section="export")["default_format"] == "pdf"
    assert manager.get_config(section="storage")["upload_prefix"] == "incoming"


def test_user_config_and_runtime_options():
    manager = build_config_manager()
    manager.set_user_config({"model": {"max_tokens": 1024}})
    resolved = manager.get_config({"temperature": 0.5, "top_p": None}, section="model")
    assert resolved["max_tokens"] == 1024
    assert resolved["temperature"] == 0.5
    assert resolved["top_p"] == 0.8


def test_well_known_env_vars(monkeypatch):
    monkeypatch.setenv("DOCWISE_S3_BUCKET", "from-env")
    monkeypatch.setenv("DOCWISE_MODEL_ID", "custom-model")
    manager = build_config_manager()
    assert manager.get_config(section="storage")["bucket"] == "from-env"
    model = manager.get_config(section="model")
    assert model["model_id"] == "custom-model"
    # DOCWISE_MODEL_ID is not treated as a DOCWISE_MODEL_* option
    assert "id" not in model
    assert manager.get_config()["storage"]["bucket"] == "from-env"


def test_section_env_vars_are_typed(monkeypatch):
    monkeypatch.setenv("DOCWISE_MODEL_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("DOCWISE_MODEL_BACKOFF_SECONDS", "0.5")
    monkeypatch.setenv("DOCWISE_STORAGE_CLEANUP_UPLOADS", "false")
    manager = build_config_manager()
    assert manager.get_config(section="model")["max_attempts"] == 5
    assert manager.get_config(section="model")["backoff_seconds"] == 0.5
    assert manager.get_config(section="storage")["cleanup_uploads"] is False


@pytest.mark.parametrize("name,file_format", [("config.yaml", "yaml"), ("config.json", "json")])
def test_save_and_load_round_trip(tmp_path, name, file_format):
    path = tmp_path / name
    save_config({"model": {"model_id": "x"}}, str(path), file_format)
    assert load_config_file(str(path)) == {"model": {"model_id": "x"}}


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config_file(str(tmp_path / "missing.yaml"))


def test_load_unsupported_extension(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[model]\n")
    with pytest.raises(ConfigurationError):
        load_config_file(str(path))
