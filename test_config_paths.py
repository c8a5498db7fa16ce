import json
import tempfile
from pathlib import Path

import pytest

import config_paths


def _load_with(payload):
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "sheetgrid"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        cfg_path = cfg_dir / "config.json"
        if payload is not None:
            cfg_path.write_text(payload if isinstance(payload, str) else json.dumps(payload))

        # point module paths to temp
        orig_dir = config_paths.CONFIG_DIR
        orig_json = config_paths.CONFIG_JSON
        try:
            config_paths.CONFIG_DIR = str(cfg_dir)
            config_paths.CONFIG_JSON = str(cfg_path)
            return config_paths.load_config()
        finally:
            config_paths.CONFIG_DIR = orig_dir
            config_paths.CONFIG_JSON = orig_json


def test_load_config_defaults_without_json():
    cfg = _load_with(None)
    assert cfg == {
        "DEFAULT_COLUMN_WIDTH": 10,
        "LOG_LEVEL": "INFO",
        "CLIPBOARD_INTERFACE_COMMAND": None,
    }


def test_load_config_reads_json_overrides():
    cfg = _load_with(
        {
            "default_column_width": 14,
            "log_level": "debug",
            "clipboard_interface_command": ["wl-copy"],
        }
    )
    assert cfg["DEFAULT_COLUMN_WIDTH"] == 14
    assert cfg["LOG_LEVEL"] == "DEBUG"
    assert cfg["CLIPBOARD_INTERFACE_COMMAND"] == ["wl-copy"]


@pytest.mark.parametrize(
    "payload",
    [
        {"default_column_width": 2},
        {"default_column_width": 51},
        {"default_column_width": True},
        {"default_column_width": "12"},
        {"log_level": "loud"},
        {"clipboard_interface_command": "xclip -selection clipboard"},
        {"clipboard_interface_command": []},
        {"clipboard_interface_command": ["xclip", 3]},
        ["not", "a", "dict"],
        "{broken json",
    ],
)
def test_invalid_values_fall_back_to_defaults(payload):
    cfg = _load_with(payload)
    assert cfg["DEFAULT_COLUMN_WIDTH"] == 10
    assert cfg["LOG_LEVEL"] == "INFO"
    assert cfg["CLIPBOARD_INTERFACE_COMMAND"] is None
