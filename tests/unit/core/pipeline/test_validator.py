from __future__ import annotations

"""
Unit tests for the Configuration Validator.

Verifies:
1. Default value injection.
2. Type coercion (strings to bools and numbers).
3. Strict mode validation.
"""

import pytest

from zipsync.core.pipeline.validator import validate_config


def test_validate_none_returns_defaults() -> None:
    cfg, warnings = validate_config(None)

    assert cfg["key_prefix"] == "uploads/"
    assert cfg["storage_backend"] == "s3"
    assert cfg["print_tree"] is True
    assert len(warnings) > 0


def test_validate_empty_dict_returns_defaults() -> None:
    cfg, warnings = validate_config({})

    assert cfg["max_nesting_depth"] == 16
    assert cfg["upload_timeout"] == 60.0
    assert cfg["skip_upload"] is False
    assert warnings == []


def test_validate_coerces_cli_strings() -> None:
    raw = {
        "print_tree": "no",
        "skip_upload": "yes",
        "upload_timeout": "12.5",
        "max_nesting_depth": "3",
        "storage_backend": "HTTP",
    }
    cfg, warnings = validate_config(raw, strict=False)

    assert cfg["print_tree"] is False
    assert cfg["skip_upload"] is True
    assert cfg["upload_timeout"] == 12.5
    assert cfg["max_nesting_depth"] == 3
    assert cfg["storage_backend"] == "http"
    assert len(warnings) == 4


def test_validate_rejects_invalid_values_with_fallback() -> None:
    cfg, warnings = validate_config({
        "upload_timeout": -1,
        "max_nesting_depth": "deep",
        "storage_backend": "ftp",
        "bucket_name": 42,
    })

    assert cfg["upload_timeout"] == 60.0
    assert cfg["max_nesting_depth"] == 16
    assert cfg["storage_backend"] == "s3"
    assert cfg["bucket_name"] == ""
    assert len(warnings) == 4


def test_empty_key_prefix_is_preserved() -> None:
    cfg, _ = validate_config({"key_prefix": ""})
    assert cfg["key_prefix"] == ""


def test_unknown_keys_are_dropped() -> None:
    cfg, _ = validate_config({"aws_secret": "nope", "bucket_name": "b"})

    assert "aws_secret" not in cfg
    assert cfg["bucket_name"] == "b"


def test_strict_mode_raises() -> None:
    with pytest.raises(TypeError):
        validate_config("not a dict", strict=True)
    with pytest.raises(TypeError):
        validate_config({"print_tree": "yes"}, strict=True)
    with pytest.raises(ValueError):
        validate_config({"storage_backend": "ftp"}, strict=True)
    with pytest.raises(ValueError):
        validate_config({"upload_timeout": 0}, strict=True)
