"""Tests for loading credential options from YAML."""

import textwrap

import pytest

from azidentity.authority import AZURE_CHINA
from azidentity.config import _expand_env_vars, load_credential_options, options_from_dict
from azidentity.errors.exceptions import InvalidAuthorityHostError, InvalidConfigurationError


def write_config(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(content))
    return path


class TestExpandEnvVars:
    def test_expands_set_variable(self, monkeypatch):
        monkeypatch.setenv("TEST_AUTHORITY", "https://login.example.com/")
        assert _expand_env_vars("${TEST_AUTHORITY}") == "https://login.example.com/"

    def test_uses_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("TEST_UNSET_VAR", raising=False)
        assert _expand_env_vars("${TEST_UNSET_VAR:-fallback}") == "fallback"

    def test_leaves_unset_variable_without_default(self, monkeypatch):
        monkeypatch.delenv("TEST_UNSET_VAR", raising=False)
        assert _expand_env_vars("${TEST_UNSET_VAR}") == "${TEST_UNSET_VAR}"

    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("TEST_APP", "my-app")
        data = {"telemetry": {"application_id": "${TEST_APP}"}, "codes": ["${TEST_APP}", 5]}
        assert _expand_env_vars(data) == {
            "telemetry": {"application_id": "my-app"},
            "codes": ["my-app", 5],
        }


class TestOptionsFromDict:
    def test_empty_section(self):
        options = options_from_dict({})
        assert options.authority_host is None
        assert options.retry is None
        assert options.telemetry.disabled is False

    def test_cloud_name(self):
        assert options_from_dict({"cloud": "china"}).authority_host == AZURE_CHINA

    def test_unknown_cloud(self):
        with pytest.raises(InvalidAuthorityHostError):
            options_from_dict({"cloud": "moon"})

    def test_cloud_and_host_conflict(self):
        with pytest.raises(InvalidConfigurationError, match="not both"):
            options_from_dict({"cloud": "china", "authority_host": "https://login.example.com/"})

    def test_string_values_are_coerced(self):
        options = options_from_dict(
            {
                "retry": {"max_retries": "5", "retry_delay": "0.5", "status_codes": ["429"]},
                "logging": {"include_body": "false", "slow_request_threshold": "2"},
                "telemetry": {"disabled": "true"},
            }
        )
        assert options.retry.max_retries == 5
        assert options.retry.retry_delay == 0.5
        assert options.retry.status_codes == frozenset({429})
        assert options.log_options.include_body is False
        assert options.log_options.slow_request_threshold == 2.0
        assert options.telemetry.disabled is True

    def test_unknown_retry_key(self):
        with pytest.raises(InvalidConfigurationError, match="max_attempts"):
            options_from_dict({"retry": {"max_attempts": 2}})

    def test_section_must_be_mapping(self):
        with pytest.raises(InvalidConfigurationError, match="identity.retry"):
            options_from_dict({"retry": [1, 2]})

    def test_invalid_logging_value(self):
        with pytest.raises(InvalidConfigurationError, match="logging"):
            options_from_dict({"logging": {"slow_request_threshold": "soon"}})


class TestLoadCredentialOptions:
    def test_missing_file_gives_defaults(self, tmp_path):
        options = load_credential_options(tmp_path / "absent.yaml")
        assert options.authority_host is None
        assert options.retry is None

    def test_file_without_section(self, tmp_path):
        path = write_config(tmp_path, "other:\n  key: value\n")
        assert load_credential_options(path).authority_host is None

    def test_full_section(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_APP_ID", "billing-svc")
        path = write_config(
            tmp_path,
            """
            identity:
              authority_host: https://login.example.com/custom
              retry:
                max_retries: 2
                retry_delay: 1
                max_retry_delay: 10
                try_timeout: 15
              logging:
                include_body: yes
              telemetry:
                application_id: ${TEST_APP_ID}
            """,
        )
        options = load_credential_options(str(path))
        assert options.authority_host == "https://login.example.com/custom"
        assert options.retry.max_tries == 3
        assert options.retry.try_timeout == 15.0
        assert options.log_options.include_body is True
        assert options.telemetry.application_id == "billing-svc"

    def test_env_default_for_authority(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TEST_CUSTOM_AUTHORITY", raising=False)
        path = write_config(
            tmp_path,
            """
            identity:
              authority_host: ${TEST_CUSTOM_AUTHORITY:-https://login.microsoftonline.us/}
            """,
        )
        assert load_credential_options(path).authority_host == "https://login.microsoftonline.us/"

    def test_section_must_be_mapping(self, tmp_path):
        path = write_config(tmp_path, "identity: just-a-string\n")
        with pytest.raises(InvalidConfigurationError):
            load_credential_options(path)
