"""
Test suite for the policy entry points and settings handling.
"""

import json
import os
import shutil
import tempfile

import pytest

from ingress_policy import PolicySettings, SettingsError, validate, validate_settings
from ingress_policy.log_config import configure_logging

NGINX_KEY = "nginx.ingress.kubernetes.io/force-ssl-redirect"


def build_validation_request(ingress, settings):
    """Build a ValidationRequest payload around an Ingress object."""
    return json.dumps({
        "request": {
            "uid": "705ab4f5-6393-11e8-b7cc-42010a800002",
            "kind": {"group": "networking.k8s.io", "version": "v1", "kind": "Ingress"},
            "operation": "CREATE",
            "object": ingress,
        },
        "settings": settings,
    }).encode()


def new_base_ingress():
    return {
        "apiVersion": "networking.k8s.io/v1",
        "kind": "Ingress",
        "metadata": {
            "name": "test-ingress",
            "namespace": "default",
            "annotations": {NGINX_KEY: "true"},
        },
        "spec": {},
    }


class TestValidate:
    """Test cases for validate()."""

    def run_validate(self, ingress, settings):
        return json.loads(validate(build_validation_request(ingress, settings)))

    def test_disabled_settings_lead_to_approval(self):
        response = self.run_validate(new_base_ingress(), {"validate_force_ssl_redirect": False})
        assert response == {"accepted": True}

    def test_empty_settings_lead_to_approval(self):
        assert self.run_validate(new_base_ingress(), {})["accepted"]
        assert self.run_validate(new_base_ingress(), None)["accepted"]

    def test_force_ssl_redirect_without_tls_is_rejected(self):
        response = self.run_validate(new_base_ingress(), {"validate_force_ssl_redirect": True})
        assert response == {
            "accepted": False,
            "message": "force-ssl-redirect is true but no TLS configuration (spec.tls) is defined",
        }

    def test_mismatched_hosts_are_rejected(self):
        ingress = new_base_ingress()
        ingress["spec"]["rules"] = [{"host": "example.com"}]
        ingress["spec"]["tls"] = [{"hosts": ["other.com"]}]

        response = self.run_validate(ingress, {"validate_force_ssl_redirect": True})
        assert not response["accepted"]
        assert "code" not in response
        assert "missing TLS entries for hosts: example.com" in response["message"]
        assert "TLS has extra hosts not present in rules: other.com" in response["message"]

    def test_matching_hosts_are_accepted(self):
        ingress = new_base_ingress()
        ingress["spec"]["rules"] = [{"host": "example.com"}]
        ingress["spec"]["tls"] = [{"hosts": ["example.com"]}]

        response = self.run_validate(ingress, {"validate_force_ssl_redirect": True})
        assert response == {"accepted": True}

    def test_invalid_json_is_bad_request(self):
        response = json.loads(validate(b"{not json"))
        assert response["accepted"] is False
        assert response["code"] == 400
        assert response["message"]

    def test_missing_request_is_bad_request(self):
        response = json.loads(validate(json.dumps({"settings": {}}).encode()))
        assert response["code"] == 400

    def test_invalid_settings_are_bad_request(self):
        payload = build_validation_request(new_base_ingress(), {"validate_force_ssl_redirect": "yes"})
        response = json.loads(validate(payload))
        assert response["accepted"] is False
        assert response["code"] == 400

    def test_undecodable_ingress_is_bad_request(self):
        ingress = new_base_ingress()
        ingress["spec"]["rules"] = [{"host": 42}]

        response = json.loads(validate(build_validation_request(ingress, {"validate_force_ssl_redirect": True})))
        assert response["accepted"] is False
        assert response["code"] == 400
        assert response["message"].startswith("Cannot decode Ingress object: ")

    def test_missing_object_is_bad_request(self):
        payload = json.dumps({"request": {"uid": "1"}, "settings": {}}).encode()
        response = json.loads(validate(payload))
        assert response["code"] == 400
        assert response["message"].startswith("Cannot decode Ingress object: ")

    def test_null_object_is_accepted(self):
        """A null object decodes to an empty Ingress without annotations."""
        payload = json.dumps({
            "request": {"uid": "1", "operation": "DELETE", "object": None},
            "settings": {"validate_force_ssl_redirect": True},
        }).encode()
        response = json.loads(validate(payload))
        assert response == {"accepted": True}


class TestValidateSettings:
    """Test cases for validate_settings()."""

    def test_valid_settings(self):
        for settings in ({}, {"validate_force_ssl_redirect": True}, {"validate_force_ssl_redirect": False}):
            response = json.loads(validate_settings(json.dumps(settings).encode()))
            assert response == {"valid": True}

    def test_unknown_keys_ignored(self):
        response = json.loads(validate_settings(b'{"other": 1}'))
        assert response["valid"]

    def test_wrong_type_rejected(self):
        response = json.loads(validate_settings(b'{"validate_force_ssl_redirect": "true"}'))
        assert response["valid"] is False
        assert response["message"].startswith("Provided settings are not valid: ")

    def test_malformed_payload_rejected(self):
        response = json.loads(validate_settings(b"not json"))
        assert response["valid"] is False
        assert response["message"].startswith("Provided settings are not valid: ")

    def test_non_object_payload_rejected(self):
        response = json.loads(validate_settings(b"[true]"))
        assert response["valid"] is False


class TestPolicySettingsFile:
    """Test cases for loading settings from files."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def write_file(self, filename, content):
        file_path = os.path.join(self.temp_dir, filename)
        with open(file_path, 'w') as f:
            f.write(content)
        return file_path

    def test_load_yaml(self):
        path = self.write_file("settings.yaml", "validate_force_ssl_redirect: true\n")
        assert PolicySettings.from_file(path).validate_force_ssl_redirect is True

    def test_load_json(self):
        path = self.write_file("settings.json", '{"validate_force_ssl_redirect": false}')
        assert PolicySettings.from_file(path).validate_force_ssl_redirect is False

    def test_empty_file_uses_defaults(self):
        path = self.write_file("settings.yaml", "")
        assert PolicySettings.from_file(path) == PolicySettings()

    def test_missing_file(self):
        with pytest.raises(SettingsError):
            PolicySettings.from_file(os.path.join(self.temp_dir, "missing.yaml"))

    def test_invalid_yaml(self):
        path = self.write_file("settings.yaml", "validate_force_ssl_redirect: [unclosed\n")
        with pytest.raises(SettingsError):
            PolicySettings.from_file(path)

    def test_invalid_value(self):
        path = self.write_file("settings.yaml", "validate_force_ssl_redirect: maybe\n")
        with pytest.raises(SettingsError):
            PolicySettings.from_file(path)


class TestConfigureLogging:
    """Test cases for logging configuration."""

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError, match="Unknown log level: verbose"):
            configure_logging("verbose")
