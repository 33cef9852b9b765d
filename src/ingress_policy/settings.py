"""
Policy Settings Module

Settings accepted by the policy and helpers to load them from request
payloads or from a settings file.
"""

import json
import os
from typing import Any, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError


class SettingsError(Exception):
    """Raised when a settings payload or file cannot be decoded."""


class PolicySettings(BaseModel):
    """
    Policy settings.

    When ``validate_force_ssl_redirect`` is true, an Ingress that enables
    force-ssl-redirect must define TLS, and the TLS hosts must match the
    rule hosts one-to-one.
    """

    model_config = ConfigDict(extra='ignore', frozen=True)

    validate_force_ssl_redirect: StrictBool = False

    def valid(self) -> Tuple[bool, Optional[str]]:
        """No combination of values is invalid for a single boolean."""
        return True, None

    @classmethod
    def from_raw(cls, raw: Any) -> 'PolicySettings':
        """
        Build settings from an already-parsed JSON value.

        Args:
            raw: Mapping of settings, or None for defaults

        Returns:
            PolicySettings instance
        """
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise SettingsError(f"settings must be an object, got {type(raw).__name__}")
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise SettingsError(str(e)) from e

    @classmethod
    def from_json(cls, payload: bytes) -> 'PolicySettings':
        try:
            raw = json.loads(payload)
        except ValueError as e:
            raise SettingsError(str(e)) from e
        return cls.from_raw(raw)

    @classmethod
    def from_file(cls, path: str) -> 'PolicySettings':
        """
        Load settings from a YAML (or JSON) file.

        Args:
            path: Path to the settings file

        Returns:
            PolicySettings instance
        """
        if not os.path.exists(path):
            raise SettingsError(f"Settings file not found: {path}")

        with open(path, 'r') as f:
            try:
                raw = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise SettingsError(f"Cannot parse settings file {path}: {e}") from e

        return cls.from_raw(raw)
