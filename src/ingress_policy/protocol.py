"""
Policy Protocol Module

Request envelope received by the policy and the encoders for its responses.
"""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from .verdict import Verdict

HTTP_BAD_REQUEST = 400


class KubernetesAdmissionRequest(BaseModel):
    model_config = ConfigDict(extra='ignore')

    uid: str = ""
    object: Any = None


class ValidationRequest(BaseModel):
    """Admission request together with the policy settings."""

    model_config = ConfigDict(extra='ignore')

    request: KubernetesAdmissionRequest
    settings: Any = None


def encode_verdict(verdict: Verdict) -> bytes:
    return json.dumps(verdict.to_dict()).encode('utf-8')


def encode_settings_response(valid: bool, message: Optional[str] = None) -> bytes:
    response: Dict[str, Any] = {'valid': valid}
    if message is not None:
        response['message'] = message
    return json.dumps(response).encode('utf-8')
