"""
Policy Entry Points

Decode incoming payloads, run the evaluator and encode its verdict. Any
payload that cannot be decoded is rejected with a 400 code instead of
raising.
"""

from pydantic import ValidationError

from .evaluator import evaluate_ingress
from .log_config import get_logger
from .models import Ingress
from .protocol import HTTP_BAD_REQUEST, ValidationRequest, encode_settings_response, encode_verdict
from .settings import PolicySettings, SettingsError
from .verdict import Reject

logger = get_logger(__name__)


def validate(payload: bytes) -> bytes:
    """
    Validate an admission request payload.

    Args:
        payload: JSON-encoded ValidationRequest

    Returns:
        JSON-encoded validation response
    """
    try:
        validation_request = ValidationRequest.model_validate_json(payload)
    except ValidationError as e:
        return encode_verdict(Reject(str(e), code=HTTP_BAD_REQUEST))

    try:
        settings = PolicySettings.from_raw(validation_request.settings)
    except SettingsError as e:
        return encode_verdict(Reject(str(e), code=HTTP_BAD_REQUEST))

    admission_request = validation_request.request
    if "object" in admission_request.model_fields_set and admission_request.object is None:
        # A null object (e.g. DELETE) decodes to an empty Ingress
        ingress = Ingress()
    else:
        try:
            ingress = Ingress.model_validate(admission_request.object)
        except ValidationError as e:
            return encode_verdict(Reject(f"Cannot decode Ingress object: {e}", code=HTTP_BAD_REQUEST))

    logger.debug("validating ingress object", name=ingress.name, namespace=ingress.namespace)

    return encode_verdict(evaluate_ingress(settings, ingress, logger=logger))


def validate_settings(payload: bytes) -> bytes:
    """Validate a settings payload."""
    logger.info("validating settings")

    try:
        settings = PolicySettings.from_json(payload)
    except SettingsError as e:
        return encode_settings_response(False, f"Provided settings are not valid: {e}")

    valid, error = settings.valid()
    if error:
        return encode_settings_response(False, f"Provided settings are not valid: {error}")
    if valid:
        return encode_settings_response(True)

    logger.warning("rejecting settings")
    return encode_settings_response(False, "Provided settings are not valid")

