# bengal_portal/middleware/request_body.py
from flask import request

from bengal_portal.errors import ValidationError


def json_object_body(required=True):
    """
    Read the request body as a JSON object.

    Args:
        required (bool): when False a missing body reads as {}

    Raises:
        ValidationError: missing (when required) or not a JSON object
    """
    data = request.get_json(silent=True)
    if data is None:
        if required:
            raise ValidationError("Request body must be JSON")
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
