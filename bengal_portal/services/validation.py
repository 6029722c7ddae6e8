# bengal_portal/services/validation.py
"""Checks shared by the job, quote, identity and chat services."""

import math

from bengal_portal.errors import ValidationError


def clean_text(value, field_name):
    """
    Strip a client-supplied text value.

    Returns:
        str or None: None when the value is absent

    Raises:
        ValidationError: when the value is not a string
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text, got {type(value).__name__}")
    return value.strip()


def clean_amount(value, field_name):
    """
    Parse a non-negative, finite currency value.

    Raises:
        ValidationError: for non-numeric, negative, NaN or infinite values
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got '{value}'")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number, got '{value}'")
    if not math.isfinite(amount):
        raise ValidationError(f"{field_name} must be a finite number")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount


def clean_images(images):
    """List of image references (data URLs or paths); blanks are dropped."""
    if images is None:
        return []
    if isinstance(images, str):
        images = [images]
    if not isinstance(images, (list, tuple)):
        raise ValidationError("images must be a list")
    cleaned = []
    for image in images:
        image = clean_text(image, 'image')
        if image:
            cleaned.append(image)
    return cleaned
