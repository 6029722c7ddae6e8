# bengal_portal/services/references.py

import random
import logging

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 200


def generate_reference(prefix, taken=(), lowest=0, highest=9999, rng=random):
    """
    Random `PREFIX-####` reference that is not already in `taken`.

    Raises:
        RuntimeError: if no free reference turns up within MAX_ATTEMPTS draws
    """
    taken = set(taken)
    for _ in range(MAX_ATTEMPTS):
        candidate = f"{prefix}-{rng.randint(lowest, highest):04d}"
        if candidate not in taken:
            return candidate
    logger.error(f"Reference space for '{prefix}' exhausted ({len(taken)} in use)")
    raise RuntimeError(f"No free {prefix} reference after {MAX_ATTEMPTS} attempts")
