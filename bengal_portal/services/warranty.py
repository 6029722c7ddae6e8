# bengal_portal/services/warranty.py

import math
from collections import namedtuple
from enum import Enum

from bengal_portal.services.date_utils import parse_iso_datetime, utc_now

EXPIRING_SOON_DAYS = 30
SECONDS_PER_DAY = 24 * 60 * 60


class WarrantyLabel(str, Enum):
    ACTIVE = 'Active'
    EXPIRING_SOON = 'Expiring Soon'
    EXPIRED = 'Expired'


WarrantyStatus = namedtuple('WarrantyStatus', ['remaining_days', 'label'])


def classify(end_date_iso, now=None):
    """
    Classify a warranty end date relative to `now`.

    Remaining days are rounded up, so a warranty ending 10 days and one hour
    from now reports 11. Anything at or past its end date is Expired with 0
    days remaining; 30 days or fewer is Expiring Soon.
    """
    now = now or utc_now()
    diff = parse_iso_datetime(end_date_iso) - now
    seconds = diff.total_seconds()

    if seconds <= 0:
        return WarrantyStatus(0, WarrantyLabel.EXPIRED)

    remaining_days = math.ceil(seconds / SECONDS_PER_DAY)
    if remaining_days <= EXPIRING_SOON_DAYS:
        return WarrantyStatus(remaining_days, WarrantyLabel.EXPIRING_SOON)
    return WarrantyStatus(remaining_days, WarrantyLabel.ACTIVE)


def warranty_to_dict(status):
    return {'remainingDays': status.remaining_days, 'label': status.label.value}
