# bengal_portal/models/customer.py

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CustomerProfile:
    """A customer as seen through the job history; never stored on its own."""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @classmethod
    def from_job(cls, job):
        return cls(
            id=job.customer_id,
            name=job.customer_name,
            email=job.customer_email,
            phone=job.customer_phone,
            address=job.customer_address,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
        }
