# bengal_portal/models/job.py

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class JobStatus(str, Enum):
    PENDING = 'PENDING'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'


class PaymentStatus(str, Enum):
    PAID = 'PAID'
    UNPAID = 'UNPAID'
    PARTIAL = 'PARTIAL'


@dataclass(frozen=True)
class JobNote:
    id: str
    text: str
    timestamp: str
    author: str
    images: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'id': self.id,
            'text': self.text,
            'timestamp': self.timestamp,
            'author': self.author,
            'images': list(self.images),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            text=data.get('text', ''),
            timestamp=data['timestamp'],
            author=data.get('author', ''),
            images=list(data.get('images') or []),
        )


@dataclass
class Job:
    id: str
    title: str
    customer_id: str
    start_date: str
    warranty_end_date: str
    description: str = ''
    status: JobStatus = JobStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    amount: float = 0.0
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    notes: List[JobNote] = field(default_factory=list)

    # Serialized name -> attribute name for the fields an edit may touch.
    EDITABLE_FIELDS = {
        'title': 'title',
        'description': 'description',
        'customerId': 'customer_id',
        'customerName': 'customer_name',
        'customerEmail': 'customer_email',
        'customerPhone': 'customer_phone',
        'customerAddress': 'customer_address',
        'status': 'status',
        'startDate': 'start_date',
        'warrantyEndDate': 'warranty_end_date',
        'paymentStatus': 'payment_status',
        'amount': 'amount',
    }

    def to_dict(self):
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'customerId': self.customer_id,
            'status': self.status.value,
            'startDate': self.start_date,
            'warrantyEndDate': self.warranty_end_date,
            'paymentStatus': self.payment_status.value,
            'amount': self.amount,
            'notes': [note.to_dict() for note in self.notes],
        }
        for key, attr in (('customerName', 'customer_name'),
                          ('customerEmail', 'customer_email'),
                          ('customerPhone', 'customer_phone'),
                          ('customerAddress', 'customer_address')):
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            title=data['title'],
            description=data.get('description', ''),
            customer_id=data.get('customerId') or '',
            customer_name=data.get('customerName'),
            customer_email=data.get('customerEmail'),
            customer_phone=data.get('customerPhone'),
            customer_address=data.get('customerAddress'),
            status=JobStatus(data.get('status', JobStatus.PENDING.value)),
            start_date=data['startDate'],
            warranty_end_date=data['warrantyEndDate'],
            payment_status=PaymentStatus(data.get('paymentStatus', PaymentStatus.UNPAID.value)),
            amount=float(data.get('amount', 0)),
            notes=[JobNote.from_dict(n) for n in data.get('notes') or []],
        )

    def __repr__(self):
        return f'<Job id={self.id} customer={self.customer_id} status={self.status.value}>'
