# bengal_portal/models/quote.py

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class QuoteStatus(str, Enum):
    NEW = 'NEW'
    QUOTED = 'QUOTED'
    PAID = 'PAID'


@dataclass
class QuoteRequest:
    id: str
    product_name: str
    product_image: str
    customer_id: str
    customer_name: str
    customer_email: str
    date: str
    status: QuoteStatus = QuoteStatus.NEW
    price: Optional[float] = None
    admin_notes: Optional[str] = None
    customer_notes: Optional[str] = None
    appliance_image: Optional[str] = None

    @property
    def is_open(self):
        return self.status in (QuoteStatus.NEW, QuoteStatus.QUOTED)

    def to_dict(self):
        data = {
            'id': self.id,
            'productName': self.product_name,
            'productImage': self.product_image,
            'customerId': self.customer_id,
            'customerName': self.customer_name,
            'customerEmail': self.customer_email,
            'date': self.date,
            'status': self.status.value,
        }
        optional = {
            'price': self.price,
            'adminNotes': self.admin_notes,
            'customerNotes': self.customer_notes,
            'applianceImage': self.appliance_image,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def from_dict(cls, data):
        price = data.get('price')
        return cls(
            id=data['id'],
            product_name=data['productName'],
            product_image=data.get('productImage', ''),
            customer_id=data['customerId'],
            customer_name=data.get('customerName', ''),
            customer_email=data.get('customerEmail', ''),
            date=data['date'],
            status=QuoteStatus(data.get('status', QuoteStatus.NEW.value)),
            price=float(price) if price is not None else None,
            admin_notes=data.get('adminNotes'),
            customer_notes=data.get('customerNotes'),
            appliance_image=data.get('applianceImage'),
        )

    def __repr__(self):
        return f'<QuoteRequest id={self.id} product={self.product_name} status={self.status.value}>'
