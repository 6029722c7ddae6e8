# bengal_portal/models/user.py

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from flask_login import UserMixin


class Role(str, Enum):
    CUSTOMER = 'CUSTOMER'
    ADMIN = 'ADMIN'


@dataclass
class User(UserMixin):
    id: str
    name: str
    email: str
    role: Role
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None

    PROFILE_FIELDS = ('name', 'email', 'phone', 'address')

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    def with_profile(self, fields):
        """Returns a copy with the editable profile fields merged in."""
        changes = {k: fields[k] for k in self.PROFILE_FIELDS if k in fields}
        return replace(self, **changes)

    def to_dict(self):
        data = {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role.value,
        }
        for key in ('phone', 'address', 'avatar'):
            if getattr(self, key) is not None:
                data[key] = getattr(self, key)
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data['id']),
            name=data['name'],
            email=data['email'],
            role=Role(data['role']),
            phone=data.get('phone'),
            address=data.get('address'),
            avatar=data.get('avatar'),
        )

    def __repr__(self):
        return f'<User id={self.id} name={self.name} role={self.role.value}>'


# Canned identities offered by the role-selection login.
DEMO_CUSTOMER = User(
    id='u1',
    name='John Doe Engineering',
    email='john@doe-eng.com',
    role=Role.CUSTOMER,
    avatar='https://picsum.photos/seed/john/100',
)

DEMO_ADMIN = User(
    id='a1',
    name='Admin Manager',
    email='admin@bengalwelding.co.uk',
    role=Role.ADMIN,
    avatar='https://picsum.photos/seed/admin/100',
)

DEMO_USERS = {
    Role.CUSTOMER: DEMO_CUSTOMER,
    Role.ADMIN: DEMO_ADMIN,
}
