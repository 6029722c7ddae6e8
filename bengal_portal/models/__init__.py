# bengal_portal/models/__init__.py

from .base import db

# 1. Storage table
from .stored_collection import StoredCollection

# 2. Identity
from .user import User, Role, DEMO_USERS, DEMO_CUSTOMER, DEMO_ADMIN

# 3. Core business records
from .job import Job, JobNote, JobStatus, PaymentStatus
from .quote import QuoteRequest, QuoteStatus
from .product import Product, DEFAULT_CATALOG, find_product

# 4. Derived and auxiliary records
from .customer import CustomerProfile
from .chat import ChatTurn

__all__ = [
    'db',
    'StoredCollection',
    'User',
    'Role',
    'DEMO_USERS',
    'DEMO_CUSTOMER',
    'DEMO_ADMIN',
    'Job',
    'JobNote',
    'JobStatus',
    'PaymentStatus',
    'QuoteRequest',
    'QuoteStatus',
    'Product',
    'DEFAULT_CATALOG',
    'find_product',
    'CustomerProfile',
    'ChatTurn',
]
