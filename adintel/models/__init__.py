from adintel.models.models import (
    User,
    Creative,
    Analysis,
    SOURCE_OWN,
    SOURCE_COMPETITOR,
    SOURCE_TYPES,
    PAYMENT_FREE,
    PAYMENT_PAID
)

__all__ = [
    'User',
    'Creative',
    'Analysis',
    'SOURCE_OWN',
    'SOURCE_COMPETITOR',
    'SOURCE_TYPES',
    'PAYMENT_FREE',
    'PAYMENT_PAID'
]
