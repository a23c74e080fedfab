"""
Reasons a registration or wishlist transaction declines to apply its change.

Each value is translated to an exception by the outcome table in
app/dto/transaction_outcome.py.
"""

from enum import StrEnum


class RegistrationReason(StrEnum):
    NOT_FOUND = 'NOT_FOUND'
    ALREADY_REGISTERED = 'ALREADY_REGISTERED'
    NO_SEATS_AVAILABLE = 'NO_SEATS_AVAILABLE'
    NOT_REGISTERED = 'NOT_REGISTERED'
    ALREADY_IN_WISHLIST = 'ALREADY_IN_WISHLIST'
    NOT_IN_WISHLIST = 'NOT_IN_WISHLIST'
    UNKNOWN = 'UNKNOWN'  # Unexpected exception inside the transaction body
    CONFLICT = 'CONFLICT'  # Optimistic commit lost to a concurrent writer
