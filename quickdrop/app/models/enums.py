"""
User roles enumeration.

Defines the role types for the parcel delivery platform.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.
    
    Roles:
        USER: Default role for anyone who signs up (parcel senders)
        RIDER: Promoted on rider approval; delivers parcels and cashes out
        ADMIN: Approves riders, manages roles, deletes records
    """
    USER = "user"
    RIDER = "rider"
    ADMIN = "admin"
