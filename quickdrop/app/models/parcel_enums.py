"""
Parcel status enumerations.
"""

import enum
from typing import Optional


class PaymentStatus(str, enum.Enum):
    """
    Payment status of a parcel.
    
    Status flow:
        UNPAID → PAID (exactly once)
    """
    UNPAID = "unpaid"
    PAID = "paid"


class DeliveryStatus(str, enum.Enum):
    """
    Delivery status of a parcel.
    
    Status flow (forward only):
        NOT_DELIVERED → RIDER_ASSIGNED → IN_TRANSIT → DELIVERED
    """
    NOT_DELIVERED = "not_delivered"
    RIDER_ASSIGNED = "rider_assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"

    @classmethod
    def parse(cls, value) -> Optional["DeliveryStatus"]:
        """
        Normalize a client-supplied status.
        
        Accepts the legacy spellings ("rider assigned", "in-transit", ...).
        Returns None for anything unrecognized.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(normalized)
        except ValueError:
            return None


# Statuses a parcel is in while a rider still has it in hand
ACTIVE_DELIVERY_STATUSES = (DeliveryStatus.RIDER_ASSIGNED, DeliveryStatus.IN_TRANSIT)


class ParcelType(str, enum.Enum):
    DOCUMENT = "document"
    NON_DOCUMENT = "non-document"
