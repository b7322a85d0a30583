"""
Rider status enumeration.
"""

import enum


class RiderStatus(str, enum.Enum):
    """
    Rider application status.
    
    Status flow:
        PENDING → ACTIVE (admin approval only)
    """
    PENDING = "pending"
    ACTIVE = "active"


# work_status is free-form; this is the value set on dispatch
WORK_STATUS_COLLECTED = "collected"
