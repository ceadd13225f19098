from enum import Enum
import sqlalchemy as sa
from sqlalchemy import Column


class UserRole(str, Enum):
    USER = 'user'
    ADMIN = 'admin'


class CrimeType(str, Enum):
    THEFT = 'theft'
    BURGLARY = 'burglary'
    ASSAULT = 'assault'
    FRAUD = 'fraud'
    VANDALISM = 'vandalism'
    SUSPICIOUS_ACTIVITY = 'suspicious-activity'
    OTHER = 'other'


class ReportStatus(str, Enum):
    PENDING = 'pending'
    REVIEWING = 'reviewing'
    VERIFIED = 'verified'
    RESOLVED = 'resolved'
    REJECTED = 'rejected'


def enum_column(enum_cls: type[Enum], name: str, index: bool = False) -> Column:
    return Column(
        sa.Enum(
            enum_cls,
            values_callable=lambda enum: [item.value for item in enum],
            name=name,
        ),
        nullable=False,
        index=index,
    )
