"""Enum definitions for application constants."""

from enum import Enum


class Role(str, Enum):
    """
    User roles with increasing privilege levels.

    - EMPLOYEE: works assigned companies, files data requests
    - TL: team lead, decides requests for the team
    - MANAGER: TL plus user management and direct company assignment
    - ADMIN: everything, including user deletion and holidays
    """
    EMPLOYEE = "employee"
    TL = "tl"
    MANAGER = "manager"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class CompanyStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class CompanyCategory(str, Enum):
    """
    Dashboard classification of a company.

    ASSIGNED is the initial value; the other three are only ever set by
    a comment (latest comment wins).
    """
    ASSIGNED = "assigned"
    FOLLOWUP = "followup"
    HOT = "hot"
    BLOCK = "block"


class CommentCategory(str, Enum):
    FOLLOWUP = "followup"
    HOT = "hot"
    BLOCK = "block"


class RequestStatus(str, Enum):
    """
    Data request lifecycle.

    pending → approved | rejected (both terminal)
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RequestDecision(str, Enum):
    """Allowed bodies for a status update."""
    APPROVED = "approved"
    REJECTED = "rejected"


class RequestKind(str, Enum):
    """Which allocation pool a request draws from."""
    DATA = "data"
    FACEBOOK = "facebook"


class HolidayDuration(str, Enum):
    FULL_DAY = "full_day"
    HALF_DAY = "half_day"
    EXTENDED = "extended"
