# =============================================================================
# File: employee_sync/common/enums/enums.py
# Description: Common enumerations for Employee Sync
# =============================================================================

from enum import Enum


class EmployeeEventType(str, Enum):
    """Mutation kinds published by the HR service"""

    CREATED = "EmployeeCreated"
    UPDATED = "EmployeeUpdated"
    DELETED = "EmployeeDeleted"

    @property
    def routing_key(self) -> str:
        """Topic routing key, e.g. employee.updated"""
        return f"employee.{self.value[len('Employee'):].lower()}"


class Country(str, Enum):
    """Countries with a checklist rule set"""

    USA = "USA"
    GERMANY = "Germany"


class ProcessingOutcome(str, Enum):
    """Terminal states of a delivered broker message"""

    ACKNOWLEDGED = "acknowledged"
    DROPPED = "dropped"
    REQUEUED = "requeued"
