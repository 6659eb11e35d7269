# employee_sync/common/exceptions/exceptions.py
# =============================================================================
# Custom exceptions for Employee Sync
# =============================================================================


class EmployeeSyncException(Exception):
    """Base exception for Employee Sync"""
    pass


class ValidationError(EmployeeSyncException):
    """Raised when validation fails"""
    pass


class MalformedPayloadError(ValidationError):
    """Raised when a broker message cannot be decoded into an employee event.

    Never retried: the message is acknowledged and dropped.
    """
    pass


class NotFoundError(EmployeeSyncException):
    """Raised when a resource is not found"""
    pass


class EmployeeNotFoundError(NotFoundError):
    """Raised when the HR service has no record for the requested employee"""

    def __init__(self, employee_id: int, country: str = None):
        self.employee_id = employee_id
        self.country = country
        super().__init__(f"Employee {employee_id} not found" + (f" for {country}" if country else ""))


class InfrastructureError(EmployeeSyncException):
    """Raised for infrastructure errors"""
    pass


class TransientInfrastructureError(InfrastructureError):
    """Broker or cache backend temporarily unreachable. The message is requeued."""
    pass


class CacheUnavailableError(TransientInfrastructureError):
    """Raised when the cache backend rejects or cannot serve a delete"""
    pass


class BrokerUnavailableError(TransientInfrastructureError):
    """Raised when the message broker cannot be reached"""
    pass


class UpstreamUnavailableError(InfrastructureError):
    """Raised when the HR read API cannot serve a request.

    Surfaced to the caller of the read path as service-unavailable; never
    retried automatically.
    """

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)
