from enum import Enum
from typing import Optional


class DeleteState(Enum):
    DELETED = "Deleted"
    SUBMIT_FAILED = "SubmitFailed"
    CONFIRM_TIMEOUT = "ConfirmTimeout"
    CANCELLED = "Cancelled"


class ConfigError(Exception):
    pass


# Gateway failures
class GatewayError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class GatewayConflict(GatewayError):
    pass


class GatewayNotFound(GatewayError):
    pass


class GatewayTransport(GatewayError):
    pass


# Lifecycle outcomes
class LifecycleError(Exception):
    state: DeleteState

    def __init__(self, name: str, message: str):
        super().__init__(message)
        self.name = name
        self.message = message


class DeleteSubmitFailed(LifecycleError):
    state = DeleteState.SUBMIT_FAILED


class DeleteConfirmTimeout(LifecycleError):
    state = DeleteState.CONFIRM_TIMEOUT


class DeleteCancelled(LifecycleError):
    state = DeleteState.CANCELLED


class InvalidTTL(ValueError):
    def __init__(self, ttl_hours, message: str):
        super().__init__(message)
        self.ttl_hours = ttl_hours
        self.message = message
