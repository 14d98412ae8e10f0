class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class AllocationError(AppError):
    """Raised when the allocator cannot satisfy a request."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )

class ResourceExhaustionError(AllocationError):
    """Raised when there is nothing to allocate into (e.g. no venues exist)."""

class NoSlotAvailableError(AllocationError):
    """Raised when every candidate slot was rejected for a course."""
    def __init__(self, course_code: str, rejections: dict[str, int]):
        super().__init__(
            f"No available slot found for {course_code}",
            details={"course_code": course_code, "rejections": rejections},
        )

class AlreadyScheduledError(AllocationError):
    """Raised when a course already has an entry in the persisted schedule."""
    def __init__(self, course_code: str):
        super().__init__(f"{course_code} is already scheduled", details={"course_code": course_code})

class AllocationBusyError(AllocationError):
    """Raised when another allocation run holds the schedule lock."""

class AllocationCancelledError(AllocationError):
    """Raised when a bulk run is cancelled between courses."""

class PersistenceError(AppError):
    """Raised when a repository read or write fails."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
