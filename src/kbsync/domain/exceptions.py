"""Domain exceptions."""


class KBSyncError(Exception):
    """Base exception for KBSync."""

    pass


class NotFound(KBSyncError):
    """Requested resource was not found."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(KBSyncError):
    """Validation failed for input data."""

    pass


class InfrastructurePermissionError(KBSyncError):
    """The service cannot write to a backing store at all.

    Fatal for a whole upload batch. The message tells an operator which
    access role is missing.
    """

    def __init__(self, resource: str, required_role: str, detail: str = "") -> None:
        self.resource = resource
        self.required_role = required_role
        self.detail = detail
        super().__init__(self.remediation)

    @property
    def remediation(self) -> str:
        return (
            f"Permission denied. The server does not have permission to write to the {self.resource}. "
            f'Grant the "{self.required_role}" role to the service account running KBSync.'
        )


class TransientError(KBSyncError):
    """Temporary failure; the operation may succeed when retried."""

    pass


class StorageUnavailable(TransientError):
    """Blob store I/O failed for a reason other than permissions or a missing blob."""

    pass


class BlobNotFound(KBSyncError):
    """No blob stored at the given path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Blob not found: {path}")
        self.path = path


class ExtractionFailure(KBSyncError):
    """Text could not be extracted from one document."""

    def __init__(self, file_name: str, reason: str) -> None:
        super().__init__(f"Failed to extract text from '{file_name}': {reason}")
        self.file_name = file_name
        self.reason = reason


class ExtractionTimeout(ExtractionFailure, TransientError):
    """Extraction did not finish before its deadline."""

    def __init__(self, file_name: str, timeout: float) -> None:
        super().__init__(file_name, f"timed out after {timeout:g}s")
        self.timeout = timeout


class AggregateConflict(KBSyncError):
    """Another writer committed the aggregate since it was read."""

    pass


class InvalidStateTransition(KBSyncError):
    """Document lifecycle state cannot move to the requested state."""

    pass
