"""Custom exception classes for zkcloud."""


class ZkCloudError(Exception):
    """Base exception for zkcloud."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(ZkCloudError):
    """Request or argument validation failure."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class EmptyInputError(ZkCloudError):
    """A recursive proof was requested over zero transactions."""

    def __init__(self, message: str = "No transactions to process"):
        super().__init__("EMPTY_INPUT", message, status_code=400)


class NotFoundError(ZkCloudError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} '{resource_id}' not found",
            status_code=404,
        )


class WorkerNotResolvedError(ZkCloudError):
    """The worker factory did not produce a usable worker."""

    def __init__(self, message: str = "worker is undefined"):
        super().__init__("WORKER_NOT_RESOLVED", message, status_code=422)


class UnsupportedOperationError(ZkCloudError):
    """The cloud variant or worker does not implement this capability."""

    def __init__(self, operation: str):
        super().__init__(
            "NOT_APPLICABLE",
            f"{operation} is not supported",
            status_code=501,
        )


class ProofCreationError(ZkCloudError):
    """worker.create returned no proof."""

    def __init__(self, index: int):
        super().__init__(
            "PROOF_CREATION_FAILED",
            "Failed to create proof",
            details={"transaction_index": index},
        )


class ProofMergeError(ZkCloudError):
    """worker.merge returned no proof."""

    def __init__(self, index: int):
        super().__init__(
            "PROOF_MERGE_FAILED",
            "Failed to merge proofs",
            details={"proof_index": index},
        )


class SnapshotError(ZkCloudError):
    """A storage snapshot could not be decoded."""

    def __init__(self, name: str, message: str):
        super().__init__("SNAPSHOT_ERROR", f"Snapshot '{name}': {message}")
