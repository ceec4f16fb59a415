"""
pathtemplate error types.

Specific exceptions for different failure modes, enabling callers
to handle each case appropriately (treat as absent, abort, refuse
to create a socket, etc.).
"""


class PathTemplateError(Exception):
    """Base error for all pathtemplate operations."""
    pass


# Persistence errors
class MalformedRecordError(PathTemplateError):
    """Serialized record has no terminator within its bound, or is otherwise corrupt."""
    pass


# Provisioning errors
class ProvisioningError(PathTemplateError):
    """Base error for directory provisioning failures."""
    pass


class DirectoryCreationError(ProvisioningError):
    """A directory could not be created (or inspected) for a reason other than existing."""
    def __init__(self, path: str, reason: str, operation: str = "mkdir"):
        self.path = path
        self.reason = reason
        self.operation = operation
        super().__init__(f"{path}: {operation}: {reason}")


class InsecureDirectoryError(ProvisioningError):
    """Directory exists but must not be trusted with private files."""
    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class OwnershipError(InsecureDirectoryError):
    """Directory is owned by somebody other than the calling user."""
    def __init__(self, path: str, uid: int):
        self.uid = uid
        super().__init__(path, f"directory owned by uid {uid}, not by us")


class PermissionBitsError(InsecureDirectoryError):
    """Directory grants some access to group or other."""
    def __init__(self, path: str, mode: int):
        self.mode = mode
        super().__init__(
            path,
            f"directory has overgenerous permissions {mode & 0o777:03o} (expected 700)",
        )
