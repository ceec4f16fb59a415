"""
pathtemplate — Path templates, legacy migration and private directories.

Expand ~ and $VARIABLE references in user-supplied paths, keep old
literal paths meaning what they meant, and refuse directories that
somebody else could read or plant.
"""

__version__ = "0.1.0"

from .errors import (
    DirectoryCreationError,
    InsecureDirectoryError,
    MalformedRecordError,
    OwnershipError,
    PathTemplateError,
    PermissionBitsError,
)
from .handles import DisplayNameHandle, PathHandle
from .expand import expand
from .legacy import escape_template, migrate
from .storage import (
    ParentStatus,
    create_path_chain,
    ensure_parent_exists,
    verify_exclusive_ownership,
)
from .resolve import prepare_output_path, resolve_template, sanitise_char, sanitise_name
from .store import SettingsStore, decode_settings, encode_settings

__all__ = [
    "PathHandle", "DisplayNameHandle", "expand", "migrate", "escape_template",
    "create_path_chain", "verify_exclusive_ownership", "ensure_parent_exists", "ParentStatus",
    "resolve_template", "prepare_output_path", "sanitise_char", "sanitise_name",
    "SettingsStore", "encode_settings", "decode_settings",
    "PathTemplateError", "MalformedRecordError", "DirectoryCreationError",
    "InsecureDirectoryError", "OwnershipError", "PermissionBitsError",
]
