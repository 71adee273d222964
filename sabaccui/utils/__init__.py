"""Utility functions for sabaccui-cli"""

from .file_utils import (
    calculate_file_hash_async,
    files_identical,
    copy_file_async,
    default_sibling_path,
    is_within,
    write_json,
    safe_remove,
)

from .version_utils import (
    parse_version,
    is_valid_version,
)

from .async_utils import (
    run_async,
    sync_to_async,
)

from .git_utils import (
    SourceReference,
    parse_source_reference,
    clone_command,
    init_commands,
)

__all__ = [
    # File utilities
    "calculate_file_hash_async",
    "files_identical",
    "copy_file_async",
    "default_sibling_path",
    "is_within",
    "write_json",
    "safe_remove",

    # Version utilities
    "parse_version",
    "is_valid_version",

    # Async utilities
    "run_async",
    "sync_to_async",

    # Git utilities
    "SourceReference",
    "parse_source_reference",
    "clone_command",
    "init_commands",
]
