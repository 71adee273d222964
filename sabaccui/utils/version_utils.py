"""Version management utilities"""

from typing import Optional

from packaging.version import parse, Version, InvalidVersion


def parse_version(version_str: str) -> Optional[Version]:
    """
    Parse version string

    Args:
        version_str: Version string

    Returns:
        Version object or None if invalid
    """
    try:
        return parse(version_str)
    except (InvalidVersion, TypeError):
        return None


def is_valid_version(version_str: str) -> bool:
    """Check if a string is a parseable version"""
    return parse_version(version_str) is not None
