"""Git operation utilities"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

# Shorthand prefixes accepted in a manifest ``source`` field
_HOSTS = {
    'github': 'github.com',
    'gitlab': 'gitlab.com',
    'bitbucket': 'bitbucket.org',
}

_SHORTHAND = re.compile(
    r'^(?:(?P<host>github|gitlab|bitbucket):)?'
    r'(?P<user>[\w.-]+)/(?P<repo>[\w.-]+?)(?:\.git)?'
    r'(?:#(?P<ref>[\w./-]+))?$'
)


@dataclass
class SourceReference:
    """A parsed repository reference"""
    url: str
    ref: Optional[str] = None


def parse_source_reference(source: str) -> SourceReference:
    """
    Parse a repository reference

    Accepts ``user/repo``, ``user/repo#ref``, ``github:user/repo`` (also
    ``gitlab:`` and ``bitbucket:``) or a full git URL with an optional
    ``#ref`` suffix.

    Args:
        source: Reference as written in a manifest

    Returns:
        SourceReference

    Raises:
        ValueError: If the reference cannot be parsed
    """
    source = (source or "").strip()
    if not source:
        raise ValueError("empty source reference")

    if '://' in source or source.startswith('git@'):
        url, _, ref = source.partition('#')
        return SourceReference(url=url, ref=ref or None)

    match = _SHORTHAND.match(source)
    if not match:
        raise ValueError(f"unrecognized source reference '{source}'")

    host = _HOSTS[match.group('host') or 'github']
    return SourceReference(
        url=f"https://{host}/{match.group('user')}/{match.group('repo')}.git",
        ref=match.group('ref')
    )


def clone_command(reference: SourceReference, target: Path) -> List[str]:
    """Shallow clone command for a reference"""
    command = ['git', 'clone', '--depth', '1']
    if reference.ref:
        command.extend(['--branch', reference.ref])
    command.extend([reference.url, str(target)])
    return command


def init_commands() -> List[List[str]]:
    """Commands that turn a directory into a fresh repository with staged files"""
    return [
        ['git', 'init'],
        ['git', 'add', '.'],
    ]
