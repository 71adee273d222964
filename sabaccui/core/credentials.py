"""Credential store backed by a netrc file"""

import logging
import netrc
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..constants import CATALOG_HOST, ENV_LOGIN, ENV_NETRC, ENV_TOKEN

logger = logging.getLogger(__name__)


@dataclass
class Credentials:
    """Transient copy of a stored login"""
    email: str
    token: str


def default_netrc_path() -> Path:
    override = os.environ.get(ENV_NETRC)
    if override:
        return Path(override).expanduser()
    return Path.home() / '.netrc'


class CredentialStore:
    """Reads and writes machine entries in a netrc file

    Environment variables take precedence for the catalog host when both
    the login and the token variable are set.
    """

    def __init__(self, netrc_path: Optional[Path] = None):
        self.netrc_path = Path(netrc_path) if netrc_path else default_netrc_path()

    def _read_hosts(self) -> Dict[str, Tuple[str, Optional[str], str]]:
        if not self.netrc_path.exists():
            return {}
        try:
            return dict(netrc.netrc(str(self.netrc_path)).hosts)
        except (netrc.NetrcParseError, OSError) as e:
            logger.warning(f"Could not read {self.netrc_path}: {e}")
            return {}

    def _read_text(self) -> str:
        if not self.netrc_path.exists():
            return ""
        return self.netrc_path.read_text()

    def _write_text(self, text: str) -> None:
        self.netrc_path.parent.mkdir(parents=True, exist_ok=True)
        self.netrc_path.write_text(text)
        if os.name != "nt":
            os.chmod(self.netrc_path, 0o600)

    def get(self, host: str = CATALOG_HOST) -> Optional[Credentials]:
        """Resolve credentials for a host"""
        if host == CATALOG_HOST:
            env_login = os.environ.get(ENV_LOGIN)
            env_token = os.environ.get(ENV_TOKEN)
            if env_login and env_token:
                return Credentials(email=env_login, token=env_token)

        entry = self._read_hosts().get(host)
        if not entry:
            return None

        login, _account, password = entry
        return Credentials(email=login or "", token=password or "")

    def set(self, credentials: Credentials, host: str = CATALOG_HOST) -> None:
        """Store credentials for a host, leaving every other entry untouched"""
        text = self._read_text()
        block = format_machine_block(host, credentials.email, credentials.token)
        spans = machine_spans(text, host)

        if spans:
            start, end = spans[0]
            text = text[:start] + block + text[end:]
            text = remove_spans(text, _shift(spans[1:], len(block) - (end - start)))
        else:
            if text and not text.endswith('\n'):
                text += '\n'
            text += block

        self._write_text(text)
        logger.debug(f"Stored credentials for {host} in {self.netrc_path}")

    def clear(self, host: str = CATALOG_HOST) -> None:
        text = self._read_text()
        spans = machine_spans(text, host)
        if spans:
            self._write_text(remove_spans(text, spans))


_TOKEN = re.compile(r'\s*("(?:[^"\\]|\\.)*"|\S+)')


def _unquote(token: str) -> str:
    if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
        return re.sub(r'\\(.)', r'\1', token[1:-1])
    return token


def quote_token(value: str) -> str:
    """Quote a netrc token when it contains whitespace, quotes or a comment marker"""
    if value and not re.search(r'[\s"\\#]', value):
        return value
    escaped = value.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


def format_machine_block(host: str, login: str, password: str) -> str:
    lines = [f"machine {host}"]
    if login:
        lines.append(f"  login {quote_token(login)}")
    if password:
        lines.append(f"  password {quote_token(password)}")
    return "\n".join(lines) + "\n"


def _line_end(text: str, pos: int) -> int:
    newline = text.find('\n', pos)
    return len(text) if newline == -1 else newline + 1


def machine_spans(text: str, host: str) -> List[Tuple[int, int]]:
    """
    Character ranges of the ``machine <host>`` entries in netrc text

    An entry runs from its ``machine`` keyword to the end of the line holding
    its last token. Comment lines and macro bodies are skipped, so their
    content is never mistaken for an entry.
    """
    spans = []
    current: Optional[List[int]] = None
    pos = 0

    while True:
        match = _TOKEN.match(text, pos)
        if not match:
            break
        token, start, pos = match.group(1), match.start(1), match.end()

        if token.startswith('#'):
            pos = _line_end(text, start)
            continue

        if token not in ('machine', 'default', 'macdef'):
            if current is not None:
                current[1] = pos
            continue

        if current is not None:
            spans.append((current[0], _line_end(text, current[1])))
            current = None

        if token == 'machine':
            name = _TOKEN.match(text, pos)
            if not name:
                break
            pos = name.end()
            if _unquote(name.group(1)) == host:
                current = [start, pos]
        elif token == 'macdef':
            # The macro body ends at the first empty line
            line_end = text.find('\n', pos)
            body_end = -1 if line_end == -1 else text.find('\n\n', line_end)
            pos = len(text) if body_end == -1 else body_end + 2

    if current is not None:
        spans.append((current[0], _line_end(text, current[1])))
    return spans


def remove_spans(text: str, spans: List[Tuple[int, int]]) -> str:
    for start, end in sorted(spans, reverse=True):
        text = text[:start] + text[end:]
    return text


def _shift(spans: List[Tuple[int, int]], offset: int) -> List[Tuple[int, int]]:
    return [(start + offset, end + offset) for start, end in spans]
