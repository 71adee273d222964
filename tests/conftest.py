"""Shared fixtures and fakes for the sabaccui test-suite"""

import io
import json
import zipfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import pytest

from sabaccui.api.exceptions import NotFoundError
from sabaccui.constants import ArtifactKind
from sabaccui.core.credentials import CredentialStore
from sabaccui.core.process_runner import ProcessResult, ProcessRunner
from sabaccui.core.user_config import UserConfig

FileContent = Union[str, bytes, Dict[str, Any], List[Any]]


def build_zip(files: Dict[str, FileContent]) -> bytes:
    """Build an in-memory zip archive; dicts and lists are stored as JSON"""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as archive:
        for name, content in files.items():
            if isinstance(content, (dict, list)):
                content = json.dumps(content)
            archive.writestr(name, content)
    return buffer.getvalue()


class FakeProcessRunner(ProcessRunner):
    """Records commands and answers with scripted results

    ``outcomes`` maps a command prefix to a return code, a ProcessResult or
    a callable ``(command, cwd) -> ProcessResult``. Unmatched commands
    succeed.
    """

    def __init__(self, outcomes: Optional[Dict[Tuple[str, ...], Any]] = None):
        self.outcomes = outcomes or {}
        self.calls: List[Tuple[List[str], Optional[Path]]] = []

    async def run(self, command: Sequence[str], cwd: Optional[Path] = None) -> ProcessResult:
        command = [str(part) for part in command]
        self.calls.append((command, cwd))

        for prefix, outcome in self.outcomes.items():
            if tuple(command[:len(prefix)]) != prefix:
                continue
            if callable(outcome):
                return outcome(command, cwd)
            if isinstance(outcome, ProcessResult):
                return outcome
            return ProcessResult(command, outcome, "", "simulated failure" if outcome else "")

        return ProcessResult(command, 0)

    @property
    def commands(self) -> List[List[str]]:
        return [command for command, _ in self.calls]


class FakeCatalog:
    """In-memory catalog serving prebuilt archives"""

    def __init__(self, artifacts: Optional[Dict[Tuple[ArtifactKind, str], bytes]] = None,
                 credential_store: Optional[CredentialStore] = None):
        self.artifacts = artifacts or {}
        self.credential_store = credential_store
        self.downloads: List[Tuple[ArtifactKind, str]] = []
        self.templates: List[Dict[str, Any]] = []
        self.bloks: List[Dict[str, Any]] = []
        self.components: List[Dict[str, Any]] = []
        self.login_response: Dict[str, Any] = {'access_token': 'catalog-token'}
        self.licenses: List[str] = []

    def add(self, kind: ArtifactKind, key: str, files: Dict[str, FileContent]) -> None:
        self.artifacts[(kind, key)] = build_zip(files)

    async def download_artifact(self, kind: ArtifactKind, key: str) -> bytes:
        self.downloads.append((kind, key))
        try:
            return self.artifacts[(kind, key)]
        except KeyError:
            raise NotFoundError(kind.label, key)

    async def list_templates(self):
        return self.templates

    async def list_bloks(self):
        return self.bloks

    async def list_components(self):
        return self.components

    async def login(self, email: str, password: str):
        return self.login_response

    async def register(self, email: str, password: str):
        return {}

    async def logout(self):
        return None

    async def license(self, license_key: str):
        self.licenses.append(license_key)
        return {'license': license_key}


class FakeStoryblok:
    """In-memory Storyblok space"""

    def __init__(self, space: str = "1", tags: Optional[List[Dict[str, Any]]] = None):
        self.space = space
        self.tags = list(tags or [])
        self.components: List[Dict[str, Any]] = []
        self.created_tags: List[str] = []
        self.created: List[Dict[str, Any]] = []
        self.updated: List[Tuple[Any, Dict[str, Any]]] = []
        self.list_calls = 0
        self._next_id = 1000

    def _id(self) -> int:
        self._next_id += 1
        return self._next_id

    async def list_internal_tags(self):
        self.list_calls += 1
        return list(self.tags)

    async def create_internal_tag(self, name: str, object_type: str = "component"):
        tag = {'id': self._id(), 'name': name, 'object_type': object_type}
        self.tags.append(tag)
        self.created_tags.append(name)
        return tag

    async def search_components(self, name: str):
        return [c for c in self.components if name in c['name']]

    async def create_component(self, definition: Dict[str, Any]):
        component = dict(definition, id=self._id())
        self.components.append(component)
        self.created.append(definition)
        return component

    async def update_component(self, component_id, definition: Dict[str, Any]):
        self.updated.append((component_id, definition))
        return dict(definition, id=component_id)


@pytest.fixture
def runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def credential_store(tmp_path) -> CredentialStore:
    return CredentialStore(tmp_path / "netrc")


@pytest.fixture
def user_config(tmp_path) -> UserConfig:
    return UserConfig(tmp_path / "home" / "config.yaml")


@pytest.fixture
def catalog(credential_store) -> FakeCatalog:
    return FakeCatalog(credential_store=credential_store)


@pytest.fixture
def storyblok() -> FakeStoryblok:
    return FakeStoryblok(space="12345")


@pytest.fixture
def storyblok_factory(storyblok) -> Callable[[str], FakeStoryblok]:
    def factory(space: str) -> FakeStoryblok:
        storyblok.space = space
        return storyblok
    return factory


@pytest.fixture
def project_dir(tmp_path) -> Path:
    """An existing project with a space, a cached tag mapping and package.json"""
    project = tmp_path / "project"
    project.mkdir()
    (project / "sabaccui.config.json").write_text(json.dumps({
        'name': 'project',
        'version': '1.0.0',
        'space': '12345',
        'tags': {'47874': '1', '47877': '2', '47875': '3', '47878': '4', '50625': '5'},
    }))
    (project / "package.json").write_text(json.dumps({
        'name': 'project',
        'dependencies': {'nuxt': '^3.0.0'},
        'devDependencies': {},
    }))
    return project


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep tests away from the real home directory and credentials"""
    for name in ('SABACCUI_LOGIN', 'SABACCUI_TOKEN', 'SABACCUI_TAG_CATALOG',
                 'SABACCUI_API_URL', 'STORYBLOK_OAUTH_TOKEN', 'STORYBLOK_API_DOMAIN'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('NETRC', str(tmp_path / "netrc"))
    monkeypatch.setenv('SABACCUI_CONFIG', str(tmp_path / "home" / "config.yaml"))
