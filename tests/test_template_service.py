"""Tests for creating projects from templates"""

import json
import os

import pytest
from rich.console import Console

from sabaccui.api.exceptions import (
    ConfigError,
    MigrationError,
    MissingSpaceError,
    NotFoundError,
    PushError,
    SourceCloneError,
    TemplateStepError,
)
from sabaccui.constants import ArtifactKind
from sabaccui.core.process_runner import ProcessResult
from sabaccui.models.project import SetupAnswers
from sabaccui.services.template_service import TemplateService, set_env_value

from conftest import FakeProcessRunner
from test_blok_service import HERO

PACKAGE_JSON = {
    "name": "<space>-site",
    "dependencies": {"nuxt": "^3.10.0"},
    "scripts": {"dev": "nuxi dev --https.cert <localhost.crt> --https.key <localhost.key>"},
}

STARTER = {
    "manifest.json": {
        "type": "self-contained",
        "baseDir": "template",
        "templateFiles": ["pages/index.vue"],
        "usedComponents": ["hero", "footer"],
        "packages": {"dependencies": {"vue": "3.4.0"}},
        "migrations": ["migrations/001-content.js", "migrations/002-settings.js"],
    },
    "template/package.json": PACKAGE_JSON,
    "template/.env.example": "NUXT_STORYBLOK_ACCESS_TOKEN=\nNUXT_PUBLIC_DOMAIN=localhost\n",
    "template/migrations/001-content.js": "console.log('content')",
    "template/migrations/002-settings.js": "console.log('settings')",
    "pages/index.vue": "<template>home</template>",
}

ANSWERS = SetupAnswers(name="site", space="12345", storyblok_token="sb-secret")


def make_service(catalog, runner, storyblok_factory, user_config):
    return TemplateService(catalog, runner=runner, storyblok_factory=storyblok_factory,
                           user_config=user_config, console=Console(quiet=True))


@pytest.fixture
def destination(tmp_path):
    destination = tmp_path / "work"
    destination.mkdir()
    return destination


@pytest.fixture
def catalog_with_starter(catalog):
    catalog.add(ArtifactKind.TEMPLATE, "starter", STARTER)
    catalog.add(ArtifactKind.COMPONENT, "hero", HERO)
    return catalog


@pytest.mark.asyncio
async def test_init_builds_complete_project(catalog_with_starter, runner, storyblok, storyblok_factory,
                                            user_config, destination):
    service = make_service(catalog_with_starter, runner, storyblok_factory, user_config)

    result = await service.init("site", "starter", destination, ANSWERS)

    project = destination / "site"
    assert result.success
    assert result.project_dir == project
    assert (project / "pages" / "index.vue").read_text() == "<template>home</template>"
    assert (project / "components" / "Hero.vue").exists()

    # .env created from the example and filled in
    env = (project / ".env").read_text()
    assert "NUXT_STORYBLOK_ACCESS_TOKEN=sb-secret" in env
    assert "NUXT_PUBLIC_DOMAIN=localhost" in env

    config = json.loads((project / "sabaccui.config.json").read_text())
    assert config["name"] == "site"
    assert config["space"] == "12345"
    assert config["version"] == "1.0.0"
    assert set(config["tags"]) == {"47877", "47874", "47875", "47878", "50625"}
    assert "storyblokToken" not in config and "storyblok_token" not in config

    assert json.loads((project / "package.json").read_text())["name"] == "12345-site"

    # hero installed, footer missing from the catalog
    assert result.installed_components == ["hero"]
    assert [c.key for c in result.failed_components] == ["footer"]
    assert result.failed_components[0].error_code == NotFoundError("x", "y").error_code

    # template and component packages installed in one batch
    assert runner.commands == [
        ["npm", "install", "swiper@11.0.0", "vue@3.4.0"],
        ["npm", "install", "--save-dev", "sass@1.70.0"],
        ["node", str(project / "migrations/001-content.js")],
        ["node", str(project / "migrations/002-settings.js")],
        ["git", "init"],
        ["git", "add", "."],
    ]
    assert result.migrations == ["migrations/001-content.js", "migrations/002-settings.js"]
    assert result.git_initialized
    assert result.warnings == []

    assert [c["name"] for c in storyblok.created] == ["hero"]


@pytest.mark.asyncio
async def test_sibling_failure_does_not_abort_other_components(catalog_with_starter, runner,
                                                               storyblok_factory, user_config,
                                                               destination):
    service = make_service(catalog_with_starter, runner, storyblok_factory, user_config)

    results = await service.install_components(
        destination, ["footer", "hero"], "12345",
        service.setup(destination, SetupAnswers(name="x", space="12345"))
    )

    assert [(r.key, r.success) for r in results] == [("footer", False), ("hero", True)]
    assert (destination / "components" / "Hero.vue").exists()


@pytest.mark.asyncio
async def test_missing_space_propagates_without_component_downloads(catalog_with_starter, runner,
                                                                    storyblok_factory, user_config,
                                                                    destination):
    service = make_service(catalog_with_starter, runner, storyblok_factory, user_config)

    with pytest.raises(MissingSpaceError):
        await service.init("site", "starter", destination, SetupAnswers(name="site"))

    assert catalog_with_starter.downloads == [(ArtifactKind.TEMPLATE, "starter")]


@pytest.mark.asyncio
async def test_failed_migration_stops_the_sequence(catalog_with_starter, storyblok_factory,
                                                   user_config, destination):
    runner = FakeProcessRunner({("node",): 1})
    service = make_service(catalog_with_starter, runner, storyblok_factory, user_config)

    with pytest.raises(TemplateStepError) as excinfo:
        await service.init("site", "starter", destination, ANSWERS)

    assert excinfo.value.step == "migrations"
    assert isinstance(excinfo.value.cause, MigrationError)
    assert [c[0] for c in runner.commands].count("node") == 1
    assert ["git", "init"] not in runner.commands


@pytest.mark.asyncio
async def test_git_failure_is_only_a_warning(catalog_with_starter, storyblok_factory,
                                             user_config, destination):
    runner = FakeProcessRunner({("git", "init"): 128})
    service = make_service(catalog_with_starter, runner, storyblok_factory, user_config)

    result = await service.init("site", "starter", destination, ANSWERS)

    assert result.success
    assert not result.git_initialized
    assert len(result.warnings) == 1
    assert ["git", "add", "."] not in runner.commands


@pytest.mark.asyncio
async def test_plain_install_when_nothing_declared(catalog, runner, storyblok_factory,
                                                   user_config, destination):
    catalog.add(ArtifactKind.TEMPLATE, "empty", {
        "manifest.json": {"baseDir": "template"},
        "template/package.json": {"name": "empty"},
    })
    service = make_service(catalog, runner, storyblok_factory, user_config)

    result = await service.init("site", "empty", destination, ANSWERS)

    assert result.success
    assert runner.commands == [["npm", "install"], ["git", "init"], ["git", "add", "."]]


@pytest.mark.asyncio
async def test_source_template_is_cloned(catalog, storyblok_factory, user_config, destination):
    def fake_clone(command, cwd):
        checkout = command[-1]
        os.makedirs(os.path.join(checkout, ".git"))
        with open(os.path.join(checkout, "package.json"), "w") as f:
            json.dump({"name": "<space>-site"}, f)
        return ProcessResult(command, 0)

    runner = FakeProcessRunner({("git", "clone"): fake_clone})
    catalog.add(ArtifactKind.TEMPLATE, "nuxt", {
        "manifest.json": {"source": "sabaccui/starter#v2", "templateFiles": ["README.md"]},
        "README.md": "# Starter",
    })
    service = make_service(catalog, runner, storyblok_factory, user_config)

    result = await service.init("site", "nuxt", destination, ANSWERS)

    project = destination / "site"
    clone = runner.commands[0]
    assert clone[:-1] == ["git", "clone", "--depth", "1", "--branch", "v2",
                          "https://github.com/sabaccui/starter.git"]
    assert json.loads((project / "package.json").read_text())["name"] == "12345-site"
    assert (project / "README.md").read_text() == "# Starter"
    assert not (project / ".git").exists()
    assert result.success


@pytest.mark.asyncio
async def test_clone_failure_is_a_step_error(catalog, storyblok_factory, user_config, destination):
    runner = FakeProcessRunner({("git", "clone"): 128})
    catalog.add(ArtifactKind.TEMPLATE, "nuxt", {"manifest.json": {"source": "sabaccui/starter"}})
    service = make_service(catalog, runner, storyblok_factory, user_config)

    with pytest.raises(TemplateStepError) as excinfo:
        await service.init("site", "nuxt", destination, ANSWERS)

    assert excinfo.value.step == "clone"
    assert isinstance(excinfo.value.cause, SourceCloneError)


@pytest.mark.asyncio
async def test_unknown_template(catalog, runner, storyblok_factory, user_config, destination):
    service = make_service(catalog, runner, storyblok_factory, user_config)

    with pytest.raises(TemplateStepError) as excinfo:
        await service.init("site", "nope", destination, ANSWERS)

    assert excinfo.value.step == "download"
    assert 'Template with key "nope" not found.' in str(excinfo.value)


def test_setup_links_certificates(tmp_path, catalog, runner, storyblok_factory, user_config):
    project = tmp_path / "site"
    project.mkdir()
    (project / "package.json").write_text(json.dumps(PACKAGE_JSON))
    (project / ".env").write_text("NUXT_STORYBLOK_ACCESS_TOKEN=old\n")
    cert = tmp_path / "certs" / "localhost.crt"
    key = tmp_path / "certs" / "localhost.key"
    cert.parent.mkdir()
    cert.write_text("CERT")
    key.write_text("KEY")
    user_config.set("certificateSources.cert", str(cert))
    user_config.set("certificateSources.key", str(key))

    service = make_service(catalog, runner, storyblok_factory, user_config)
    config = service.setup(project, SetupAnswers(name="site", space="77", domain="example.com",
                                                 storyblok_token="new"))

    package_json = (project / "package.json").read_text()
    assert "<localhost.crt>" not in package_json
    assert "--https.cert localhost.crt --https.key localhost.key" in package_json
    assert "77-site" in package_json
    assert (project / "localhost.crt").is_symlink()
    assert (project / "localhost.crt").read_text() == "CERT"
    assert (project / ".env").read_text() == "NUXT_STORYBLOK_ACCESS_TOKEN=new\n"
    assert config.get() == {"name": "site", "space": "77", "domain": "example.com", "version": "1.0.0"}


def test_set_env_value_appends_missing_key(tmp_path):
    env = tmp_path / ".env"
    env.write_text("A=1")

    set_env_value(env, "B", "2")

    assert env.read_text() == "A=1\nB=2\n"


@pytest.mark.asyncio
async def test_unexpected_child_error_is_recorded_per_component(catalog_with_starter, runner,
                                                                storyblok_factory, user_config,
                                                                destination, monkeypatch):
    service = make_service(catalog_with_starter, runner, storyblok_factory, user_config)
    install = service.blok_service.install

    async def flaky_install(project_dir, key, **kwargs):
        if key == "footer":
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        return await install(project_dir, key, **kwargs)

    monkeypatch.setattr(service.blok_service, "install", flaky_install)

    result = await service.init("site", "starter", destination, ANSWERS)

    assert result.success
    assert result.installed_components == ["hero"]
    assert [c.key for c in result.failed_components] == ["footer"]
    assert "UnicodeDecodeError" in result.failed_components[0].error


@pytest.mark.asyncio
async def test_undecodable_definition_fails_only_that_component(catalog_with_starter, runner,
                                                                storyblok_factory, user_config,
                                                                destination):
    catalog_with_starter.add(ArtifactKind.COMPONENT, "footer", {
        "manifest.json": {"storyblokDefinitions": ["storyblok/footer.json"]},
        "storyblok/footer.json": b"\xff\xfe",
    })
    service = make_service(catalog_with_starter, runner, storyblok_factory, user_config)

    result = await service.init("site", "starter", destination, ANSWERS)

    assert result.installed_components == ["hero"]
    assert result.failed_components[0].error_code == PushError("x").error_code


@pytest.mark.asyncio
async def test_malformed_package_json_fails_the_dependencies_step(catalog, runner, storyblok_factory,
                                                                  user_config, destination):
    catalog.add(ArtifactKind.TEMPLATE, "broken", {
        "manifest.json": {"baseDir": "template", "packages": {"dependencies": {"vue": "3.4.0"}}},
        "template/package.json": "{not json",
    })
    service = make_service(catalog, runner, storyblok_factory, user_config)

    with pytest.raises(TemplateStepError) as excinfo:
        await service.init("site", "broken", destination, ANSWERS)

    assert excinfo.value.step == "dependencies"
    assert isinstance(excinfo.value.cause, ConfigError)
    assert runner.commands == []


def test_setup_drops_tag_mapping_when_space_changes(catalog, runner, storyblok_factory,
                                                    user_config, project_dir):
    service = make_service(catalog, runner, storyblok_factory, user_config)

    config = service.setup(project_dir, SetupAnswers(name="project", space="99999"))

    saved = json.loads((project_dir / "sabaccui.config.json").read_text())
    assert saved["space"] == "99999"
    assert "tags" not in saved
    assert config.tags is None


def test_setup_keeps_tag_mapping_for_same_space(catalog, runner, storyblok_factory,
                                                user_config, project_dir):
    service = make_service(catalog, runner, storyblok_factory, user_config)

    config = service.setup(project_dir, SetupAnswers(name="project", space="12345"))

    assert config.tags["47874"] == "1"
