"""Tests for installing bloks into a project"""

import json

import pytest
from rich.console import Console

from sabaccui.api.exceptions import MissingSpaceError, NotFoundError, PushError
from sabaccui.constants import ArtifactKind
from sabaccui.services.blok_service import BlokService

HERO = {
    "manifest.json": {
        "files": ["components/Hero.vue"],
        "componentFiles": ["components/HeroItem.vue"],
        "storyblokDefinitions": ["storyblok/components.hero.json"],
        "packages": {
            "dependencies": {"nuxt": "^3.10.0", "swiper": "11.0.0"},
            "devDependencies": {"sass": "1.70.0"},
        },
    },
    "components/Hero.vue": "<template>hero</template>",
    "components/HeroItem.vue": "<template>item</template>",
    "storyblok/components.hero.json": {
        "components": [
            {"name": "hero", "component_tag_whitelist": ["47874"], "internal_tag_ids": ["47878"]},
        ]
    },
}


@pytest.fixture
def service(catalog, runner, storyblok_factory):
    catalog.add(ArtifactKind.COMPONENT, "hero", HERO)
    return BlokService(catalog, runner=runner, storyblok_factory=storyblok_factory,
                       console=Console(quiet=True))


@pytest.mark.asyncio
async def test_install_merges_installs_and_pushes(service, runner, storyblok, project_dir):
    result = await service.install(project_dir, "hero")

    assert result.success
    assert (project_dir / "components" / "Hero.vue").read_text() == "<template>hero</template>"
    assert (project_dir / "components" / "HeroItem.vue").exists()
    assert (project_dir / "storyblok" / "components.hero.json").exists()

    assert runner.commands == [
        ["npm", "install", "swiper@11.0.0"],
        ["npm", "install", "--save-dev", "sass@1.70.0"],
    ]

    assert result.pushed == ["hero"]
    assert storyblok.space == "12345"
    assert storyblok.created == [
        {"name": "hero", "component_tag_whitelist": ["1"], "internal_tag_ids": ["4"]}
    ]


@pytest.mark.asyncio
async def test_missing_space_fails_before_download(service, catalog, tmp_path):
    empty_project = tmp_path / "empty"
    empty_project.mkdir()

    with pytest.raises(MissingSpaceError):
        await service.install(empty_project, "hero")

    assert catalog.downloads == []


@pytest.mark.asyncio
async def test_explicit_space_overrides_config(service, storyblok, project_dir):
    await service.install(project_dir, "hero", space="999")
    assert storyblok.space == "999"


@pytest.mark.asyncio
async def test_silent_install_defers_packages(service, runner, project_dir):
    result = await service.install(project_dir, "hero", silent=True)

    assert result.success
    assert runner.calls == []
    assert result.dependencies is None
    assert result.packages.dependencies["swiper"] == "11.0.0"


@pytest.mark.asyncio
async def test_local_changes_survive_reinstall(service, project_dir):
    await service.install(project_dir, "hero")
    (project_dir / "components" / "Hero.vue").write_text("<template>mine</template>")

    result = await service.install(project_dir, "hero")

    assert result.merge.conflicted == ["components/Hero.vue"]
    assert result.merge.unchanged == ["components/HeroItem.vue", "storyblok/components.hero.json"]
    assert (project_dir / "components" / "Hero.vue").read_text() == "<template>mine</template>"
    assert (project_dir / "components" / "Hero.default.vue").read_text() == "<template>hero</template>"


@pytest.mark.asyncio
async def test_second_push_updates_existing_component(service, storyblok, project_dir):
    await service.install(project_dir, "hero")
    await service.install(project_dir, "hero")

    assert len(storyblok.created) == 1
    assert len(storyblok.updated) == 1


@pytest.mark.asyncio
async def test_unknown_blok(service, project_dir):
    with pytest.raises(NotFoundError) as excinfo:
        await service.install(project_dir, "nope")

    assert str(excinfo.value) == 'Component with key "nope" not found.'


@pytest.mark.asyncio
async def test_tags_are_ensured_when_not_cached(service, storyblok, project_dir):
    config_file = project_dir / "sabaccui.config.json"
    config = json.loads(config_file.read_text())
    del config["tags"]
    config_file.write_text(json.dumps(config))

    await service.install(project_dir, "hero")

    assert len(storyblok.created_tags) == 5
    assert "tags" in json.loads(config_file.read_text())


@pytest.mark.asyncio
async def test_list_returns_catalog_entries(service, catalog):
    catalog.bloks = [{"key": "hero", "name": "Hero"}]
    catalog.components = [{"key": "hero-item", "name": "Hero item"}]

    assert await service.list() == [{"key": "hero", "name": "Hero"}]
    assert await service.list(components=True) == [{"key": "hero-item", "name": "Hero item"}]


@pytest.mark.asyncio
async def test_undecodable_definition_is_a_push_error(service, catalog, project_dir):
    catalog.add(ArtifactKind.COMPONENT, "footer", {
        "manifest.json": {"storyblokDefinitions": ["storyblok/footer.json"]},
        "storyblok/footer.json": b"\xff\xfe",
    })

    with pytest.raises(PushError) as excinfo:
        await service.install(project_dir, "footer")

    assert "footer.json" in str(excinfo.value)
