"""Tests for manifest and result models"""

import pytest

from sabaccui.models.manifest import ArtifactManifest, ManifestType, PackageSet
from sabaccui.models.project import SetupAnswers
from sabaccui.models.result import MergeOutcome, MergeReport


def test_type_is_inferred_from_source():
    assert ArtifactManifest.from_dict({"source": "user/repo"}).type == ManifestType.SOURCE
    assert ArtifactManifest.from_dict({"baseDir": "template"}).type == ManifestType.SELF_CONTAINED


def test_explicit_type_wins():
    manifest = ArtifactManifest.from_dict({"type": "self-contained", "source": "user/repo"})
    assert not manifest.is_source


def test_unknown_keys_are_preserved():
    data = {"files": ["a.vue"], "author": "Coders Cantina"}
    manifest = ArtifactManifest.from_dict(data)

    assert manifest.extra == {"author": "Coders Cantina"}
    assert manifest.to_dict()["author"] == "Coders Cantina"


@pytest.mark.parametrize("data", [
    {"type": "zip"},
    {"files": "a.vue"},
    {"usedComponents": [1, 2]},
    {"packages": ["vue"]},
])
def test_bad_shapes_are_rejected(data):
    with pytest.raises(ValueError):
        ArtifactManifest.from_dict(data)


def test_component_file_lists_order():
    manifest = ArtifactManifest.from_dict({
        "files": ["f"],
        "componentFiles": ["c"],
        "storyblokFiles": ["s"],
        "storyblokDefinitions": ["d"],
        "templateFiles": ["t"],
    })

    assert manifest.component_file_lists() == [["f"], ["c"], ["s"], ["d"]]
    assert manifest.template_file_lists() == [["t"], ["f"]]


def test_package_set_merge_keeps_first_declaration():
    template = PackageSet(dependencies={"vue": "3.4.0"})
    child = PackageSet(dependencies={"vue": "3.3.0", "swiper": "11.0.0"}, dev_dependencies={"sass": "1"})

    merged = template.merged_with(child)

    assert merged.dependencies == {"vue": "3.4.0", "swiper": "11.0.0"}
    assert merged.dev_dependencies == {"sass": "1"}
    assert PackageSet.from_dict(merged.to_dict()) == merged


def test_empty_packages_declaration():
    manifest = ArtifactManifest.from_dict({"packages": {}})
    assert manifest.packages is not None
    assert manifest.packages.is_empty


def test_merge_report_groups_outcomes():
    report = MergeReport()
    report.record("a", MergeOutcome.COPIED)
    report.record("b", MergeOutcome.CONFLICTED)
    report.record("c", MergeOutcome.UNCHANGED)

    assert report.write_count == 2
    assert report.to_dict() == {"a": "copied", "b": "conflicted", "c": "unchanged"}


def test_setup_answers_never_persist_token():
    answers = SetupAnswers(name="site", space="1", domain="example.com", storyblok_token="secret")
    assert answers.to_config() == {"name": "site", "space": "1", "domain": "example.com"}
