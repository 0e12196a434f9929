from __future__ import annotations

import json
from pathlib import Path

import pytest

from mirror_explorer.core.errors import ComponentDefinitionError
from mirror_explorer.vision.components import (
    COMPONENT_CATALOG,
    ChevronMode,
    ClickTargetRule,
    ScreenZone,
    load_definition_file,
    load_definitions,
    merged_catalog,
)


def _write(directory: Path, name: str, data: object) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_catalog_has_sixteen_unique_definitions() -> None:
    names = [d.name for d in COMPONENT_CATALOG]
    assert len(names) == 16
    assert len(set(names)) == 16
    assert {"navigation-bar", "tab-bar-item", "table-row-disclosure", "list-item"} <= set(names)


def test_load_definition_file(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "stepper-row",
        {
            "description": "Row with a numeric stepper",
            "match_rules": {"chevron_mode": "forbidden", "has_numeric_value": True, "zone": "content"},
            "interaction": {"clickable": True, "click_target": "centered_element"},
        },
    )
    definition = load_definition_file(path)
    assert definition.name == "stepper-row"
    assert definition.match_rules.chevron_mode is ChevronMode.FORBIDDEN
    assert definition.match_rules.zone is ScreenZone.CONTENT
    assert definition.interaction.click_target is ClickTargetRule.CENTERED
    # Unset sections keep their defaults
    assert definition.grouping.absorbs_below_within_pt == 0


def test_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ComponentDefinitionError) as exc:
        load_definition_file(path)
    assert exc.value.path == str(path)


def test_unknown_field_raises(tmp_path: Path) -> None:
    path = _write(tmp_path, "odd", {"match_rules": {"glows": True}})
    with pytest.raises(ComponentDefinitionError):
        load_definition_file(path)


def test_non_object_raises(tmp_path: Path) -> None:
    path = _write(tmp_path, "list", ["navigation-bar"])
    with pytest.raises(ComponentDefinitionError):
        load_definition_file(path)


def test_earlier_directories_win(tmp_path: Path) -> None:
    project = tmp_path / "project"
    user = tmp_path / "user"
    _write(project, "banner", {"name": "banner", "description": "project"})
    _write(user, "banner", {"name": "banner", "description": "user"})
    _write(user, "chip", {"name": "chip"})

    definitions = load_definitions([project, user, tmp_path / "missing"])
    by_name = {d.name: d for d in definitions}
    assert set(by_name) == {"banner", "chip"}
    assert by_name["banner"].description == "project"


def test_merged_catalog_overrides_by_name(tmp_path: Path) -> None:
    override = load_definition_file(_write(tmp_path, "list-item", {"description": "custom"}))
    catalog = merged_catalog([override])
    assert len(catalog) == len(COMPONENT_CATALOG)
    assert [d for d in catalog if d.name == "list-item"][0].description == "custom"

    extra = load_definition_file(_write(tmp_path, "chip", {}))
    assert len(merged_catalog([extra])) == len(COMPONENT_CATALOG) + 1
