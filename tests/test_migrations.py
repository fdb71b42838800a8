from __future__ import annotations

import copy

import pytest

from core.migrations import (
    DEFAULT_PATCHES,
    MigrationRegistry,
    UnknownErrorIdentifier,
    build_default_registry,
    missing_property,
)

BABYSTEP = ".printer should have required property 'zBabystepGCode'"
SMART_PLUG = ".plugins should have required property 'tpLinkSmartPlug'"
PROGRESS_CIRCLE = ".octodash should have required property 'previewProgressCircle'"
EXIT_SLEEP = ".octodash should have required property 'turnOnPrinterWhenExitingSleep'"


def _legacy_config() -> dict:
    return {
        "printer": {"name": "Prusa", "xySpeed": 150},
        "plugins": {
            "psuControl": {"enabled": True, "turnOnPSUWhenExitingSleep": True},
            "enclosure": {"enabled": False},
        },
        "octodash": {"touchscreen": True},
        "filament": {"thickness": 1.75},
    }


def test_identifier_format_matches_validator_output() -> None:
    assert missing_property(".printer", "zBabystepGCode") == BABYSTEP


def test_default_registry_knows_documented_errors() -> None:
    registry = build_default_registry()
    assert len(registry) == 4
    assert registry.identifiers == {BABYSTEP, SMART_PLUG, PROGRESS_CIRCLE, EXIT_SLEEP}
    for identifier in (BABYSTEP, SMART_PLUG, PROGRESS_CIRCLE, EXIT_SLEEP):
        assert registry.has(identifier)
        assert identifier in registry


def test_lookup_is_exact_and_case_sensitive() -> None:
    registry = build_default_registry()
    assert not registry.has(BABYSTEP.upper())
    assert not registry.has(BABYSTEP + " ")
    assert not registry.has("printer should have required property 'zBabystepGCode'")


def test_apply_unknown_identifier_raises() -> None:
    registry = build_default_registry()
    with pytest.raises(UnknownErrorIdentifier):
        registry.apply("unknown.only", {})


def test_duplicate_identifiers_are_rejected() -> None:
    patches = list(DEFAULT_PATCHES) + [DEFAULT_PATCHES[0]]
    with pytest.raises(ValueError):
        MigrationRegistry(patches)


def test_registry_mapping_is_read_only() -> None:
    registry = build_default_registry()
    with pytest.raises(TypeError):
        registry._patches["new"] = lambda config: None  # type: ignore[index]


def test_babystep_gcode_patch() -> None:
    config = _legacy_config()
    build_default_registry().apply(BABYSTEP, config)
    assert config["printer"] == {"name": "Prusa", "xySpeed": 150, "zBabystepGCode": "M290 Z"}


def test_smart_plug_patch() -> None:
    config = _legacy_config()
    build_default_registry().apply(SMART_PLUG, config)
    assert config["plugins"]["tpLinkSmartPlug"] == {"enabled": True, "smartPlugIP": "127.0.0.1"}
    assert config["plugins"]["enclosure"] == {"enabled": False}


def test_progress_circle_patch() -> None:
    config = _legacy_config()
    build_default_registry().apply(PROGRESS_CIRCLE, config)
    assert config["octodash"]["previewProgressCircle"] is False


def test_exit_sleep_patch_moves_psu_setting() -> None:
    config = _legacy_config()
    build_default_registry().apply(EXIT_SLEEP, config)
    assert config["octodash"]["turnOnPrinterWhenExitingSleep"] is True
    assert config["plugins"]["psuControl"] == {"enabled": True}


def test_exit_sleep_patch_defaults_to_false() -> None:
    config = {"plugins": {"psuControl": {"enabled": False}}, "octodash": {}}
    build_default_registry().apply(EXIT_SLEEP, config)
    assert config["octodash"]["turnOnPrinterWhenExitingSleep"] is False
    assert config["plugins"]["psuControl"] == {"enabled": False}


def test_exit_sleep_patch_treats_null_as_false() -> None:
    config = {"plugins": {"psuControl": {"turnOnPSUWhenExitingSleep": None}}, "octodash": {}}
    build_default_registry().apply(EXIT_SLEEP, config)
    assert config["octodash"]["turnOnPrinterWhenExitingSleep"] is False
    assert "turnOnPSUWhenExitingSleep" not in config["plugins"]["psuControl"]


def test_exit_sleep_patch_without_psu_plugin_leaves_plugins_alone() -> None:
    config = {"plugins": {}, "octodash": {}}
    build_default_registry().apply(EXIT_SLEEP, config)
    assert config == {"plugins": {}, "octodash": {"turnOnPrinterWhenExitingSleep": False}}


@pytest.mark.parametrize("identifier", [BABYSTEP, SMART_PLUG, PROGRESS_CIRCLE, EXIT_SLEEP])
def test_patches_are_idempotent(identifier: str) -> None:
    registry = build_default_registry()
    config = _legacy_config()
    registry.apply(identifier, config)
    once = copy.deepcopy(config)
    registry.apply(identifier, config)
    assert config == once


@pytest.mark.parametrize("identifier", [BABYSTEP, SMART_PLUG, PROGRESS_CIRCLE, EXIT_SLEEP])
def test_patches_do_not_touch_unrelated_sections(identifier: str) -> None:
    config = _legacy_config()
    build_default_registry().apply(identifier, config)
    assert config["filament"] == {"thickness": 1.75}
    assert config["plugins"]["enclosure"] == {"enabled": False}


def test_patches_create_missing_sections() -> None:
    registry = build_default_registry()
    config: dict = {}
    registry.apply(BABYSTEP, config)
    registry.apply(PROGRESS_CIRCLE, config)
    assert config == {
        "printer": {"zBabystepGCode": "M290 Z"},
        "octodash": {"previewProgressCircle": False},
    }


def test_patches_replace_null_sections() -> None:
    registry = build_default_registry()
    config = {"printer": None, "plugins": "legacy", "octodash": None}

    for identifier in (BABYSTEP, SMART_PLUG, EXIT_SLEEP):
        registry.apply(identifier, config)

    assert config == {
        "printer": {"zBabystepGCode": "M290 Z"},
        "plugins": {"tpLinkSmartPlug": {"enabled": True, "smartPlugIP": "127.0.0.1"}},
        "octodash": {"turnOnPrinterWhenExitingSleep": False},
    }
