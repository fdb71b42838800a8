"""Known upgrade migrations for the dashboard config (core domain).

After an upgrade the config validator reports missing required properties as
plain strings. Each string we know how to repair maps to one patch that sets
only the field(s) named by that string. Identifiers are compared verbatim;
they are never parsed.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Iterable, Iterator, Mapping, Tuple

from core.models import Config

Patch = Callable[[Config], None]


class UnknownErrorIdentifier(KeyError):
    """Raised when applying a patch for an identifier that is not registered."""


def missing_property(path: str, field: str) -> str:
    """Build a validator identifier for a missing required property."""

    return f"{path} should have required property '{field}'"


def _section(config: Config, *path: str) -> dict:
    node = config
    for key in path:
        child = node.get(key)
        if not isinstance(child, dict):
            # A null or scalar section cannot hold the field; start it fresh.
            child = node[key] = {}
        node = child
    return node


def _set_babystep_gcode(config: Config) -> None:
    _section(config, "printer")["zBabystepGCode"] = "M290 Z"


def _add_tp_link_smart_plug(config: Config) -> None:
    _section(config, "plugins")["tpLinkSmartPlug"] = {"enabled": True, "smartPlugIP": "127.0.0.1"}


def _disable_preview_progress_circle(config: Config) -> None:
    _section(config, "octodash")["previewProgressCircle"] = False


def _move_psu_wakeup_to_octodash(config: Config) -> None:
    octodash = _section(config, "octodash")
    plugins = config.get("plugins")
    psu_control = plugins.get("psuControl") if isinstance(plugins, dict) else None
    if isinstance(psu_control, dict) and "turnOnPSUWhenExitingSleep" in psu_control:
        value = psu_control.pop("turnOnPSUWhenExitingSleep")
        octodash["turnOnPrinterWhenExitingSleep"] = False if value is None else value
        return
    # Source field already moved on an earlier run: keep what was migrated.
    octodash.setdefault("turnOnPrinterWhenExitingSleep", False)


DEFAULT_PATCHES: Tuple[Tuple[str, Patch], ...] = (
    (missing_property(".printer", "zBabystepGCode"), _set_babystep_gcode),
    (missing_property(".plugins", "tpLinkSmartPlug"), _add_tp_link_smart_plug),
    (missing_property(".octodash", "previewProgressCircle"), _disable_preview_progress_circle),
    (missing_property(".octodash", "turnOnPrinterWhenExitingSleep"), _move_psu_wakeup_to_octodash),
)


class MigrationRegistry:
    """Fixed mapping of validator identifiers to config patches.

    The mapping is built once and exposed read-only; there is no runtime
    registration.
    """

    def __init__(self, patches: Iterable[Tuple[str, Patch]]) -> None:
        table: dict[str, Patch] = {}
        for identifier, patch in patches:
            if identifier in table:
                raise ValueError(f"Duplicate migration identifier: {identifier}")
            table[identifier] = patch
        self._patches: Mapping[str, Patch] = MappingProxyType(table)

    @property
    def identifiers(self) -> frozenset[str]:
        return frozenset(self._patches)

    def has(self, identifier: str) -> bool:
        """Return True when a patch is registered for this exact identifier."""

        return identifier in self._patches

    def apply(self, identifier: str, config: Config) -> None:
        """Apply the patch for ``identifier`` to ``config`` in place."""

        try:
            patch = self._patches[identifier]
        except KeyError:
            raise UnknownErrorIdentifier(identifier) from None
        patch(config)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._patches

    def __iter__(self) -> Iterator[str]:
        return iter(self._patches)

    def __len__(self) -> int:
        return len(self._patches)


def build_default_registry() -> MigrationRegistry:
    """Return the registry of every known post-upgrade validation error."""

    return MigrationRegistry(DEFAULT_PATCHES)
