# taskmill:header:start
#
#   project      : TaskMill
#   file         : settings.py
#   file_relpath : src/taskmill/config/settings.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Settings model for TaskMill (process-wide and per task type).

Design:
    * ``MutableSettings`` uses tri-state fields (``None`` means "inherit") so
      that layers merge non-destructively: defaults -> process-wide overlay ->
      task base classes -> task class.
    * ``Settings`` is the fully-resolved, immutable runtime view; the executor
      and the workflow pipeline never branch on ``None``.
    * ``MutableSettings.resolve(base)`` fills unset fields from ``base``.

TOML mapping (``taskmill.toml`` or ``[tool.taskmill]`` in ``pyproject.toml``):

    task_breakpoints = ["failed"]
    workflow_breakpoints = ["failed"]
    nonhalting_state = "interrupted"
    freeze_results = true
    log_results = true
    backtrace = false
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from threading import RLock
from typing import TYPE_CHECKING, Any

from taskmill.config.logging import TaskmillLogger, get_logger
from taskmill.exceptions import ConfigurationError
from taskmill.status import FINAL_STATES, HALT_STATUSES, State, Status

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

logger: TaskmillLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable, resolved settings used at run time.

    Attributes:
        task_breakpoints (frozenset[Status]): Statuses that make a strict
            invocation raise its fault.
        workflow_breakpoints (frozenset[Status]): Statuses that stop a workflow
            after a member finishes.
        nonhalting_state (State): Final state of an invocation that recorded a
            skip or failure with ``halt=False`` and then returned normally.
        freeze_results (bool): Make tasks and results immutable once finalized.
        log_results (bool): Log every finalized result at INFO level.
        backtrace (bool): Log tracebacks of uncontrolled errors at ERROR level.
    """

    task_breakpoints: frozenset[Status] = frozenset({Status.FAILED})
    workflow_breakpoints: frozenset[Status] = frozenset({Status.FAILED})
    nonhalting_state: State = State.INTERRUPTED
    freeze_results: bool = True
    log_results: bool = True
    backtrace: bool = False

    def thaw(self) -> MutableSettings:
        """Return a mutable builder initialized from these settings."""
        return MutableSettings(
            task_breakpoints=self.task_breakpoints,
            workflow_breakpoints=self.workflow_breakpoints,
            nonhalting_state=self.nonhalting_state,
            freeze_results=self.freeze_results,
            log_results=self.log_results,
            backtrace=self.backtrace,
        )

    def to_toml_table(self) -> dict[str, Any]:
        """Serialize to a TOML-friendly dict (statuses in declaration order)."""
        return self.thaw().to_toml_table()


DEFAULT_SETTINGS: Settings = Settings()


def parse_breakpoints(raw: object, *, key: str = "breakpoints") -> frozenset[Status]:
    """Parse a status name or a sequence of names into a breakpoint set.

    Args:
        raw (object): ``"failed"``, ``["failed", "skipped"]`` or `Status` members.
        key (str): Setting name used in error messages.

    Returns:
        frozenset[Status]: The parsed statuses.

    Raises:
        ConfigurationError: On unknown names or when ``success`` is listed.
    """
    if isinstance(raw, (str, Status)):
        tokens: Iterable[Any] = [raw]
    elif isinstance(raw, (list, tuple, set, frozenset)):
        tokens = raw
    else:
        raise ConfigurationError(f"{key}: expected a status or a list of statuses, got {raw!r}")
    try:
        statuses: list[Status] = Status.parse_many(tokens)
    except ValueError as exc:
        raise ConfigurationError(f"{key}: {exc}") from None
    if Status.SUCCESS in statuses:
        raise ConfigurationError(f"{key}: 'success' cannot be a breakpoint")
    return frozenset(statuses)


def parse_nonhalting_state(raw: object) -> State:
    """Parse the ``nonhalting_state`` setting (``complete`` or ``interrupted``)."""
    state: State | None = State.parse(raw) if isinstance(raw, str) else None
    if state is None or state not in FINAL_STATES:
        raise ConfigurationError(f"nonhalting_state: expected 'complete' or 'interrupted', got {raw!r}")
    return state


def _parse_bool(raw: object, key: str) -> bool:
    if isinstance(raw, bool):
        return raw
    raise ConfigurationError(f"{key}: expected a boolean, got {raw!r}")


@dataclass
class MutableSettings:
    """Mutable builder for `Settings`, merged in a last-wins manner.

    Attributes:
        task_breakpoints (frozenset[Status] | None): See `Settings`.
        workflow_breakpoints (frozenset[Status] | None): See `Settings`.
        nonhalting_state (State | None): See `Settings`.
        freeze_results (bool | None): See `Settings`.
        log_results (bool | None): See `Settings`.
        backtrace (bool | None): See `Settings`.
    """

    task_breakpoints: frozenset[Status] | None = None
    workflow_breakpoints: frozenset[Status] | None = None
    nonhalting_state: State | None = None
    freeze_results: bool | None = None
    log_results: bool | None = None
    backtrace: bool | None = None

    def merge_with(self, other: MutableSettings) -> MutableSettings:
        """Return a new builder applying ``other`` over ``self`` (last-wins).

        ``None`` fields in ``other`` do not override explicit values in ``self``.

        Args:
            other (MutableSettings): The settings whose values override current ones.

        Returns:
            MutableSettings: Merged settings.
        """
        merged: dict[str, Any] = {}
        for f in fields(self):
            override: Any = getattr(other, f.name)
            merged[f.name] = override if override is not None else getattr(self, f.name)
        return MutableSettings(**merged)

    def resolve(self, base: Settings) -> Settings:
        """Resolve tri-state fields against a base frozen settings object.

        Args:
            base (Settings): Provides values for unset fields.

        Returns:
            Settings: Fully-resolved immutable settings.
        """
        resolved: dict[str, Any] = {}
        for f in fields(self):
            value: Any = getattr(self, f.name)
            resolved[f.name] = getattr(base, f.name) if value is None else value
        return Settings(**resolved)

    def freeze(self) -> Settings:
        """Freeze against the built-in defaults."""
        return self.resolve(DEFAULT_SETTINGS)

    @property
    def is_empty(self) -> bool:
        """True when no field is set."""
        return all(getattr(self, f.name) is None for f in fields(self))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None, *, source: str = "<mapping>") -> MutableSettings:
        """Parse settings from a mapping (TOML table, class keywords, kwargs).

        Unspecified keys stay ``None`` (inherit).

        Args:
            data (Mapping[str, Any] | None): Raw values keyed by setting name.
            source (str): Where the values come from, for error messages.

        Returns:
            MutableSettings: Parsed settings.

        Raises:
            ConfigurationError: On unknown keys or malformed values.
        """
        if not data:
            return cls()
        known: set[str] = {f.name for f in fields(cls)}
        unknown: list[str] = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"{source}: unknown setting(s): {', '.join(unknown)}")

        out = cls()
        try:
            for key, raw in data.items():
                if raw is None:
                    continue
                if key in ("task_breakpoints", "workflow_breakpoints"):
                    setattr(out, key, parse_breakpoints(raw, key=key))
                elif key == "nonhalting_state":
                    out.nonhalting_state = parse_nonhalting_state(raw)
                else:
                    setattr(out, key, _parse_bool(raw, key))
        except ConfigurationError as exc:
            raise ConfigurationError(f"{source}: {exc}") from None
        logger.trace("parsed settings from %s: %r", source, out)
        return out

    def to_toml_table(self) -> dict[str, Any]:
        """Serialize only explicitly set keys to a TOML-friendly dict."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value: Any = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, frozenset):
                out[f.name] = [s.value for s in Status if s in value]
            elif isinstance(value, State):
                out[f.name] = value.value
            else:
                out[f.name] = value
        return out


# --- process-wide layer ---

_lock = RLock()
_global_overlay: MutableSettings = MutableSettings()


def get_settings() -> Settings:
    """Return the process-wide settings (defaults + global overlay)."""
    with _lock:
        return _global_overlay.resolve(DEFAULT_SETTINGS)


def get_global_overlay() -> MutableSettings:
    """Return the process-wide overlay (only explicitly configured fields)."""
    with _lock:
        return _global_overlay.merge_with(MutableSettings())


def configure(overlay: MutableSettings | Mapping[str, Any] | None = None, /, **values: Any) -> Settings:
    """Apply values over the process-wide settings.

    Args:
        overlay (MutableSettings | Mapping[str, Any] | None): Settings to apply.
        **values (Any): Individual settings, e.g. ``task_breakpoints=["failed", "skipped"]``.

    Returns:
        Settings: The resulting process-wide settings.

    Example:
        ```python
        configure(workflow_breakpoints=["failed", "skipped"], backtrace=True)
        ```
    """
    global _global_overlay
    layer: MutableSettings = (
        overlay
        if isinstance(overlay, MutableSettings)
        else MutableSettings.from_mapping(overlay, source="configure()")
    )
    if values:
        layer = layer.merge_with(MutableSettings.from_mapping(values, source="configure()"))
    with _lock:
        _global_overlay = _global_overlay.merge_with(layer)
        logger.debug("process-wide settings: %r", _global_overlay)
        return _global_overlay.resolve(DEFAULT_SETTINGS)


def reset_configuration() -> None:
    """Drop the process-wide overlay, restoring the built-in defaults."""
    global _global_overlay
    with _lock:
        _global_overlay = MutableSettings()


def load_configuration(path: Path | None = None) -> Settings:
    """Load a TOML file into the process-wide settings.

    Args:
        path (Path | None): A ``taskmill.toml`` or ``pyproject.toml``. When None,
            the file is discovered from the current directory upward.

    Returns:
        Settings: The resulting process-wide settings.
    """
    from taskmill.config.io import discover_config, load_settings_file

    target: Path | None = path or discover_config()
    if target is None:
        logger.debug("no configuration file found")
        return get_settings()
    return configure(load_settings_file(target))


__all__ = [
    "DEFAULT_SETTINGS",
    "HALT_STATUSES",
    "MutableSettings",
    "Settings",
    "configure",
    "get_global_overlay",
    "get_settings",
    "load_configuration",
    "parse_breakpoints",
    "parse_nonhalting_state",
    "reset_configuration",
]
