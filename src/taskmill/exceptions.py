# taskmill:header:start
#
#   project      : TaskMill
#   file         : exceptions.py
#   file_relpath : src/taskmill/exceptions.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Exception taxonomy for TaskMill.

Hierarchy:
    - `TaskmillError`
        - `DeclarationError`: malformed task or attribute declarations; never
          captured by the executor.
            - `UnknownCoercionError`, `UnknownCallbackError`
        - `CoercionError`: a converter rejected a value (collected).
        - `ValidationError`: a validator rejected a value (collected).
        - `UndefinedSourceError`: a named routine used as a source is missing.
        - `UndefinedWorkError`: a task did not implement `work()`.
        - `InvalidTransitionError`: a forbidden state or status transition.
        - `ExecutionError`: re-running an instance that already ran.
        - `ImmutableError`: mutating a finalized task or result.
        - `ContextReadOnlyError`: writing a context during parallel fan-out.
        - `ConfigurationError`: malformed settings or configuration files.

Faults (`taskmill.faults`) also derive from `TaskmillError`.
"""

from __future__ import annotations


class TaskmillError(Exception):
    """Base class for all TaskMill errors."""


class DeclarationError(TaskmillError):
    """Raised when a task, attribute or workflow declaration is malformed."""


class UnknownCoercionError(DeclarationError):
    """Raised when an attribute names a type with no registered converter."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"unknown coercion {type_name!r}")
        self.type_name: str = type_name


class UnknownCallbackError(DeclarationError):
    """Raised when registering a callback under an unknown kind."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"unknown callback kind {kind!r}")
        self.kind: str = kind


class CoercionError(TaskmillError):
    """Raised by a converter when a value cannot be converted."""


class ValidationError(TaskmillError):
    """Raised by a validator when a value breaks a rule."""


class UndefinedSourceError(TaskmillError):
    """Raised when a named routine used as a source or transform does not exist."""

    def __init__(self, method: str) -> None:
        super().__init__(f"undefined method {method!r}")
        self.method: str = method


class UndefinedWorkError(TaskmillError, NotImplementedError):
    """Raised when a task runs without implementing `work()`."""


class InvalidTransitionError(TaskmillError):
    """Raised on a state or status transition the lifecycle forbids."""


class ExecutionError(TaskmillError):
    """Raised when a task instance is run more than once."""


class ImmutableError(TaskmillError, AttributeError):
    """Raised when mutating a finalized task or result."""


class ContextReadOnlyError(TaskmillError, TypeError):
    """Raised when writing to a context that is temporarily read-only."""


class ConfigurationError(TaskmillError, ValueError):
    """Raised for malformed settings values or configuration files."""
