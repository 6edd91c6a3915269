# taskmill:header:start
#
#   project      : TaskMill
#   file         : resolver.py
#   file_relpath : src/taskmill/attributes/resolver.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Resolve declared attributes into validated values on a task instance.

For each declaration, in declaration order:

1. Look up the raw value from the declared source.
2. Check the requirement; a required value that is absent (missing or None)
   records ``is required`` and stops there.
3. Substitute the default for an absent optional value; with no default the
   accessor is bound to None and the rest (children included) is skipped.
4. Convert with the declared types, first success wins.
5. Apply the transform.
6. Run every validation rule; failures accumulate.
7. Resolve children against the parent's value when the parent is valid.
8. Bind the value under the accessor name (memoized per invocation).

Failures never raise out of `resolve_all()`; they are collected into one
`ErrorSet` keyed by attribute path.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from taskmill.attributes.attribute import MISSING, Attribute
from taskmill.callables import CallableRef, evaluate_condition, invoke_callable
from taskmill.config.logging import TaskmillLogger, get_logger
from taskmill.context import Context
from taskmill.exceptions import CoercionError, UndefinedSourceError, UnknownCoercionError, ValidationError
from taskmill.locale import translate, type_label
from taskmill.validators import normalize_rule_options

if TYPE_CHECKING:
    from collections.abc import Iterable

    from taskmill.coercions import Coercer
    from taskmill.errors import ErrorSet
    from taskmill.registry import LayeredRegistry
    from taskmill.task import Task
    from taskmill.validators import Validator

logger: TaskmillLogger = get_logger(__name__)


class AttributeResolver:
    """Resolves one task instance's attributes into its value table.

    Args:
        task (Task): The task being invoked; resolved values are stored in its
            per-invocation table.
    """

    def __init__(self, task: Task) -> None:
        self.task: Task = task
        self.errors: ErrorSet = task.errors
        task_type: type[Task] = type(task)
        self._coercions: LayeredRegistry[Coercer] = task_type.coercions()
        self._validators: LayeredRegistry[Validator] = task_type.validators()
        self._declared: set[str] = set(task_type.attribute_registry().accessors())
        self._values: dict[str, Any] = task._attribute_values

    def resolve_all(self, attributes: Iterable[Attribute]) -> ErrorSet:
        """Resolve top-level declarations (and their children) in order.

        Returns:
            ErrorSet: Every failure recorded, empty when all values are valid.
        """
        for attr in attributes:
            self.resolve(attr)
        if self.errors:
            logger.debug("%s: invalid attributes: %s", type(self.task).__name__, self.errors.full_message)
        return self.errors

    def resolve(self, attr: Attribute, container: Any = MISSING) -> None:
        """Resolve one declaration.

        Args:
            attr (Attribute): The declaration.
            container (Any): The parent's resolved value, for nested declarations.
        """
        accessor: str = attr.accessor_name
        if accessor in self._values:
            return
        path: str = attr.path

        try:
            raw: Any = self._source_value(attr, container)
        except UndefinedSourceError as exc:
            self.errors.add(path, translate("attributes.undefined", method=exc.method))
            return

        value: Any = raw
        if raw is MISSING or raw is None:
            if attr.is_required(self.task):
                self.errors.add(path, translate("attributes.required"))
                return
            value = attr.default_for(self.task)
            if value is MISSING or value is None:
                logger.trace("%s: absent, bound to None", path)
                self._values[accessor] = None
                return

        try:
            value = self._coerce(attr, value)
        except CoercionError as exc:
            self.errors.add(path, str(exc))
            return

        try:
            value = self._transform(attr, value)
        except UndefinedSourceError as exc:
            self.errors.add(path, translate("attributes.undefined", method=exc.method))
            return

        self._values[accessor] = value
        logger.trace("%s: resolved to %r", path, value)

        if not self._validate(attr, value):
            return
        for child in attr.children:
            self.resolve(child, value)

    # --- steps ---

    def _source_value(self, attr: Attribute, container: Any) -> Any:
        if attr.parent is not None:
            return self._derive(container, attr.name)
        source: object = attr.source
        if source is None:
            return self._derive(self.task.context, attr.name)
        if isinstance(source, str):
            return self._derive(self._named_source(source), attr.name)
        return self._derive(invoke_callable(source, self.task), attr.name)

    def _named_source(self, name: str) -> Any:
        if name in self._values:
            return self._values[name]
        if name in self._declared:
            # declared but unresolved (absent or invalid): nothing to read from
            return None
        return invoke_callable(CallableRef.named(name), self.task)

    @staticmethod
    def _derive(container: Any, name: str | None) -> Any:
        if container is None or container is MISSING or name is None:
            return MISSING
        if isinstance(container, Context):
            return container.get(name, MISSING)
        if isinstance(container, Mapping):
            return container[name] if name in container else MISSING
        member: Any = getattr(container, name, MISSING)
        return member() if inspect.ismethod(member) else member

    def _coerce(self, attr: Attribute, value: Any) -> Any:
        if not attr.types:
            return value
        last_error: CoercionError | None = None
        for type_name in attr.types:
            coercer: Coercer | None = self._coercions.get(type_name)
            if coercer is None:
                raise UnknownCoercionError(type_name)
            try:
                return coercer(value, attr.options)
            except CoercionError as exc:
                logger.trace("%s: %s rejected %r", attr.path, type_name, value)
                last_error = exc
        if len(attr.types) == 1 and last_error is not None:
            raise last_error
        labels: str = ", ".join(type_label(t) for t in attr.types)
        raise CoercionError(translate("coercions.into_any", types=labels))

    def _transform(self, attr: Attribute, value: Any) -> Any:
        transform: object = attr.transform
        if transform is None:
            return value
        if isinstance(transform, str):
            member: Any = getattr(value, transform, None)
            if callable(member):
                return member()
            return invoke_callable(transform, self.task, value)
        return transform(value)  # type: ignore[operator]

    def _validate(self, attr: Attribute, value: Any) -> bool:
        valid: bool = True
        for name, raw in attr.options.items():
            validator: Validator | None = self._validators.get(name)
            if validator is None:
                continue
            options: dict[str, Any] | None = normalize_rule_options(name, raw)
            if options is None:
                continue
            if value is None and options.get("allow_nil"):
                continue
            if not evaluate_condition(
                self.task,
                value,
                if_=options.get("if", options.get("if_")),
                unless=options.get("unless"),
            ):
                continue
            try:
                validator(value, options)
            except ValidationError as exc:
                self.errors.add(attr.path, str(exc))
                valid = False
        return valid
