# taskmill:header:start
#
#   project      : TaskMill
#   file         : task.py
#   file_relpath : src/taskmill/task.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""The `Task` base class.

A task declares its inputs in the class body, implements `work()`, and is
invoked through `execute()` (tolerant, always returns a `Result`) or
`execute_strict()` (raises the matching `Fault` on a breakpoint status):

```python
class ChargeCard(Task, task_breakpoints=("failed", "skipped")):
    amount = required(type="big_decimal", numeric={"min": 1})
    currency = optional(type="string", default="EUR", transform="upper")
    returns = ("charge_id",)

    def work(self) -> None:
        if self.context.get("test_mode"):
            self.skip("test mode")
        self.context.charge_id = gateway.charge(self.amount, self.currency)

result = ChargeCard.execute(amount="12.50")
```

Class construction (`__init_subclass__`) copies the parent's registries,
applies ``custom_coercions`` / ``custom_validators`` from the class body,
binds every declared attribute as a read-only descriptor, accumulates
``returns`` and records class keywords as the type's settings overlay.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, ClassVar, Final

from taskmill.attributes import Attribute, AttributeRegistry, AttributeSet
from taskmill.coercions import COERCIONS
from taskmill.config.logging import TaskmillLogger, get_logger
from taskmill.config.settings import MutableSettings, get_settings
from taskmill.context import Context
from taskmill.core.enum_mixins import norm_token
from taskmill.errors import ErrorSet
from taskmill.exceptions import DeclarationError, ImmutableError, UndefinedWorkError, UnknownCoercionError
from taskmill.executor import Executor
from taskmill.hooks import CallbackRegistry, MiddlewareRegistry
from taskmill.result import Result
from taskmill.validators import VALIDATORS

if TYPE_CHECKING:
    from collections.abc import Iterable

    from taskmill.chain import Chain
    from taskmill.coercions import Coercer
    from taskmill.config.settings import Settings
    from taskmill.registry import LayeredRegistry
    from taskmill.validators import Validator

logger: TaskmillLogger = get_logger(__name__)

# instance fields an attribute accessor may not shadow
_INSTANCE_FIELDS: Final[frozenset[str]] = frozenset({"id", "context", "result", "errors"})


class Task:
    """Base class of every unit of work.

    Args:
        context (object): None, a mapping, an existing `Context` (shared by
            reference), or an object exposing a ``context`` (a task or result).
        **data (Any): Merged into the context.

    Attributes:
        id (str): Unique id of this instance.
        context (Context): The value store shared with nested invocations.
        result (Result): The outcome record of this instance.
        errors (ErrorSet): Attribute failures recorded while resolving inputs.
    """

    returns: ClassVar[tuple[str, ...]] = ()

    _attributes: ClassVar[AttributeRegistry] = AttributeRegistry()
    _coercions: ClassVar[LayeredRegistry[Coercer]] = COERCIONS.overlay()
    _validators: ClassVar[LayeredRegistry[Validator]] = VALIDATORS.overlay()
    _callbacks: ClassVar[CallbackRegistry] = CallbackRegistry()
    _middlewares: ClassVar[MiddlewareRegistry] = MiddlewareRegistry()
    _settings_overlay: ClassVar[MutableSettings] = MutableSettings()

    def __init_subclass__(cls, **settings: Any) -> None:
        super().__init_subclass__()
        base: type[Task] = next(b for b in cls.__mro__[1:] if issubclass(b, Task))

        cls._attributes = base._attributes.copy()
        cls._coercions = base._coercions.overlay()
        cls._validators = base._validators.overlay()
        cls._callbacks = base._callbacks.copy()
        cls._middlewares = base._middlewares.copy()
        cls._settings_overlay = MutableSettings.from_mapping(settings, source=cls.__qualname__)

        namespace: dict[str, Any] = dict(vars(cls))
        for name, entry in namespace.get("custom_coercions", {}).items():
            cls._coercions.register(name, entry)
        for name, entry in namespace.get("custom_validators", {}).items():
            cls._validators.register(name, entry)

        declared: list[Attribute] = []
        for holder, value in namespace.items():
            if isinstance(value, AttributeSet):
                delattr(cls, holder)
                declared.extend(value)
            elif isinstance(value, Attribute):
                if value.accessor_name != holder:
                    delattr(cls, holder)
                declared.append(value)
        cls._bind_attributes(declared)

        own_returns: object = namespace.get("returns", ())
        if isinstance(own_returns, str):
            own_returns = (own_returns,)
        accumulated: list[str] = list(base.returns)
        for name in own_returns:  # type: ignore[union-attr]
            if name not in accumulated:
                accumulated.append(name)
        cls.returns = tuple(accumulated)

        logger.trace(
            "defined task %s: attributes=%s returns=%s",
            cls.__qualname__,
            cls._attributes.accessors(),
            cls.returns,
        )

    def __init__(self, context: object = None, /, **data: Any) -> None:
        store: Context = Context.build(context)
        if data:
            store.merge(data)
        self.id: str = str(uuid.uuid4())
        self.context: Context = store
        self.errors: ErrorSet = ErrorSet()
        self.result: Result = Result(self)
        self._attribute_values: dict[str, Any] = {}

    def __setattr__(self, name: str, value: Any) -> None:
        if self.__dict__.get("_frozen", False):
            raise ImmutableError(f"cannot modify {name!r}: {type(self).__name__} is frozen")
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id}>"

    # --- declarations ---

    @classmethod
    def _bind_attributes(cls, attributes: Iterable[Attribute]) -> None:
        attrs: list[Attribute] = list(attributes)
        for attr in attrs:
            if attr.name is None:
                raise DeclarationError(f"{cls.__qualname__}: attributes must be named")
        for attr in attrs:
            for node in attr.walk():
                accessor: str = node.accessor_name
                if accessor in _INSTANCE_FIELDS or hasattr(Task, accessor):
                    raise DeclarationError(f"{cls.__qualname__}: attribute {accessor!r} shadows a Task member")
                existing: object = vars(cls).get(accessor)
                if existing is not None and existing is not node:
                    raise DeclarationError(f"{cls.__qualname__}: attribute {accessor!r} shadows {existing!r}")
                for type_name in node.types:
                    if type_name not in cls._coercions:
                        raise UnknownCoercionError(type_name)
        cls._attributes.register(*attrs)
        for attr in attrs:
            for node in attr.walk():
                node.owner = cls
                setattr(cls, node.accessor_name, node)

    @classmethod
    def declare(cls, *attributes: Attribute | AttributeSet) -> None:
        """Add attribute declarations after the class was defined.

        Example:
            ```python
            CreateUser.declare(optional("nickname", type="string"))
            ```
        """
        flat: list[Attribute] = []
        for entry in attributes:
            flat.extend(entry if isinstance(entry, AttributeSet) else (entry,))
        cls._bind_attributes(flat)

    @classmethod
    def remove_attributes(cls, *names: str) -> list[Attribute]:
        """Remove declarations by name or accessor; returns the removed ones."""
        removed: list[Attribute] = cls._attributes.deregister(*names)
        for attr in removed:
            for node in attr.walk():
                if vars(cls).get(node.accessor_name) is node:
                    delattr(cls, node.accessor_name)
        if removed:
            logger.debug("%s: removed attributes %s", cls.__qualname__, [a.name for a in removed])
        return removed

    @classmethod
    def attribute_registry(cls) -> AttributeRegistry:
        return cls._attributes

    @classmethod
    def coercions(cls) -> LayeredRegistry[Coercer]:
        return cls._coercions

    @classmethod
    def validators(cls) -> LayeredRegistry[Validator]:
        return cls._validators

    @classmethod
    def callbacks(cls) -> CallbackRegistry:
        return cls._callbacks

    @classmethod
    def middlewares(cls) -> MiddlewareRegistry:
        return cls._middlewares

    @classmethod
    def register(cls, kind: str, *args: Any, **options: Any) -> None:
        """Register an extension on this task type (and its future subclasses).

        Args:
            kind (str): ``coercion``, ``validator``, ``callback`` or ``middleware``.
            *args (Any): ``(name, converter)``, ``(name, validator)``,
                ``(callback_kind, *callables)`` or ``(middleware,)``.
            **options (Any): ``if_`` / ``unless`` for callbacks, constructor
                options for middlewares.

        Raises:
            DeclarationError: On an unknown `kind` or malformed arguments.
        """
        registry_kind: str = norm_token(kind)
        if registry_kind in ("coercion", "validator"):
            if len(args) != 2 or options:
                raise DeclarationError(f"register({kind!r}, ...) expects a name and a callable")
            name, entry = args
            target = cls._coercions if registry_kind == "coercion" else cls._validators
            target.register(name, entry)
        elif registry_kind == "callback":
            if not args:
                raise DeclarationError("register('callback', ...) expects a callback kind")
            cls._callbacks.register(args[0], *args[1:], **options)
        elif registry_kind == "middleware":
            if len(args) != 1:
                raise DeclarationError("register('middleware', ...) expects one middleware")
            cls._middlewares.register(args[0], **options)
        else:
            raise DeclarationError(f"unknown registry kind {kind!r}")

    @classmethod
    def deregister(cls, kind: str, name: object, target: object = None) -> bool:
        """Remove an extension from this task type.

        Args:
            kind (str): ``coercion``, ``validator``, ``callback`` or ``middleware``.
            name (object): Converter/validator name, callback kind, or the
                middleware itself.
            target (object): For callbacks, only remove this callable.

        Returns:
            bool: True if something was removed.
        """
        registry_kind: str = norm_token(kind)
        if registry_kind == "coercion":
            return cls._coercions.unregister(str(name))
        if registry_kind == "validator":
            return cls._validators.unregister(str(name))
        if registry_kind == "callback":
            return cls._callbacks.deregister(str(name), target)
        if registry_kind == "middleware":
            return cls._middlewares.deregister(name)
        raise DeclarationError(f"unknown registry kind {kind!r}")

    # --- settings ---

    @classmethod
    def settings(cls) -> Settings:
        """Effective settings: process-wide settings plus class keywords along the MRO."""
        overlay: MutableSettings = MutableSettings()
        for klass in reversed(cls.__mro__):
            layer: MutableSettings | None = vars(klass).get("_settings_overlay")
            if layer is not None:
                overlay = overlay.merge_with(layer)
        return overlay.resolve(get_settings())

    @classmethod
    def configure(cls, **values: Any) -> Settings:
        """Apply settings to this task type, over its class keywords."""
        layer: MutableSettings = MutableSettings.from_mapping(values, source=cls.__qualname__)
        cls._settings_overlay = cls._settings_overlay.merge_with(layer)
        return cls.settings()

    @classmethod
    def describe(cls) -> dict[str, Any]:
        """Describe the task type's declarations and settings."""
        return {
            "task": cls.__qualname__,
            "attributes": [attr.to_dict() for attr in cls._attributes],
            "returns": list(cls.returns),
            "settings": cls.settings().to_toml_table(),
        }

    # --- invocation ---

    @classmethod
    def execute(cls, context: object = None, /, **data: Any) -> Result:
        """Run a new instance and return its result; never raises faults."""
        return cls(context, **data).run()

    @classmethod
    def execute_strict(cls, context: object = None, /, **data: Any) -> Result:
        """Run a new instance, raising its fault when the status is a breakpoint.

        Raises:
            Fault: When the final status is in ``task_breakpoints``.
            Exception: Uncontrolled errors from `work()` propagate unchanged.
        """
        return cls(context, **data).run(strict=True)

    def run(self, *, strict: bool = False) -> Result:
        """Run this instance once.

        Raises:
            ExecutionError: If this instance already ran.
        """
        return Executor(self).execute(strict=strict)

    def work(self) -> None:
        """The routine of the task; subclasses must override it."""
        raise UndefinedWorkError(f"{type(self).__name__} does not implement work()")

    # --- halts ---

    def skip(
        self,
        reason: str | None = None,
        *,
        halt: bool = True,
        cause: BaseException | None = None,
        **metadata: Any,
    ) -> None:
        """Skip the invocation (see `Result.skip`)."""
        self.result.skip(reason, halt=halt, cause=cause, **metadata)

    def fail(
        self,
        reason: str | None = None,
        *,
        halt: bool = True,
        cause: BaseException | None = None,
        **metadata: Any,
    ) -> None:
        """Fail the invocation (see `Result.fail`)."""
        self.result.fail(reason, halt=halt, cause=cause, **metadata)

    def throw(
        self,
        result: Result,
        *,
        halt: bool = True,
        cause: BaseException | None = None,
        **metadata: Any,
    ) -> None:
        """Propagate another invocation's skip or failure (see `Result.throw`)."""
        self.result.throw(result, halt=halt, cause=cause, **metadata)

    @property
    def chain(self) -> Chain | None:
        return self.result.chain

    def freeze(self) -> None:
        """Make the task and its result immutable."""
        object.__setattr__(self, "_frozen", True)
        self.result.freeze()

    @property
    def is_frozen(self) -> bool:
        return self.__dict__.get("_frozen", False)

