# taskmill:header:start
#
#   project      : TaskMill
#   file         : __init__.py
#   file_relpath : src/taskmill/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""TaskMill package.

TaskMill organizes business logic as small task classes. A task declares the
attributes it reads from a shared context, runs one routine, and reports a
structured `Result`. Workflows compose tasks, and every invocation on a
thread is recorded in a `Chain`.

```python
from taskmill import Task, required

class Greet(Task):
    name = required(type="string", presence=True)

    def work(self) -> None:
        self.context.greeting = f"Hello, {self.name}"

result = Greet.execute(name="Ada")
```
"""

from __future__ import annotations

from taskmill.attributes import attribute, optional, required
from taskmill.chain import Chain
from taskmill.coercions import COERCIONS
from taskmill.config import configure, get_settings, load_configuration, reset_configuration
from taskmill.constants import TASKMILL_VERSION
from taskmill.context import Context
from taskmill.errors import ErrorSet
from taskmill.faults import FailedFault, Fault, SkippedFault
from taskmill.result import Result
from taskmill.status import State, Status
from taskmill.task import Task
from taskmill.validators import VALIDATORS
from taskmill.workflow import Strategy, Workflow, member

__version__: str = TASKMILL_VERSION

__all__ = [
    "COERCIONS",
    "VALIDATORS",
    "Chain",
    "Context",
    "ErrorSet",
    "FailedFault",
    "Fault",
    "Result",
    "SkippedFault",
    "State",
    "Status",
    "Strategy",
    "Task",
    "Workflow",
    "attribute",
    "configure",
    "get_settings",
    "load_configuration",
    "member",
    "optional",
    "required",
    "reset_configuration",
]
