# taskmill:header:start
#
#   project      : TaskMill
#   file         : __init__.py
#   file_relpath : src/taskmill/attributes/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Attribute declarations, their per-task registry and the resolver."""

from __future__ import annotations

from taskmill.attributes.attribute import (
    MISSING,
    Attribute,
    AttributeSet,
    attribute,
    optional,
    required,
)
from taskmill.attributes.registry import AttributeRegistry

__all__ = [
    "MISSING",
    "Attribute",
    "AttributeRegistry",
    "AttributeSet",
    "attribute",
    "optional",
    "required",
]
