"""formstate: a declarative, configuration-driven form-state engine.

formstate provides:
- An immutable form configuration (fields, constraint chains, message rules)
- A synchronous edit pipeline that settles values and diagnostics atomically
- Per-field bindings ready to be spread onto an input renderer
- Settle notifications for re-rendering or submit handling
- JSON Schema backed message rules

Basic usage:
    >>> from formstate import FormEngine
    >>> engine = FormEngine({
    ...     "fields": {
    ...         "name": {
    ...             "initialValue": "",
    ...             "constraints": lambda v: v.replace("i", ""),
    ...             "messages": {"test": lambda v: "a" in v, "message": "Contains 'a'"},
    ...         },
    ...     },
    ... })
    >>> engine.apply_edit("name", "Maria")
    >>> engine.values["name"], engine.bind("name")["error"]
    ('Mara', "Contains 'a'")
"""

__version__ = "0.1.0"
__author__ = "formstate Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from formstate.config import FieldConfig, FormConfig, GlobalMessageRule, MessageRule
from formstate.engine import EditEvent, FormEngine
from formstate.snapshot import FormSnapshot
from formstate.validation import schema_rules

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "EditEvent",
    "FieldConfig",
    "FormConfig",
    "FormEngine",
    "FormSnapshot",
    "GlobalMessageRule",
    "MessageRule",
    "schema_rules",
]
