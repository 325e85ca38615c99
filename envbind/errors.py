"""
Errors raised while binding environment variables into a schema.

Every error raised by Binder.parse derives from BindError. Nested group
failures re-raise the same error object with the enclosing field name pushed
onto `path`, so callers can match on the concrete class at any depth.
"""


class BindError(Exception):
    """Base class for binding failures."""

    def __init__(self, message: str):
        self.message = message
        self.path: list[str] = []
        super().__init__(message)

    def wrap(self, group: str) -> "BindError":
        """Record that the failure happened inside nested group `group`."""
        self.path.insert(0, group)
        return self

    def __str__(self) -> str:
        chain = "".join(f"failed to bind nested group {g!r}: " for g in self.path)
        return chain + self.message


class NotProcessableError(BindError):
    """Raised when a leaf field has no `env` metadata."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"not processable, missing required tags: field {field!r}")


class UnknownTagValueError(BindError):
    """Raised when the `env` metadata is not NAME, NAME,required or required,NAME."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"unknown tag value: env:{value!r}")


class MissingRequiredError(BindError):
    """Raised when a required variable is absent from the environment."""

    def __init__(self, name: str, variable: str):
        self.name = name
        self.variable = variable
        super().__init__(f"missing required variable: {name!r}")


class UnsupportedTypeError(BindError):
    """Raised when the destination type has no known conversion."""

    def __init__(self, type_name: str, value: str, name: str = ""):
        self.type_name = type_name
        self.value = value
        self.name = name
        lead = f"{name}: " if name else ""
        super().__init__(f"{lead}unsupported variable type: {type_name}:{value!r}")


class ConversionError(BindError):
    """Raised when a value fails to parse for its destination type. The parse error is the __cause__."""

    def __init__(self, name: str, value: str, reason: str):
        self.name = name
        self.value = value
        super().__init__(f"{name}: {reason}")
