"""
Tag types for bindable schema definitions.
Used inside Annotated[type, ...] to declare env names, defaults, and group prefixes.
"""

import dataclasses
from typing import Any

TAG_KEYS = ("env", "default", "prefix")


class Tag:
    """Base for metadata tags; `key` is the fixed lookup key the binder reads."""

    key = ""

    def __init__(self, value: object):
        self.value = str(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class Env(Tag):
    """Variable name, optionally joined with the `required` marker: "NAME,required"."""

    key = "env"


class Default(Tag):
    """Default value used verbatim when the variable is not set."""

    key = "default"


class Prefix(Tag):
    """Prefix fragment for every variable inside a nested group."""

    key = "prefix"


def env_field(
    env: str | None = None,
    env_default: object = None,
    prefix: str | None = None,
    **kwargs: Any,
) -> Any:
    """
    Build a dataclasses.field carrying the same metadata as the tags above.

    `env_default` is the value used when the variable is unset; `default`
    and the other keyword arguments go to dataclasses.field unchanged.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if env is not None:
        metadata["env"] = env
    if env_default is not None:
        metadata["default"] = str(env_default)
    if prefix is not None:
        metadata["prefix"] = prefix
    return dataclasses.field(metadata=metadata, **kwargs)


def collect_tags(annotated_extras: tuple, field_metadata: Any) -> dict[str, str]:
    """Merge field metadata and Annotated tags into {key: value}; tags win."""
    found: dict[str, str] = {}
    for key in TAG_KEYS:
        if field_metadata and key in field_metadata:
            found[key] = str(field_metadata[key])
    for extra in annotated_extras:
        if isinstance(extra, Tag):
            found[extra.key] = extra.value
    return found
