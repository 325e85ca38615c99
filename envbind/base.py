"""
Reflection-based environment binder.
Walks a dataclass instance, resolves env vars per field, converts them to the
declared types, and recurses into nested dataclass groups.
"""

import logging
import os
from dataclasses import dataclass, fields, is_dataclass
from typing import Annotated, Any, Mapping, get_args, get_origin, get_type_hints

from envbind.converters import convert
from envbind.errors import (
    BindError,
    ConversionError,
    MissingRequiredError,
    NotProcessableError,
    UnknownTagValueError,
)
from envbind.tags import collect_tags

logger = logging.getLogger(__name__)

MAX_DEFINED_TAG_PARTS = 2
REQUIRED_MARKER = "required"


@dataclass
class FieldSpec:
    """Lookup rules for one leaf field, derived from its metadata at bind time."""

    name: str
    default: str = ""
    required: bool = False

    def is_required(self) -> bool:
        # No default means the variable must be set.
        return self.required or self.default == ""

    @classmethod
    def from_tags(cls, field_name: str, tags: Mapping[str, str]) -> "FieldSpec":
        if "env" not in tags:
            raise NotProcessableError(field_name)

        env_value = tags["env"]
        spec = cls(name=env_value, default=tags.get("default", ""))

        parts = env_value.split(",")
        if len(parts) > MAX_DEFINED_TAG_PARTS:
            raise UnknownTagValueError(env_value)
        if len(parts) == 1:
            return spec

        if parts[0] == REQUIRED_MARKER:
            spec.name = parts[1]
        elif parts[1] == REQUIRED_MARKER:
            spec.name = parts[0]
        else:
            raise UnknownTagValueError(env_value)
        spec.required = True
        return spec


def _unwrap(hint: Any) -> tuple[Any, tuple]:
    """Split Annotated[T, *extras] into (T, extras)."""
    if get_origin(hint) is Annotated:
        args = get_args(hint)
        return args[0], tuple(args[1:])
    return hint, ()


def _is_group(hint: Any) -> bool:
    return isinstance(hint, type) and is_dataclass(hint)


def _field_hints(schema_class: type) -> dict[str, Any]:
    """
    Resolved annotations of schema_class, keyed by field name.

    Postponed (string) annotations that cannot be resolved, e.g. classes
    defined inside a function, raise TypeError naming the annotation.
    """
    try:
        return get_type_hints(schema_class, include_extras=True)
    except NameError as exc:
        postponed = [f for f in fields(schema_class) if isinstance(f.type, str)]
        if not postponed:
            return {f.name: f.type for f in fields(schema_class)}
        missing = getattr(exc, "name", None)
        culprit = next((f for f in postponed if missing and missing in f.type), postponed[0])
        raise TypeError(
            f"cannot resolve annotation {culprit.type!r} of {schema_class.__name__}.{culprit.name}: {exc}"
        ) from exc


class Binder:
    """
    Populates dataclass instances from environment variables.

    Every lookup name is `prefix + <nested group prefixes> + <env name>`.
    A Binder holds no state besides its prefix and may be reused across
    parse calls. Changing the prefix while another thread is parsing is
    the caller's problem.
    """

    def __init__(self, prefix: str = "", environ: Mapping[str, str] | None = None):
        """
        Args:
            prefix: Global prefix prepended to every variable name.
            environ: Mapping to read from (default: os.environ). Pass a dict for tests.
        """
        self.prefix = prefix
        self.environ = environ

    def set_prefix(self, prefix: str) -> None:
        self.prefix = prefix

    def parse(self, target: Any) -> None:
        """
        Bind environment variables into `target` in place.

        - target: a mutable dataclass instance (not the class itself)
        - Raises: BindError subclasses on the first field that cannot be bound;
          fields bound before the failure keep their new values
        - Raises: TypeError if target is not a dataclass instance, is frozen,
          or has annotations that cannot be resolved
        """
        if isinstance(target, type) or not is_dataclass(target):
            raise TypeError(f"target must be a dataclass instance, got {type(target).__name__}")
        if type(target).__dataclass_params__.frozen:
            raise TypeError(f"target must be mutable, {type(target).__name__} is frozen")
        self._parse(target, "", self._environ())

    def build(self, schema_class: type) -> Any:
        """
        Create an instance of schema_class through its constructor, with every
        field bound from the environment. Works for frozen schemas and runs
        __post_init__.
        """
        if not _is_group(schema_class):
            raise TypeError("Schema must be a dataclass")
        return self._build(schema_class, "", self._environ())

    def _environ(self) -> Mapping[str, str]:
        return os.environ if self.environ is None else self.environ

    def _parse(self, target: Any, group_prefix: str, environ: Mapping[str, str]) -> None:
        hints = _field_hints(type(target))

        for f in fields(target):
            hint, extras = _unwrap(hints.get(f.name, f.type))
            tags = collect_tags(extras, f.metadata)

            if _is_group(hint):
                child = getattr(target, f.name, None)
                child_prefix = group_prefix + tags.get("prefix", "")
                try:
                    if isinstance(child, hint) and not hint.__dataclass_params__.frozen:
                        self._parse(child, child_prefix, environ)
                    else:
                        setattr(target, f.name, self._build(hint, child_prefix, environ))
                except BindError as exc:
                    exc.wrap(f.name)
                    raise
                continue

            setattr(target, f.name, self._leaf(f.name, hint, tags, group_prefix, environ))

    def _build(self, schema_class: type, group_prefix: str, environ: Mapping[str, str]) -> Any:
        hints = _field_hints(schema_class)
        values: dict[str, Any] = {}
        late: dict[str, Any] = {}

        for f in fields(schema_class):
            hint, extras = _unwrap(hints.get(f.name, f.type))
            tags = collect_tags(extras, f.metadata)

            if _is_group(hint):
                try:
                    value = self._build(hint, group_prefix + tags.get("prefix", ""), environ)
                except BindError as exc:
                    exc.wrap(f.name)
                    raise
            else:
                value = self._leaf(f.name, hint, tags, group_prefix, environ)

            if f.init:
                values[f.name] = value
            else:
                late[f.name] = value

        instance = schema_class(**values)
        for name, value in late.items():
            # init=False fields; object.__setattr__ also covers frozen classes
            object.__setattr__(instance, name, value)
        return instance

    def _leaf(
        self,
        field_name: str,
        hint: Any,
        tags: Mapping[str, str],
        group_prefix: str,
        environ: Mapping[str, str],
    ) -> Any:
        spec = FieldSpec.from_tags(field_name, tags)
        variable = self.prefix + group_prefix + spec.name

        raw = environ.get(variable)
        if raw is None:
            if spec.is_required():
                raise MissingRequiredError(spec.name, variable)
            raw = spec.default
            logger.debug("%s not set, using default for %s", variable, field_name)
        else:
            logger.debug("%s bound from environment", variable)

        try:
            return convert(raw, hint, spec.name)
        except ValueError as exc:
            raise ConversionError(spec.name, raw, str(exc)) from exc


def load_config(
    schema_class: type,
    prefix: str = "",
    env: Mapping[str, str] | None = None,
) -> Any:
    """
    Build an instance of schema_class populated from the environment.

    - schema_class: a dataclass whose fields carry Env / Default / Prefix tags
    - prefix: global prefix for every variable
    - env: mapping to read from (default: os.environ). Pass a dict for tests.
    - Returns: a new instance, constructed via schema_class(**values)
    - Raises: BindError on the first field that cannot be bound
    """
    return Binder(prefix=prefix, environ=env).build(schema_class)
