"""envbind: bind environment variables into typed dataclass schemas."""

from envbind.base import Binder, FieldSpec, load_config
from envbind.env import load_env
from envbind.errors import (
    BindError,
    ConversionError,
    MissingRequiredError,
    NotProcessableError,
    UnknownTagValueError,
    UnsupportedTypeError,
)
from envbind.tags import Default, Env, Prefix, env_field
from envbind.types import (
    Duration,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)

__all__ = [
    "Binder",
    "FieldSpec",
    "load_config",
    "load_env",
    "BindError",
    "ConversionError",
    "MissingRequiredError",
    "NotProcessableError",
    "UnknownTagValueError",
    "UnsupportedTypeError",
    "Env",
    "Default",
    "Prefix",
    "env_field",
    "Duration",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Float32",
    "Float64",
]
