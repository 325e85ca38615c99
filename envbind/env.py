"""envbind.env

Environment bootstrap before binding.

    from envbind.env import load_env
    load_env()

The binder only reads the process environment; this puts a `.env` file's
variables there first.
"""

from dotenv import find_dotenv, load_dotenv


def load_env(path: str | None = None, *, override: bool = False) -> bool:
    """Load variables from a `.env` file if present. Returns True if any were set."""
    if path is None:
        path = find_dotenv(usecwd=True)
    if not path:
        return False
    return load_dotenv(path, override=override)
