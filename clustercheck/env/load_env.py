import os
from typing import Any, Callable, Dict, TypeVar

from dotenv import dotenv_values
from pydantic import BaseModel

from .env import Env, PrimaryType

T = TypeVar("T", bound=BaseModel)


def _read_process_env(
    types_map: Dict[str, Callable[[str], PrimaryType]],
) -> Dict[str, Any]:
    return {
        name: convert(os.environ[name])
        for name, convert in types_map.items()
        if os.environ.get(name)
    }


def _read_env_file(
    env_file: str,
    types_map: Dict[str, Callable[[str], PrimaryType]],
) -> Dict[str, Any]:
    if not os.path.exists(env_file):
        return {}

    values: Dict[str, Any] = {}
    for name, raw_value in dotenv_values(dotenv_path=env_file).items():
        convert = types_map.get(name)
        if convert and raw_value is not None:
            values[name] = convert(raw_value)

    return values


def load_env(
    default: type[Env] = Env,
    env_file: str | None = None,
    override: T | None = None,
) -> T:
    """
    Build settings from the process environment, then ``env_file``
    (``.env`` by default), then any values explicitly set on ``override``.
    Later sources win.
    """
    types_map = default.types_map()

    values = _read_process_env(types_map)
    values.update(_read_env_file(env_file or ".env", types_map))

    model = default
    if override is not None:
        values.update(override.model_dump(exclude_unset=True, exclude_none=True))
        model = type(override)

    return model(**values)
