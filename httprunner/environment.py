"""httprunner environments - http-client.env.json lookup and loading."""

import json
import logging
from pathlib import Path
from typing import Any

from httprunner.errors import EnvironmentFileError
from httprunner.models import Variable

logger = logging.getLogger(__name__)

ENV_FILE_NAME = "http-client.env.json"


def find_environment_file(http_file_path: str | Path) -> Path | None:
    """Walk upward from the request file's directory to the nearest env file."""
    current = Path(http_file_path).resolve().parent
    for directory in (current, *current.parents):
        candidate = directory / ENV_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return json.dumps(value, separators=(",", ":"))


def parse_environment_file(path: str | Path) -> dict[str, list[Variable]]:
    """Read an env file into {environment: [Variable, ...]} keeping key order.

    Non-string values are stringified: numbers and booleans as their JSON
    literal, objects and arrays as compact JSON, null as an empty string.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise EnvironmentFileError(f"Invalid environment file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise EnvironmentFileError(f"{path} is not valid UTF-8: {e}") from e

    if not isinstance(data, dict):
        raise EnvironmentFileError(f"Invalid environment file {path}: top level must be an object")

    environments: dict[str, list[Variable]] = {}
    for env_name, env_vars in data.items():
        if not isinstance(env_vars, dict):
            continue
        environments[env_name] = [Variable(k, _stringify(v)) for k, v in env_vars.items()]
    return environments


def load_environment_file(
    http_file_path: str | Path,
    environment_name: str | None,
) -> list[Variable]:
    """Return the variables of ``environment_name`` for a request file.

    Empty when no environment is selected, no env file is found, or the
    env file does not define that environment.
    """
    if not environment_name:
        return []

    env_path = find_environment_file(http_file_path)
    if env_path is None:
        logger.debug("No %s found above %s", ENV_FILE_NAME, http_file_path)
        return []

    environments = parse_environment_file(env_path)
    variables = environments.get(environment_name)
    if variables is None:
        logger.warning("Environment '%s' not defined in %s", environment_name, env_path)
        return []
    logger.debug("Loaded %d variable(s) for '%s' from %s", len(variables), environment_name, env_path)
    return variables
