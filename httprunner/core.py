"""httprunner core - config loading, request-file discovery, result export."""

import json
import logging
import os
import re
import time
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values

from httprunner.errors import HttpRunnerError
from httprunner.models import ProcessorResults
from httprunner.timeout import parse_timeout_value

logger = logging.getLogger(__name__)

GLOBAL_DIR = Path.home() / ".httprunner"
GLOBAL_CONFIG = GLOBAL_DIR / "config.yaml"

CWD_CONFIG_CANDIDATES = [
    ".httprunner.yaml",
    ".httprunner.yml",
    "httprunner.yaml",
    "httprunner.yml",
]

HTTP_FILE_SUFFIX = ".http"
EXPORT_PREFIX = "httprunner_results_"


# ── Configuration ────────────────────────────────────────────────────────


def resolve_path(
    candidates: list[Path],
    default: Path | None = None,
) -> Path | None:
    """Return the first existing path from candidates, else default."""
    for p in candidates:
        if p.exists():
            return p.resolve()
    return default


def resolve_config_path(config_file: str | None) -> Path | None:
    """Find the config file to use.

    Resolution order:
      1. Explicit -c flag (hard, no fallthrough if missing)
      2. .httprunner.yaml (variants) in CWD
      3. ~/.httprunner/config.yaml
    """
    if config_file:
        return resolve_path([Path(config_file)])
    return resolve_path([Path(c) for c in CWD_CONFIG_CANDIDATES] + [GLOBAL_CONFIG])


def load_config(config_path: str | Path | None) -> dict:
    """Load YAML config file. Returns an empty defaults section if not found.

    '_config_dir' is stored so env_file can be resolved relative to the
    config file.
    """
    if config_path is None:
        return {"defaults": {}, "_config_dir": None}
    path = Path(config_path)
    if not path.exists():
        return {"defaults": {}, "_config_dir": None}
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise HttpRunnerError(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise HttpRunnerError(f"Invalid config file {path}: expected a mapping")
    logger.debug("Loaded config from %s", path)
    return {
        "defaults": data.get("defaults") or {},
        "_config_dir": path.resolve().parent,
    }


def load_env(env_file: str | None, base_dir: str | Path = ".") -> dict[str, str]:
    """Load .env file and merge it over os.environ."""
    env = dict(os.environ)
    if env_file:
        dotenv_path = Path(base_dir) / env_file
        if dotenv_path.exists():
            dotenv_vars = dotenv_values(str(dotenv_path))
            env.update({k: v for k, v in dotenv_vars.items() if v is not None})
        else:
            logger.warning("env_file %s not found", dotenv_path)
    return env


def resolve_value(value: Any, env: dict[str, str]) -> Any:
    """Resolve $VAR and ${VAR} references in a string value.

    Unknown variables are left as written; non-strings pass through.
    """
    if not isinstance(value, str):
        return value

    def _replace(m: re.Match) -> str:
        var_name = m.group(1) or m.group(2)
        return env.get(var_name, m.group(0))

    return re.sub(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)", _replace, value)


def resolve_defaults(config: dict) -> dict[str, Any]:
    """Return the config's defaults with env references resolved."""
    defaults = config.get("defaults", {})
    base_dir = config.get("_config_dir") or "."
    env = load_env(defaults.get("env_file"), base_dir)
    return {k: resolve_value(v, env) for k, v in defaults.items()}


def parse_duration_setting(key: str, value: Any, default_factor: int = 1_000) -> int | None:
    """Parse a config/CLI duration ("30", "500ms", "2m") into milliseconds."""
    if value is None:
        return None
    millis = parse_timeout_value(str(value), default_factor)
    if millis is None:
        raise HttpRunnerError(f"Invalid value for {key}: {value!r}")
    return millis


def parse_jobs_setting(value: Any) -> int:
    """Parse the file-level parallelism setting; None means 1."""
    if value is None:
        return 1
    try:
        jobs = int(value)
    except (TypeError, ValueError):
        jobs = 0
    if isinstance(value, bool) or jobs < 1:
        raise HttpRunnerError(f"Invalid value for jobs: {value!r}")
    return jobs


# ── Discovery ────────────────────────────────────────────────────────────


def discover_http_files(root: str | Path = ".") -> list[Path]:
    """Recursively find *.http files under root, sorted by path."""
    return sorted(p for p in Path(root).rglob(f"*{HTTP_FILE_SUFFIX}") if p.is_file())


# ── Export ───────────────────────────────────────────────────────────────


def export_results(results: ProcessorResults, output_dir: str | Path | None = None) -> Path:
    """Write results as pretty JSON to httprunner_results_<unix ts>.json.

    Creates output_dir if it doesn't exist. Returns the written path.
    """
    out = Path(output_dir) if output_dir else Path(".")
    out.mkdir(parents=True, exist_ok=True)
    path = out / f"{EXPORT_PREFIX}{int(time.time())}.json"
    with open(path, "w") as f:
        json.dump(results.to_dict(), f, indent=2)
    logger.info("Exported results to %s", path)
    return path
