"""Reading ``KEY=VALUE`` configuration files."""

from __future__ import annotations

from pathlib import Path


class ConfigError(Exception):
    """Raised when a configuration file cannot be read."""


def load_config(path: str | Path) -> dict[str, str]:
    """Read a configuration file into a dict.

    Blank lines and lines starting with ``#`` are ignored; every other line is
    split on its first ``=``. Lines without ``=`` are skipped.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read configuration file {path}") from exc

    config: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, sep, value = stripped.partition("=")
        if not sep:
            continue
        config[key.strip()] = value.strip()
    return config