"""Configuration loading for nextpack (.nextpack.yml and the build context file)."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .constants import CONFIG_FILENAME, CONTEXT_FILENAME
from .logging import get_logger
from .models import BuildContext

logger = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CompileConfig:
    """Settings forwarded to ``bun build --compile``."""

    executable: str = "bun"
    outfile: Optional[Path] = None
    minify: bool = True
    bytecode: bool = True
    sourcemap: bool = True
    extra_args: List[str] = field(default_factory=list)


@dataclass
class NextpackConfig:
    """Represents the settings defined in .nextpack.yml."""

    root: Path
    compile: CompileConfig = field(default_factory=CompileConfig)


def load_config(config_path: Path) -> NextpackConfig:
    """Load configuration from a project directory or a ``.nextpack.yml`` path."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return NextpackConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    compile_config = CompileConfig()
    compile_data = _as_dict(data.get("compile"))
    if compile_data:
        executable = _as_str(compile_data.get("executable"))
        if executable:
            compile_config.executable = executable
        outfile = _as_str(compile_data.get("outfile"))
        if outfile:
            compile_config.outfile = root / outfile
        for flag in ("minify", "bytecode", "sourcemap"):
            value = _as_bool(compile_data.get(flag))
            if value is not None:
                setattr(compile_config, flag, value)
        compile_config.extra_args = _as_str_list(compile_data.get("extra_args"))

    return NextpackConfig(root=root, compile=compile_config)


def load_build_context(dist_dir: Path) -> Optional[BuildContext]:
    """Return the context recorded by the build hook, or ``None`` when unavailable.

    The file is optional: without it nextpack simply cannot tell whether static
    assets are served from a CDN.
    """
    context_path = Path(dist_dir) / CONTEXT_FILENAME
    try:
        payload = json.loads(context_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable build context %s: %s", context_path, exc)
        return None

    if not isinstance(payload, dict):
        logger.warning("Ignoring build context %s: expected a JSON object", context_path)
        return None

    return BuildContext(
        dist_dir=_as_str(payload.get("distDir")),
        project_dir=_as_str(payload.get("projectDir")),
        asset_prefix=_as_str(payload.get("assetPrefix")),
    )


def write_build_context(dist_dir: Path, context: BuildContext) -> Path:
    """Persist ``context`` as ``bun-compile-ctx.json`` inside ``dist_dir``."""
    context_path = Path(dist_dir) / CONTEXT_FILENAME
    context_path.parent.mkdir(parents=True, exist_ok=True)
    values = asdict(context)
    payload = {
        "distDir": values["dist_dir"] or "",
        "projectDir": values["project_dir"] or "",
        "assetPrefix": values["asset_prefix"] or "",
    }
    context_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return context_path


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CompileConfig",
    "ConfigError",
    "NextpackConfig",
    "load_build_context",
    "load_config",
    "write_build_context",
]
