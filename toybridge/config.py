import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .options_schema import OPTIONS
from .types import InputSourceSpec, ProjectDefaults, ServerConfig, ViewConfig

def load_defaults() -> Dict[str, Any]:
    defaults = {}
    for opt in OPTIONS:
        defaults[opt.name] = opt.default
    return defaults

def load_from_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix.lower() in ['.yaml', '.yml']:
                data = yaml.safe_load(f) or {}
            elif path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping of options")
    return data

def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    # Options are flat, a shallow merge is enough
    res = base.copy()
    for k, v in override.items():
        if v is not None:
            res[k] = v
    return res

def build_config(config_path: Optional[Path] = None, cli_args: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    cfg = load_defaults()

    if config_path:
        file_cfg = load_from_file(config_path)
        cfg = merge_configs(cfg, file_cfg)

    if cli_args:
        cfg = merge_configs(cfg, cli_args)

    return cfg

def defaults_from_config(cfg: Dict[str, Any]) -> ProjectDefaults:
    """Builds the settings embedded in every generated project from a config dict."""
    return ProjectDefaults(
        bpm=float(cfg["bpm"]),
        view=ViewConfig(
            width=int(cfg["width"]),
            height=int(cfg["height"]),
            fullscreen=bool(cfg["fullscreen"]),
            dynamic=bool(cfg["dynamic"]),
            vsync=bool(cfg["vsync"]),
            screenshot=bool(cfg["screenshot"]),
            screenshot_path=str(cfg["screenshot_path"]),
            screenshot_frame_count=int(cfg["screenshot_frame_count"]),
            target_fps=float(cfg["target_fps"]),
            locked_speed=bool(cfg["locked_speed"]),
        ),
        server=ServerConfig(
            ip=str(cfg["server_ip"]),
            port=int(cfg["server_port"]),
            enable=bool(cfg["server_enable"]),
        ),
        camera=InputSourceSpec(
            path=str(cfg["camera_path"]),
            width=int(cfg["camera_width"]),
            height=int(cfg["camera_height"]),
        ),
        precision=str(cfg["precision"]),
    )
