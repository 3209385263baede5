"""Configuration handling for worktree-manager

Settings come from four layers, merged field by field with later layers winning:

1. built-in defaults (the ``Config`` field defaults)
2. the base config file, ``<config_dir>/config.json``
3. a named profile, ``<config_dir>/profiles/<name>.json``
4. command-line flags
"""

import json
import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from worktree_manager.constants import (
    CONFIG_DIR_ENV_VAR,
    CONFIG_FILE_NAME,
    DEFAULT_AI_COMMAND,
    DEFAULT_AI_TIMEOUT,
    DEFAULT_CONFIG_DIR,
    DEFAULT_TERMINAL_APP,
    DEFAULT_TERMINAL_COMMAND,
    DEFAULT_WORKTREE_BASE_PATH,
    PACKAGE_MANAGER_CHOICES,
    PROFILES_DIR_NAME,
    TERMINAL_APPS,
)
from worktree_manager.exceptions import ConfigError, ProfileNotFoundError, ValidationError
from worktree_manager.logging_config import get_logger

logger = get_logger(__name__)

PROFILE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


@dataclass(frozen=True)
class Config:
    """Effective configuration for one worktree-manager run; immutable once built."""

    # Placement
    worktree_base_path: str = DEFAULT_WORKTREE_BASE_PATH
    default_branch: Optional[str] = None  # None = detect from origin/HEAD

    # Terminal
    terminal_app: str = DEFAULT_TERMINAL_APP
    open_terminal: bool = True
    terminal_command: str = DEFAULT_TERMINAL_COMMAND

    # Worktree bootstrap
    auto_install_deps: bool = True
    package_manager: str = "auto"  # auto, pnpm, yarn, npm, bun
    copy_env_files: bool = True

    # Branch naming assistant
    ai_branch_names: bool = False
    ai_command: str = DEFAULT_AI_COMMAND
    ai_timeout: int = DEFAULT_AI_TIMEOUT

    # GitHub integration
    github_token: Optional[str] = None

    # Execution modes
    debug: bool = False
    profile: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_base_path()
        self._validate_terminal_app()
        self._validate_package_manager()
        self._validate_ai_timeout()
        self._validate_default_branch()

    def _validate_base_path(self):
        """Validate worktree_base_path is not empty."""
        if not self.worktree_base_path or not self.worktree_base_path.strip():
            raise ValueError("worktree_base_path cannot be empty")
        object.__setattr__(self, "worktree_base_path", self.worktree_base_path.strip())

    def _validate_terminal_app(self):
        """Validate terminal_app is one of the supported apps."""
        if self.terminal_app not in TERMINAL_APPS:
            raise ValueError(f"terminal_app must be one of {TERMINAL_APPS}, got '{self.terminal_app}'")

    def _validate_package_manager(self):
        """Validate package_manager is one of allowed values."""
        if self.package_manager not in PACKAGE_MANAGER_CHOICES:
            raise ValueError(
                f"package_manager must be one of {PACKAGE_MANAGER_CHOICES}, got '{self.package_manager}'"
            )

    def _validate_ai_timeout(self):
        """Validate ai_timeout is positive."""
        if self.ai_timeout <= 0:
            raise ValueError(f"ai_timeout must be positive, got {self.ai_timeout}")

    def _validate_default_branch(self):
        """Normalize an empty default_branch to None."""
        if self.default_branch is not None and not self.default_branch.strip():
            object.__setattr__(self, "default_branch", None)

    @property
    def base_path(self) -> Path:
        """Worktree base directory with ``~`` expanded, made absolute."""
        return Path(os.path.expanduser(self.worktree_base_path)).resolve()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


# Expected JSON types per field; Optional fields also accept null
FIELD_TYPES: Dict[str, type] = {
    "worktree_base_path": str,
    "default_branch": str,
    "terminal_app": str,
    "open_terminal": bool,
    "terminal_command": str,
    "auto_install_deps": bool,
    "package_manager": str,
    "copy_env_files": bool,
    "ai_branch_names": bool,
    "ai_command": str,
    "ai_timeout": int,
    "github_token": str,
    "debug": bool,
}

# camelCase spellings accepted in JSON config files
KEY_ALIASES: Dict[str, str] = {
    "worktreeBasePath": "worktree_base_path",
    "defaultBranch": "default_branch",
    "terminalApp": "terminal_app",
    "openTerminal": "open_terminal",
    "terminalCommand": "terminal_command",
    "autoInstallDeps": "auto_install_deps",
    "packageManager": "package_manager",
    "copyEnvFiles": "copy_env_files",
    "aiBranchNames": "ai_branch_names",
    "aiCommand": "ai_command",
    "aiTimeout": "ai_timeout",
    "githubToken": "github_token",
}


@dataclass
class ConfigLayer:
    """A partial configuration: every field is optional and None means "not set"."""

    worktree_base_path: Optional[str] = None
    default_branch: Optional[str] = None
    terminal_app: Optional[str] = None
    open_terminal: Optional[bool] = None
    terminal_command: Optional[str] = None
    auto_install_deps: Optional[bool] = None
    package_manager: Optional[str] = None
    copy_env_files: Optional[bool] = None
    ai_branch_names: Optional[bool] = None
    ai_command: Optional[str] = None
    ai_timeout: Optional[int] = None
    github_token: Optional[str] = None
    debug: Optional[bool] = None

    def values(self) -> Dict[str, Any]:
        """Return only the fields this layer sets."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Optional[str] = None) -> "ConfigLayer":
        """Build a layer from a parsed JSON document.

        Raises:
            ConfigError: If the document is not an object or a value has the wrong type
        """
        if not isinstance(data, Mapping):
            raise ConfigError(f"expected a JSON object, got {type(data).__name__}", source)

        values: Dict[str, Any] = {}
        for raw_key, value in data.items():
            key = KEY_ALIASES.get(raw_key, raw_key)
            if key not in FIELD_TYPES:
                logger.debug(f"Ignoring unknown config key '{raw_key}' in {source or '<config>'}")
                continue
            if value is None:
                continue

            expected = FIELD_TYPES[key]
            # bool is a subclass of int, so ai_timeout: true must be rejected explicitly
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ConfigError(
                    f"'{raw_key}' must be {expected.__name__}, got {type(value).__name__}", source
                )
            values[key] = value

        return cls(**values)


def merge_layers(*layers: Optional[ConfigLayer], profile: Optional[str] = None) -> Config:
    """Merge layers over the built-in defaults; later layers win per field.

    Raises:
        ConfigError: If the merged values fail validation
    """
    merged = Config().to_dict()
    for layer in layers:
        if layer is None:
            continue
        merged.update(layer.values())
    merged["profile"] = profile

    try:
        return Config.from_dict(merged)
    except ValueError as e:
        raise ConfigError(str(e))


class ConfigResolver:
    """Loads config files and resolves the effective configuration."""

    def __init__(
        self,
        config_dir: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
    ):
        """Initialize the resolver.

        Args:
            config_dir: Directory holding config.json and profiles/
            env: Environment used to locate the config directory when config_dir is not given
            cwd: Directory a relative worktree_base_path is resolved against
        """
        self.cwd = cwd
        env = env if env is not None else {}
        directory = config_dir or env.get(CONFIG_DIR_ENV_VAR) or DEFAULT_CONFIG_DIR
        self.config_dir = Path(os.path.expanduser(directory))

    @property
    def base_config_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    def profile_path(self, profile_name: str) -> Path:
        return self.config_dir / PROFILES_DIR_NAME / f"{profile_name}.json"

    def _read_json(self, path: Path) -> Any:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"unreadable ({e.strerror or e})", str(path))

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigError(f"malformed JSON ({e.msg} at line {e.lineno})", str(path))

    def load_base_layer(self) -> ConfigLayer:
        """Load the base config file; a missing file yields an empty layer."""
        path = self.base_config_path
        if not path.exists():
            logger.debug(f"No base config at {path}, using defaults")
            return ConfigLayer()

        layer = ConfigLayer.from_dict(self._read_json(path), str(path))
        logger.debug(f"Loaded base configuration from {path}")
        return layer

    def load_profile_layer(self, profile_name: str) -> ConfigLayer:
        """Load a named profile.

        Raises:
            ValidationError: If the profile name is not a plain file name
            ProfileNotFoundError: If the profile file does not exist
            ConfigError: If the profile file is unreadable or malformed
        """
        if not PROFILE_NAME_PATTERN.match(profile_name) or profile_name in (".", ".."):
            raise ValidationError("Invalid profile name", profile_name)

        path = self.profile_path(profile_name)
        if not path.is_file():
            raise ProfileNotFoundError(profile_name, str(path.parent))

        layer = ConfigLayer.from_dict(self._read_json(path), str(path))
        logger.debug(f"Loaded profile '{profile_name}' from {path}")
        return layer

    def resolve(self, profile_name: Optional[str] = None, overrides: Optional[ConfigLayer] = None) -> Config:
        """Resolve defaults, base file, profile and CLI overrides into one Config."""
        base_layer = self.load_base_layer()
        profile_layer = self.load_profile_layer(profile_name) if profile_name else None
        config = self._anchor_base_path(merge_layers(base_layer, profile_layer, overrides, profile=profile_name))
        shown = {k: v for k, v in config.to_dict().items() if k != "github_token"}
        logger.debug(f"Resolved configuration: {shown}")
        return config

    def _anchor_base_path(self, config: Config) -> Config:
        """Make a relative worktree_base_path absolute against the invocation directory."""
        expanded = os.path.expanduser(config.worktree_base_path)
        if os.path.isabs(expanded) or self.cwd is None:
            return config
        return replace(config, worktree_base_path=os.path.join(self.cwd, expanded))
