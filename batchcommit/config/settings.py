"""Configuration settings for BatchCommit."""

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..errors import SetupError

# Load environment variables at module level
env_path = Path.cwd() / ".env"
load_dotenv(dotenv_path=env_path)

CONFIG_FILE_NAME = ".batchcommit.json"
CONFIG_VERSION = "1.0.0"

MISC_CATEGORY = "misc"
DEFAULT_BATCH_SIZE = 10
DEFAULT_MAX_PUSH_SIZE = 1024 * 1024 * 1024  # 1 GiB
DEFAULT_PUSH_COOLDOWN = 1.0
DEFAULT_STAGE_CHUNK_SIZE = 50
DEFAULT_REMOTE = "origin"
LARGE_FILE_THRESHOLD = 10 * 1024 * 1024


class ConfigError(SetupError):
    """Configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class CategoryConfig:
    """A semantic file-type bucket."""

    category_id: str
    display_name: str
    extensions: frozenset[str]
    glob_patterns: tuple[str, ...]
    batch_size: int = DEFAULT_BATCH_SIZE
    icon: str = "📁"
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CategoryConfig":
        """Build a category from its JSON representation."""
        try:
            category_id = str(data["id"])
            display_name = str(data.get("name") or category_id)
        except KeyError as e:
            raise ConfigError(f"Category is missing required key {e}")

        batch_size = data.get("batch_size", DEFAULT_BATCH_SIZE)
        if not isinstance(batch_size, int) or isinstance(batch_size, bool) or batch_size < 1:
            raise ConfigError(
                f"Batch size for category '{category_id}' must be a positive integer"
            )

        return cls(
            category_id=category_id,
            display_name=display_name,
            extensions=frozenset(ext.lower() for ext in data.get("extensions", [])),
            glob_patterns=tuple(data.get("patterns", [])),
            batch_size=batch_size,
            icon=data.get("icon", "📁"),
            description=data.get("description", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.category_id,
            "name": self.display_name,
            "description": self.description,
            "extensions": sorted(self.extensions),
            "patterns": list(self.glob_patterns),
            "batch_size": self.batch_size,
            "icon": self.icon,
        }


def _category(
    category_id: str,
    name: str,
    description: str,
    extensions: list[str],
    patterns: list[str],
    batch_size: int,
    icon: str,
) -> CategoryConfig:
    return CategoryConfig(
        category_id=category_id,
        display_name=name,
        description=description,
        extensions=frozenset(extensions),
        glob_patterns=tuple(patterns),
        batch_size=batch_size,
        icon=icon,
    )


# Declaration order is the classification order. misc must stay last.
DEFAULT_CATEGORIES: tuple[CategoryConfig, ...] = (
    _category(
        "binary",
        "Binary Files",
        "Executable files, compiled binaries, and machine code",
        [".exe", ".dll", ".so", ".dylib", ".bin", ".app"],
        ["*.exe", "*.dll", "*.so", "*.dylib", "*.bin", "*.app"],
        5,
        "⚙️",
    ),
    _category(
        "media",
        "Media Files",
        "Images, videos, audio, and multimedia content",
        [".jpg", ".png", ".gif", ".mp4", ".mp3", ".avi", ".mov", ".wav"],
        ["*.jpg", "*.png", "*.gif", "*.mp4", "*.mp3", "*.avi", "*.mov", "*.wav"],
        3,
        "🎨",
    ),
    _category(
        "assets",
        "Asset Files",
        "Static assets, fonts, icons, and resources",
        [".ttf", ".woff", ".svg", ".ico", ".eot", ".otf"],
        ["*.ttf", "*.woff*", "*.svg", "*.ico", "*.eot", "*.otf"],
        10,
        "📦",
    ),
    _category(
        "archives",
        "Archive Files",
        "Compressed files and archives",
        [".zip", ".rar", ".tar", ".gz", ".7z", ".bz2"],
        ["*.zip", "*.rar", "*.tar*", "*.gz", "*.7z", "*.bz2"],
        2,
        "📚",
    ),
    _category(
        "source",
        "Source Code",
        "Programming language source files",
        [".js", ".ts", ".py", ".java", ".cpp", ".c", ".cs", ".php"],
        ["*.js", "*.ts", "*.py", "*.java", "*.cpp", "*.c", "*.cs", "*.php"],
        15,
        "💻",
    ),
    _category(
        "web",
        "Web Files",
        "HTML, CSS, and web-related files",
        [".html", ".css", ".scss", ".sass", ".less", ".jsx", ".vue"],
        ["*.html", "*.css", "*.scss", "*.sass", "*.less", "*.jsx", "*.vue"],
        12,
        "🌐",
    ),
    _category(
        "mobile",
        "Mobile Files",
        "Mobile development files",
        [".swift", ".kt", ".dart", ".xaml"],
        ["*.swift", "*.kt", "*.dart", "*.xaml"],
        10,
        "📱",
    ),
    _category(
        "database",
        "Database Files",
        "Database files and SQL scripts",
        [".sql", ".db", ".sqlite", ".mdb"],
        ["*.sql", "*.db", "*.sqlite*", "*.mdb"],
        5,
        "🗄️",
    ),
    _category(
        "config",
        "Configuration",
        "Configuration files and settings",
        [".json", ".xml", ".yaml", ".yml", ".ini", ".conf", ".cfg"],
        ["*.json", "*.xml", "*.yaml", "*.yml", "*.ini", "*.conf", "*.cfg"],
        8,
        "⚙️",
    ),
    _category(
        "docs",
        "Documentation",
        "Documentation and text files",
        [".md", ".txt", ".doc", ".docx", ".pdf", ".rtf"],
        ["*.md", "*.txt", "*.doc*", "*.pdf", "*.rtf"],
        10,
        "📝",
    ),
    _category(
        "data",
        "Data Files",
        "Data files and datasets",
        [".csv", ".tsv", ".xls", ".xlsx", ".parquet"],
        ["*.csv", "*.tsv", "*.xls*", "*.parquet"],
        5,
        "📊",
    ),
    _category(
        "system",
        "System Files",
        "System and hidden files",
        [".log", ".tmp", ".cache", ".lock"],
        ["*.log", "*.tmp", "*.cache", "*.lock", ".*"],
        20,
        "🔧",
    ),
    _category(
        MISC_CATEGORY,
        "Miscellaneous",
        "Other files that don't fit in specific categories",
        [],
        ["*"],
        10,
        "📄",
    ),
)

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "node_modules/**",
    ".git/**",
    "dist/**",
    "build/**",
    ".cache/**",
    ".tmp/**",
    "*.log",
)


@dataclass(frozen=True)
class Settings:
    """Main configuration settings."""

    categories: tuple[CategoryConfig, ...] = DEFAULT_CATEGORIES
    exclude_patterns: tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    max_push_size: int = DEFAULT_MAX_PUSH_SIZE
    push_cooldown: float = DEFAULT_PUSH_COOLDOWN
    stage_chunk_size: int = DEFAULT_STAGE_CHUNK_SIZE
    remote: str = DEFAULT_REMOTE
    version: str = CONFIG_VERSION
    _by_id: dict[str, CategoryConfig] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        if self.max_push_size <= 0:
            raise ConfigError("max_push_size must be a positive number of bytes")
        if self.push_cooldown < 0:
            raise ConfigError("push_cooldown must be non-negative")
        if self.stage_chunk_size < 1:
            raise ConfigError("stage_chunk_size must be a positive integer")

        ids = [c.category_id for c in self.categories]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ConfigError(f"Duplicate category ids: {', '.join(duplicates)}")

        self._by_id.update({c.category_id: c for c in self.categories})

    def category(self, category_id: str) -> CategoryConfig | None:
        """Look up a category by id."""
        return self._by_id.get(category_id)

    @property
    def category_ids(self) -> list[str]:
        return [c.category_id for c in self.categories]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """Create settings from the JSON file contents."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a JSON object")

        raw_categories = data.get("categories")
        if raw_categories is None:
            categories = DEFAULT_CATEGORIES
        elif isinstance(raw_categories, list):
            categories = tuple(CategoryConfig.from_dict(c) for c in raw_categories)
        else:
            raise ConfigError("categories must be a list")

        exclude_patterns = data.get("exclude_patterns", list(DEFAULT_EXCLUDE_PATTERNS))
        if not isinstance(exclude_patterns, list):
            raise ConfigError("exclude_patterns must be a list")

        try:
            return cls(
                categories=categories,
                exclude_patterns=tuple(exclude_patterns),
                max_push_size=int(data.get("max_push_size", DEFAULT_MAX_PUSH_SIZE)),
                push_cooldown=float(data.get("push_cooldown", DEFAULT_PUSH_COOLDOWN)),
                stage_chunk_size=int(data.get("stage_chunk_size", DEFAULT_STAGE_CHUNK_SIZE)),
                remote=str(data.get("remote", DEFAULT_REMOTE)),
                version=str(data.get("version", CONFIG_VERSION)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "max_push_size": self.max_push_size,
            "push_cooldown": self.push_cooldown,
            "stage_chunk_size": self.stage_chunk_size,
            "remote": self.remote,
            "exclude_patterns": list(self.exclude_patterns),
            "categories": [c.to_dict() for c in self.categories],
        }

    def with_env_overrides(self) -> "Settings":
        """Apply BATCHCOMMIT_* environment overrides."""
        overrides: dict[str, Any] = {}
        try:
            if max_push_size := os.getenv("BATCHCOMMIT_MAX_PUSH_SIZE"):
                overrides["max_push_size"] = int(max_push_size)
            if push_cooldown := os.getenv("BATCHCOMMIT_PUSH_COOLDOWN"):
                overrides["push_cooldown"] = float(push_cooldown)
        except ValueError as e:
            raise ConfigError(f"Invalid environment override: {e}")
        if remote := os.getenv("BATCHCOMMIT_REMOTE"):
            overrides["remote"] = remote
        return replace(self, **overrides) if overrides else self


def get_config_path(root: str | Path | None = None) -> Path:
    """Path of the configuration file for a repository root."""
    return Path(root or Path.cwd()) / CONFIG_FILE_NAME


def config_exists(root: str | Path | None = None) -> bool:
    return get_config_path(root).is_file()


def load_settings(root: str | Path | None = None, apply_env: bool = True) -> Settings:
    """
    Load settings from the repository configuration file.

    Raises:
        ConfigError: if the file is missing, unreadable or invalid
    """
    path = get_config_path(root)
    if not path.is_file():
        raise ConfigError(
            f"Configuration not found at {path}. Run 'batchcommit init' first."
        )

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to load configuration: {e}")

    settings = Settings.from_dict(data)
    return settings.with_env_overrides() if apply_env else settings


def save_settings(settings: Settings, root: str | Path | None = None) -> Path:
    """Write settings to the repository configuration file."""
    path = get_config_path(root)
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        raise ConfigError(f"Failed to save configuration: {e}")
    return path


def _find_item(items: list[Any], key: str) -> Any:
    for item in items:
        if isinstance(item, dict) and item.get("id") == key:
            return item
    if key.isdigit() and int(key) < len(items):
        return items[int(key)]
    return None


def get_value(data: dict[str, Any], key: str) -> Any:
    """
    Resolve a dotted key against a settings dictionary.

    List elements are addressed by their "id" (e.g. categories.source.batch_size)
    or by index. Returns None when the key does not exist.
    """
    current: Any = data
    for part in key.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list):
            current = _find_item(current, part)
        else:
            return None
        if current is None:
            return None
    return current


def set_value(data: dict[str, Any], key: str, value: Any) -> None:
    """
    Set an existing dotted key in a settings dictionary.

    Raises:
        ConfigError: if the key or one of its parents does not exist, or a
            parent is not an object
    """
    *parents, last = key.split(".")
    target: Any = data
    for part in parents:
        if isinstance(target, list):
            target = _find_item(target, part)
        elif isinstance(target, dict):
            target = target.get(part)
        else:
            raise ConfigError(f"Configuration key '{key}' does not name an object")
        if target is None:
            raise ConfigError(f"Configuration key '{key}' not found")
    if isinstance(target, list):
        raise ConfigError(f"Cannot replace list element in '{key}'")
    if not isinstance(target, dict):
        raise ConfigError(f"Configuration key '{key}' does not name an object")
    if last not in target:
        raise ConfigError(f"Configuration key '{key}' not found")
    target[last] = value


def parse_value(raw: str) -> Any:
    """Parse a CLI value as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw
