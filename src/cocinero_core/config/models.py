"""Cocinero configuration data models."""

from dataclasses import dataclass, field

from cocinero_core.types import LogFormat, LogLevel


@dataclass
class LoggingComponentsConfig:
    """Per-component logging switches."""

    plan: bool = True
    run: bool = True
    action: bool = True
    hook: bool = True


@dataclass
class LoggingOptionsConfig:
    """Logging options configuration."""

    show_context: bool = True
    show_output: bool = True
    truncate_at: int = 200


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    components: LoggingComponentsConfig = field(default_factory=LoggingComponentsConfig)
    options: LoggingOptionsConfig = field(default_factory=LoggingOptionsConfig)


@dataclass
class ExecutionConfig:
    """How shell commands and scripts are run."""

    shell: str = "/bin/sh"
    action_timeout: float | None = None  # seconds, None = no limit
    capture_output: bool = True


@dataclass
class PackagesConfig:
    """Package installation hook configuration."""

    install_command: list[str] = field(default_factory=lambda: ["apt-get", "install", "-y"])


@dataclass
class ServicesConfig:
    """Service reload hook configuration."""

    systemctl: str = "systemctl"


@dataclass
class RecipesConfig:
    """Recipe discovery configuration."""

    filename: str = "recipe.toml"  # looked up in each cookbook directory
    disclaimer: str | None = "managed by cocinero"  # None disables the check


@dataclass
class CocineroConfig:
    """Root configuration object."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    packages: PackagesConfig = field(default_factory=PackagesConfig)
    services: ServicesConfig = field(default_factory=ServicesConfig)
    recipes: RecipesConfig = field(default_factory=RecipesConfig)
