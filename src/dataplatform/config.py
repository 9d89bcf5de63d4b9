"""Application configuration.

AppConfig is a tree of frozen dataclasses, immutable after creation,
IDE-autocompletable. It is built once at process start from the
environment (optionally seeded by a ``.env`` file) and passed to the
components that need it. ``AppConfig.get("database.port")`` keeps
dotted-key lookup available as a convenience over the same values.
"""

import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from dataplatform.errors import ConfigurationError

_TRUTHY = frozenset({"1", "true", "on", "yes"})


@dataclass(frozen=True, slots=True)
class AppSettings:
    """Identity and behaviour of the application itself."""

    name: str = "Data Platform"
    env: str = "production"
    debug: bool = False
    # Put handler exception messages in 500 response bodies
    expose_errors: bool = True


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Connection settings for the (not yet implemented) database."""

    host: str = "localhost"
    port: int = 3306
    name: str = "data_platform"
    username: str | None = None
    password: str | None = field(default=None, repr=False)


@dataclass(frozen=True, slots=True)
class AwsConfig:
    region: str = "us-east-1"
    secrets_manager_secret: str | None = None


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """HTTP front end settings."""

    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 1
    log_level: str = "info"
    max_content_length: int = 16 * 1024 * 1024  # 16 MB


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All sections have sensible defaults. Override what you need::

        config = AppConfig(app=AppSettings(debug=True), server=ServerConfig(port=3000))

    Or read everything from the environment::

        config = AppConfig.from_env()
        config.get("aws.region")  # "us-east-1"
    """

    app: AppSettings = field(default_factory=AppSettings)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    aws: AwsConfig = field(default_factory=AwsConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        env_file: str | Path | None = None,
    ) -> "AppConfig":
        """Build a config from environment variables.

        Args:
            environ: Variables to read. Defaults to ``os.environ``.
            env_file: Optional ``.env`` file. Its values are used only
                for variables that *environ* does not set.

        Raises:
            ConfigurationError: If a numeric variable is not an integer.
        """
        values: dict[str, str | None] = {}
        if env_file is not None and Path(env_file).is_file():
            values.update(dotenv_values(env_file))
        values.update(os.environ if environ is None else environ)
        env = _EnvReader(values)

        return cls(
            app=AppSettings(
                name=env.text("APP_NAME", "Data Platform"),
                env=env.text("APP_ENV", "production"),
                debug=env.flag("APP_DEBUG", False),
                expose_errors=env.flag("APP_EXPOSE_ERRORS", True),
            ),
            database=DatabaseConfig(
                host=env.text("DB_HOST", "localhost"),
                port=env.integer("DB_PORT", 3306),
                name=env.text("DB_NAME", "data_platform"),
                username=env.optional("DB_USERNAME"),
                password=env.optional("DB_PASSWORD"),
            ),
            aws=AwsConfig(
                region=env.text("AWS_REGION", "us-east-1"),
                secrets_manager_secret=env.optional("SECRETS_MANAGER_SECRET_NAME"),
            ),
            server=ServerConfig(
                host=env.text("SERVER_HOST", "127.0.0.1"),
                port=env.integer("SERVER_PORT", 8000),
                workers=env.integer("SERVER_WORKERS", 1),
                log_level=env.text("LOG_LEVEL", "info").lower(),
                max_content_length=env.integer("MAX_CONTENT_LENGTH", 16 * 1024 * 1024),
            ),
        )

    def as_dict(self) -> dict[str, Any]:
        """Return the whole tree as nested plain dicts."""
        return asdict(self)

    def get(self, key: str | None = None) -> Any:
        """Look up a value by dotted key.

        ``get()`` returns the whole tree as a dict, ``get("database")`` a
        section dict and ``get("database.port")`` a single value. Unknown
        keys return ``None``.
        """
        value: Any = self.as_dict()
        if key is None:
            return value
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return None
            value = value[part]
        return value


class _EnvReader:
    """Typed accessors over a flat mapping of environment values.

    Empty strings count as unset, so ``DB_HOST=`` falls back to the default.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, str | None]) -> None:
        self._values = values

    def optional(self, name: str) -> str | None:
        value = self._values.get(name)
        return value if value else None

    def text(self, name: str, default: str) -> str:
        return self.optional(name) or default

    def flag(self, name: str, default: bool) -> bool:
        value = self.optional(name)
        if value is None:
            return default
        return value.strip().lower() in _TRUTHY

    def integer(self, name: str, default: int) -> int:
        value = self.optional(name)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            msg = f"Environment variable {name} must be an integer, got {value!r}"
            raise ConfigurationError(msg) from None
