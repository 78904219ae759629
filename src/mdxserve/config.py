"""Configuration management for mdxserve.

Supports TOML configuration format with auto-discovery, plus the PORT
environment variable.
"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "mdxserve.toml"
PORT_ENV_VAR = "PORT"
DEFAULT_PORT = 3000


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT


@dataclass
class DocsConfig:
    """Documentation root configuration."""

    root_dir: Path = field(default_factory=lambda: Path("."))
    fallback: str = "index.html"
    extension: str = ".mdx"
    index_name: str = "index.mdx"


@dataclass
class CliSettings:
    """Command-line overrides. None means "not given"."""

    host: str | None = None
    port: int | None = None
    root_dir: Path | None = None


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    docs: DocsConfig
    config_path: Path | None = None

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        cli_settings: CliSettings | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "Config":
        """Load configuration.

        If config_path is provided, loads from that file. Otherwise, searches
        for mdxserve.toml in current directory and parents. The PORT
        environment variable then overrides the file, and CLI settings
        override both.

        Args:
            config_path: Optional explicit path to config file
            cli_settings: Optional command-line overrides
            environ: Environment mapping (default: os.environ)

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration or PORT is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            config = cls._load_from_file(config_path)
        else:
            discovered_path = cls._discover_config()
            if discovered_path is None:
                config = cls._default()
            else:
                config = cls._load_from_file(discovered_path)

        env_port = parse_port_env(os.environ if environ is None else environ)
        if env_port is not None:
            config = config.with_overrides(port=env_port)

        if cli_settings is not None:
            config = config.with_overrides(
                host=cli_settings.host,
                port=cli_settings.port,
                root_dir=cli_settings.root_dir,
            )

        return config

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(server=ServerConfig(), docs=DocsConfig())

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            docs=cls._parse_docs(data.get("docs"), config_dir),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "0.0.0.0")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", DEFAULT_PORT)
        # bool is an int subclass
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")
        _check_port_range(port, "server.port")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_docs(cls, data: object, config_dir: Path) -> DocsConfig:
        """Parse docs configuration section.

        Args:
            data: Raw docs section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            DocsConfig instance
        """
        if data is None:
            return DocsConfig(root_dir=config_dir)

        if not isinstance(data, dict):
            raise ValueError("docs section must be a dictionary")

        root_dir = data.get("root_dir", ".")
        if not isinstance(root_dir, str):
            raise ValueError("docs.root_dir must be a string")

        values: dict[str, str] = {}
        for name, default in (
            ("fallback", "index.html"),
            ("extension", ".mdx"),
            ("index_name", "index.mdx"),
        ):
            value = data.get(name, default)
            if not isinstance(value, str) or not value:
                raise ValueError(f"docs.{name} must be a non-empty string")
            values[name] = value

        if not values["extension"].startswith("."):
            raise ValueError("docs.extension must start with '.'")

        return DocsConfig(root_dir=config_dir / root_dir, **values)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        root_dir: Path | None = None,
    ) -> "Config":
        """Create a new Config with overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            root_dir: Override docs.root_dir

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        docs = self.docs
        if root_dir is not None:
            docs = replace(self.docs, root_dir=root_dir)

        return replace(self, server=server, docs=docs)


def parse_port_env(environ: Mapping[str, str]) -> int | None:
    """Read the listening port from the PORT environment variable.

    Args:
        environ: Environment mapping

    Returns:
        Port number, or None when PORT is unset or empty

    Raises:
        ValueError: If PORT is not a valid port number
    """
    raw = environ.get(PORT_ENV_VAR, "").strip()
    if not raw:
        return None

    try:
        port = int(raw)
    except ValueError:
        raise ValueError(f"{PORT_ENV_VAR} must be an integer, got {raw!r}") from None

    _check_port_range(port, PORT_ENV_VAR)
    return port


def _check_port_range(port: int, name: str) -> None:
    if not 0 <= port <= 65535:
        raise ValueError(f"{name} must be between 0 and 65535, got {port}")
