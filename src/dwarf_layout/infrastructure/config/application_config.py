"""Configuration management for the layout inspector."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ...core.exceptions import NoHomeDirectoryError

# Location of the motivating binary below $HOME
DEFAULT_SHARED_OBJECT = Path(
    ".steam", "steam", "steamapps", "common", "Stardew Valley", "libcoreclr.so"
)


def default_shared_object_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Build the default binary path under the user's home directory.

    Args:
        environ: Environment to read HOME from (defaults to os.environ)

    Returns:
        Absolute path of the default shared object

    Raises:
        NoHomeDirectoryError: If HOME is not set
    """
    if environ is None:
        environ = os.environ

    home_dir = environ.get("HOME")
    if not home_dir:
        raise NoHomeDirectoryError()
    return Path(home_dir) / DEFAULT_SHARED_OBJECT


@dataclass
class Config:
    """Configuration for one inspection run."""

    shared_object_path: Optional[Path] = None
    verbose: bool = False
    log_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from environment variables or .env file.

        Args:
            env_path: Optional path to .env file (defaults to .env in current directory)

        Returns:
            Config object; shared_object_path stays None when not configured
        """
        if env_path is None:
            env_path = Path.cwd() / ".env"

        if env_path.exists():
            load_dotenv(env_path)

        shared_object_str = os.getenv("SHARED_OBJECT_PATH")
        log_dir_str = os.getenv("LOG_DIR")
        verbose_str = os.getenv("VERBOSE", "false").lower()

        return cls(
            shared_object_path=Path(shared_object_str) if shared_object_str else None,
            verbose=verbose_str in ("true", "1", "yes"),
            log_dir=Path(log_dir_str) if log_dir_str else None,
        )

    @classmethod
    def from_args(
        cls,
        shared_object_path: Optional[Path] = None,
        verbose: Optional[bool] = None,
        log_dir: Optional[Path] = None,
    ) -> "Config":
        """
        Create configuration from explicit arguments, falling back to environment.

        The default path under $HOME is computed only when neither the
        arguments nor the environment name a shared object.

        Args:
            shared_object_path: Binary to inspect (overrides env)
            verbose: Enable verbose output (overrides env)
            log_dir: Directory for a debug log file (overrides env)

        Returns:
            Config object with shared_object_path set

        Raises:
            NoHomeDirectoryError: If no path is configured and HOME is not set
        """
        config = cls.from_env()

        if shared_object_path is not None:
            config.shared_object_path = shared_object_path
        if verbose:
            config.verbose = verbose
        if log_dir is not None:
            config.log_dir = log_dir

        if config.shared_object_path is None:
            config.shared_object_path = default_shared_object_path()

        return config

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ValueError: If the shared object path is missing or not a file
        """
        if self.shared_object_path is None:
            raise ValueError("No shared object path configured")

        if not self.shared_object_path.exists():
            raise ValueError(f"Shared object not found: {self.shared_object_path}")

        if not self.shared_object_path.is_file():
            raise ValueError(f"Not a file: {self.shared_object_path}")
