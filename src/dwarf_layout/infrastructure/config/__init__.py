"""Infrastructure configuration module."""

from .application_config import Config, default_shared_object_path

__all__ = ["Config", "default_shared_object_path"]
