"""Configuration module."""
from .settings import APIConfig, Config, SyncConfig, load_config

__all__ = ["APIConfig", "Config", "SyncConfig", "load_config"]
