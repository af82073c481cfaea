"""Configuration module for the Auth0 admin CLI."""
from .settings import AppConfig, load_settings

__all__ = ["AppConfig", "load_settings"]
