"""Configuration package for the screening interview services."""
from .interview import CompanyInfo, InterviewConfig
from .routes import AppConfig, LlmRoute, load_config, load_route, resolve_route
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "CompanyInfo",
    "InterviewConfig",
    "LlmRoute",
    "load_config",
    "load_route",
    "resolve_route",
    "Settings",
    "settings",
]
