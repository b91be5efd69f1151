from .settings import JobConfig, Settings, get_settings

__all__ = [
    "JobConfig",
    "Settings",
    "get_settings",
]
