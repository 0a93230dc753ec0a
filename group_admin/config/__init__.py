from group_admin.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
