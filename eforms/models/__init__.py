from .config_item import Base, ConfigItem, ACTIVE_STATUS

__all__ = ["Base", "ConfigItem", "ACTIVE_STATUS"]
