"""Configuration helpers."""

from .settings import DataRoomApiSettings, DataRoomSettings, get_api_settings, get_settings

__all__ = ["DataRoomApiSettings", "DataRoomSettings", "get_api_settings", "get_settings"]
