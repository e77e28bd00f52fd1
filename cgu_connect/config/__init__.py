from cgu_connect.config.settings import settings, Settings

__all__ = ["settings", "Settings"]
