# save_client/__init__.py

from .api import ClientError, SaveClient

__all__ = ["ClientError", "SaveClient"]
