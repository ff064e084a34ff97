from .client import UploadProxy
from .router import router

__all__ = ["UploadProxy", "router"]
