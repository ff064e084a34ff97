from .formatting import format_size, parse_size
from .router import router
from .service import FileMetadataService

__all__ = ["FileMetadataService", "format_size", "parse_size", "router"]
