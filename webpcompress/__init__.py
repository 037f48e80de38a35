from .compress import build_arguments, build_output_path, compress
from .errors import ExecutionError, InitializationError, UnsupportedPlatformError, WebpError
from .models import PRESETS, CompressOptions, CompressResult, CropOptions, LosslessOptions, ResizeOptions
from .tools import ensure_ready, get_command

__all__ = [
    "PRESETS",
    "CompressOptions",
    "CompressResult",
    "CropOptions",
    "ExecutionError",
    "InitializationError",
    "LosslessOptions",
    "ResizeOptions",
    "UnsupportedPlatformError",
    "WebpError",
    "build_arguments",
    "build_output_path",
    "compress",
    "ensure_ready",
    "get_command",
]
