from .interceptor import StreamInterceptor, parse_block
from .models import CommandDescriptor, ParseResult
from .fencing import FenceTracker, is_inside_fence
from .scanner import find_block_end
from .config import InterceptorConfig, load_config

__all__ = [
    "StreamInterceptor",
    "parse_block",
    "CommandDescriptor",
    "ParseResult",
    "FenceTracker",
    "is_inside_fence",
    "find_block_end",
    "InterceptorConfig",
    "load_config",
]
__version__ = "0.1.0"
