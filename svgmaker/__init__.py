"""Async Python client for the SVGMaker API.

Exports:
    SVGMakerClient and its configuration
    The error type and its kinds
    Result and stream event types
"""

from svgmaker.client import ResponseHook, SVGMakerClient
from svgmaker.config import ClientConfig
from svgmaker.errors import ErrorKind, SVGMakerError
from svgmaker.responses import ApiResult, ResponseMetadata, SVGResult
from svgmaker.schemas import StyleParams
from svgmaker.streaming import StreamEvent
from svgmaker.transport import Operation
from svgmaker.version import __version__

__all__ = [
    # Client
    "SVGMakerClient",
    "ClientConfig",
    "ResponseHook",
    "Operation",
    # Errors
    "SVGMakerError",
    "ErrorKind",
    # Results
    "ApiResult",
    "ResponseMetadata",
    "SVGResult",
    "StreamEvent",
    "StyleParams",
    "__version__",
]
