"""Endpoint clients exposed as attributes of ``SVGMakerClient``."""

from svgmaker.endpoints.account import AccountEndpoint
from svgmaker.endpoints.convert import (
    AiVectorizeEndpoint,
    BatchConvertEndpoint,
    ConvertNamespace,
    RasterToRasterEndpoint,
    SvgToVectorEndpoint,
    TraceEndpoint,
)
from svgmaker.endpoints.edit import EditEndpoint
from svgmaker.endpoints.enhance_prompt import EnhancePromptEndpoint
from svgmaker.endpoints.gallery import GalleryEndpoint
from svgmaker.endpoints.generate import GenerateEndpoint
from svgmaker.endpoints.generations import GenerationsEndpoint
from svgmaker.endpoints.optimize_svg import OptimizeSvgEndpoint

__all__ = [
    "AccountEndpoint",
    "AiVectorizeEndpoint",
    "BatchConvertEndpoint",
    "ConvertNamespace",
    "EditEndpoint",
    "EnhancePromptEndpoint",
    "GalleryEndpoint",
    "GenerateEndpoint",
    "GenerationsEndpoint",
    "OptimizeSvgEndpoint",
    "RasterToRasterEndpoint",
    "SvgToVectorEndpoint",
    "TraceEndpoint",
]
