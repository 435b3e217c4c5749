"""Format conversion endpoints, grouped under ``client.convert``."""

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from svgmaker.endpoints.base import (
    ConfigurableEndpoint,
    file_parts,
    form_fields,
    to_api_result,
    to_svg_result,
)
from svgmaker.responses import ApiResult, SVGResult
from svgmaker.schemas import (
    AiVectorizeParams,
    BatchConvertParams,
    RasterToRasterParams,
    SvgToVectorParams,
    TraceParams,
)
from svgmaker.streaming import StreamEvent
from svgmaker.transport import Operation

if TYPE_CHECKING:
    from svgmaker.client import SVGMakerClient

__all__ = [
    "AiVectorizeEndpoint",
    "BatchConvertEndpoint",
    "ConvertNamespace",
    "RasterToRasterEndpoint",
    "SvgToVectorEndpoint",
    "TraceEndpoint",
]


class AiVectorizeEndpoint(ConfigurableEndpoint[AiVectorizeParams]):
    """AI-assisted raster to SVG conversion (``/v1/convert/ai-vectorize``)."""

    path = "/v1/convert/ai-vectorize"
    schema = AiVectorizeParams

    async def _operation(self, params: AiVectorizeParams) -> Operation:
        return Operation(
            method="POST",
            path=self.path,
            data=form_fields(params, "file"),
            files=await file_parts("file", params.file),
        )

    async def execute(self) -> SVGResult:
        params: AiVectorizeParams = self._validated(stream=None)
        return to_svg_result(await self._client.execute(await self._operation(params)))

    async def stream(self) -> AsyncIterator[StreamEvent]:
        params: AiVectorizeParams = self._validated(stream=True)
        async for event in self._client.stream_events(await self._operation(params)):
            yield event


class _FileConvertEndpoint(ConfigurableEndpoint):
    """Single-file conversion answered with a list of results."""

    path: str

    async def execute(self) -> ApiResult:
        params = self._validated()
        operation = Operation(
            method="POST",
            path=self.path,
            data=form_fields(params, "file"),
            files=await file_parts("file", params.file),
        )
        return to_api_result(await self._client.execute(operation))


class TraceEndpoint(_FileConvertEndpoint):
    """Algorithmic raster to SVG tracing (``/v1/convert/trace``)."""

    path = "/v1/convert/trace"
    schema = TraceParams


class SvgToVectorEndpoint(_FileConvertEndpoint):
    """SVG to PDF/EPS/DXF/AI/PS (``/v1/convert/svg-to-vector``)."""

    path = "/v1/convert/svg-to-vector"
    schema = SvgToVectorParams


class RasterToRasterEndpoint(_FileConvertEndpoint):
    """Raster format conversion and resizing (``/v1/convert/raster-to-raster``)."""

    path = "/v1/convert/raster-to-raster"
    schema = RasterToRasterParams


class BatchConvertEndpoint(ConfigurableEndpoint[BatchConvertParams]):
    """Convert up to 10 files in one call (``/v1/convert/batch``).

    Every file is uploaded under the repeated ``file`` field.
    """

    path = "/v1/convert/batch"
    schema = BatchConvertParams

    async def execute(self) -> ApiResult:
        params: BatchConvertParams = self._validated()
        operation = Operation(
            method="POST",
            path=self.path,
            data=form_fields(params, "files"),
            files=await file_parts("file", list(params.files)),
        )
        return to_api_result(await self._client.execute(operation))


class ConvertNamespace:
    """Accessors for the conversion endpoints.

    Each attribute returns a fresh, unconfigured endpoint client.
    """

    def __init__(self, client: "SVGMakerClient"):
        self._client = client

    @property
    def ai_vectorize(self) -> AiVectorizeEndpoint:
        return AiVectorizeEndpoint(self._client)

    @property
    def trace(self) -> TraceEndpoint:
        return TraceEndpoint(self._client)

    @property
    def svg_to_vector(self) -> SvgToVectorEndpoint:
        return SvgToVectorEndpoint(self._client)

    @property
    def raster_to_raster(self) -> RasterToRasterEndpoint:
        return RasterToRasterEndpoint(self._client)

    @property
    def batch(self) -> BatchConvertEndpoint:
        return BatchConvertEndpoint(self._client)
