"""Image and SVG editing with an optional mask."""

from collections.abc import AsyncIterator, Mapping
from typing import Any

from svgmaker.endpoints.base import (
    ConfigurableEndpoint,
    file_parts,
    form_fields,
    to_svg_result,
)
from svgmaker.responses import SVGResult
from svgmaker.schemas import EditParams, merge_params
from svgmaker.streaming import StreamEvent
from svgmaker.transport import Operation

DEFAULT_QUALITY = "medium"


class EditEndpoint(ConfigurableEndpoint[EditParams]):
    """Client for ``POST /v1/edit`` (multipart upload)."""

    path = "/v1/edit"
    schema = EditParams

    def _apply_defaults(self, params: Mapping[str, Any]) -> Mapping[str, Any]:
        if "model" in params or "quality" in params:
            return params
        return merge_params(params, {"quality": DEFAULT_QUALITY})

    async def _operation(self, params: EditParams) -> Operation:
        files = await file_parts("image", params.image, "image")
        if params.mask is not None:
            files += await file_parts("mask", params.mask, "mask")
        return Operation(
            method="POST",
            path=self.path,
            data=form_fields(params, "image", "mask"),
            files=files,
        )

    async def execute(self) -> SVGResult:
        params: EditParams = self._validated(stream=None)
        result = await self._client.execute(await self._operation(params))
        return to_svg_result(result, default_quality=params.quality)

    async def stream(self) -> AsyncIterator[StreamEvent]:
        """Edit and yield progress events, ending with the terminal event."""
        params: EditParams = self._validated(stream=True)
        async for event in self._client.stream_events(await self._operation(params)):
            yield event
