"""Text-to-SVG generation."""

from collections.abc import AsyncIterator

import structlog

from svgmaker.endpoints.base import ConfigurableEndpoint, to_svg_result
from svgmaker.responses import SVGResult
from svgmaker.schemas import GenerateParams
from svgmaker.streaming import StreamEvent
from svgmaker.transport import Operation

logger = structlog.get_logger()

DEFAULT_QUALITY = "medium"


class GenerateEndpoint(ConfigurableEndpoint[GenerateParams]):
    """Client for ``POST /v1/generate``.

    Example:
        result = await client.generate.configure(
            prompt="A minimalist mountain landscape",
            quality="high",
            style_params={"style": "flat"},
        ).execute()
    """

    path = "/v1/generate"
    schema = GenerateParams

    def _operation(self, params: GenerateParams) -> Operation:
        return Operation(
            method="POST",
            path=self.path,
            json=params.model_dump(by_alias=True, exclude_none=True, mode="json"),
        )

    async def execute(self) -> SVGResult:
        """Generate an SVG and wait for the final result.

        Raises:
            SVGMakerError: VALIDATION for invalid parameters, or the
                pipeline error.
        """
        params: GenerateParams = self._validated(stream=None)
        logger.debug(
            "svgmaker_generate_start", quality=params.quality, model=params.model
        )
        result = await self._client.execute(self._operation(params))
        default_quality = None if params.model else params.quality or DEFAULT_QUALITY
        svg = to_svg_result(result, default_quality=default_quality)
        logger.debug(
            "svgmaker_generate_complete",
            credit_cost=svg.credit_cost,
            has_svg_text=svg.svg_text is not None,
            has_png=svg.png_image_data is not None,
        )
        return svg

    async def stream(self) -> AsyncIterator[StreamEvent]:
        """Generate an SVG and yield progress events as they arrive.

        The last event has status ``complete`` or ``error``. Error events
        are yielded, not raised; call ``event.raise_for_error()`` to raise.
        """
        params: GenerateParams = self._validated(stream=True)
        async for event in self._client.stream_events(self._operation(params)):
            yield event
