"""SVG optimization."""

from svgmaker.endpoints.base import (
    ConfigurableEndpoint,
    file_parts,
    form_fields,
    to_api_result,
)
from svgmaker.responses import ApiResult
from svgmaker.schemas import OptimizeSvgParams
from svgmaker.transport import Operation


class OptimizeSvgEndpoint(ConfigurableEndpoint[OptimizeSvgParams]):
    """Client for ``POST /v1/svg/optimize``.

    Set ``compress=True`` to also receive a gzip-compressed (svgz) variant.
    """

    path = "/v1/svg/optimize"
    schema = OptimizeSvgParams

    async def execute(self) -> ApiResult:
        params: OptimizeSvgParams = self._validated()
        operation = Operation(
            method="POST",
            path=self.path,
            data=form_fields(params, "file"),
            files=await file_parts("file", params.file, "image.svg"),
        )
        return to_api_result(await self._client.execute(operation))
