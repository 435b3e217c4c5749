"""Management of the caller's stored generations."""

from svgmaker.endpoints.base import (
    Endpoint,
    query_params,
    resource_path,
    to_api_result,
)
from svgmaker.responses import ApiResult
from svgmaker.schemas import DownloadParams, GenerationsListParams
from svgmaker.transport import Operation


class GenerationsEndpoint(Endpoint):
    """Client for ``/v1/generations``."""

    path = "/v1/generations"

    async def list(
        self,
        *,
        page: int | None = None,
        limit: int | None = None,
        type: str | list[str] | None = None,
        hashtags: str | list[str] | None = None,
        categories: str | list[str] | None = None,
        query: str | None = None,
    ) -> ApiResult:
        """List generations, newest first.

        List-valued filters are sent as repeated query parameters.
        """
        params = query_params(
            GenerationsListParams,
            {
                "page": page,
                "limit": limit,
                "type": type,
                "hashtags": hashtags,
                "categories": categories,
                "query": query,
            },
        )
        result = await self._client.execute(
            Operation(method="GET", path=self.path, params=params)
        )
        return to_api_result(result)

    async def get(self, generation_id: str) -> ApiResult:
        operation = Operation(
            method="GET", path=resource_path(self.path, generation_id)
        )
        return to_api_result(await self._client.execute(operation))

    async def delete(self, generation_id: str) -> ApiResult:
        operation = Operation(
            method="DELETE", path=resource_path(self.path, generation_id)
        )
        return to_api_result(await self._client.execute(operation))

    async def share(self, generation_id: str) -> ApiResult:
        """Make a generation public and return its share URL."""
        operation = Operation(
            method="POST", path=resource_path(self.path, generation_id, "/share")
        )
        return to_api_result(await self._client.execute(operation))

    async def download(
        self,
        generation_id: str,
        *,
        format: str | None = None,
        optimize: bool | None = None,
    ) -> ApiResult:
        """Request a download URL for a generation.

        Args:
            generation_id: Generation identifier.
            format: One of svg, webp, png, svg-optimized, svgz.
            optimize: Optimize the SVG before delivery.
        """
        params = query_params(DownloadParams, {"format": format, "optimize": optimize})
        operation = Operation(
            method="GET",
            path=resource_path(self.path, generation_id, "/download"),
            params=params,
        )
        return to_api_result(await self._client.execute(operation))
