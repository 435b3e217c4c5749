"""Read access to the public gallery."""

from svgmaker.endpoints.base import (
    Endpoint,
    query_params,
    resource_path,
    to_api_result,
)
from svgmaker.responses import ApiResult
from svgmaker.schemas import DownloadParams, GalleryListParams
from svgmaker.transport import Operation


class GalleryEndpoint(Endpoint):
    """Client for ``/v1/gallery``."""

    path = "/v1/gallery"

    async def list(
        self,
        *,
        page: int | None = None,
        limit: int | None = None,
        type: str | list[str] | None = None,
        hashtags: str | list[str] | None = None,
        categories: str | list[str] | None = None,
        query: str | None = None,
        pro: str | None = None,
        gold: str | None = None,
    ) -> ApiResult:
        params = query_params(
            GalleryListParams,
            {
                "page": page,
                "limit": limit,
                "type": type,
                "hashtags": hashtags,
                "categories": categories,
                "query": query,
                "pro": pro,
                "gold": gold,
            },
        )
        result = await self._client.execute(
            Operation(method="GET", path=self.path, params=params)
        )
        return to_api_result(result)

    async def get(self, item_id: str) -> ApiResult:
        operation = Operation(method="GET", path=resource_path(self.path, item_id))
        return to_api_result(await self._client.execute(operation))

    async def download(
        self,
        item_id: str,
        *,
        format: str | None = None,
        optimize: bool | None = None,
    ) -> ApiResult:
        params = query_params(DownloadParams, {"format": format, "optimize": optimize})
        operation = Operation(
            method="GET",
            path=resource_path(self.path, item_id, "/download"),
            params=params,
        )
        return to_api_result(await self._client.execute(operation))
