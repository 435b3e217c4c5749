"""Prompt enhancement."""

from svgmaker.endpoints.base import ConfigurableEndpoint, to_api_result
from svgmaker.responses import ApiResult
from svgmaker.schemas import EnhancePromptParams
from svgmaker.transport import Operation


class EnhancePromptEndpoint(ConfigurableEndpoint[EnhancePromptParams]):
    """Client for ``POST /v1/enhance-prompt``."""

    path = "/v1/enhance-prompt"
    schema = EnhancePromptParams

    async def execute(self) -> ApiResult:
        params: EnhancePromptParams = self._validated()
        operation = Operation(
            method="POST",
            path=self.path,
            json=params.model_dump(by_alias=True, exclude_none=True),
        )
        return to_api_result(await self._client.execute(operation))
