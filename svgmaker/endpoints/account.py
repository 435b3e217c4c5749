"""Account information and credit usage."""

from svgmaker.endpoints.base import Endpoint, query_params, to_api_result
from svgmaker.responses import ApiResult
from svgmaker.schemas import AccountUsageParams
from svgmaker.transport import Operation


class AccountEndpoint(Endpoint):
    """Client for ``/v1/account``."""

    path = "/v1/account"

    async def get_info(self) -> ApiResult:
        """Return the account profile and credit balance."""
        operation = Operation(method="GET", path=self.path)
        return to_api_result(await self._client.execute(operation))

    async def get_usage(
        self,
        *,
        days: int | None = None,
        start: str | None = None,
        end: str | None = None,
    ) -> ApiResult:
        """Return credit usage for a period.

        Args:
            days: Number of days back from today.
            start: Range start date (YYYY-MM-DD). Requires ``end``.
            end: Range end date (YYYY-MM-DD). Requires ``start``.

        Raises:
            SVGMakerError: VALIDATION if ``days`` is combined with a range
                or only one end of the range is given.
        """
        params = query_params(
            AccountUsageParams, {"days": days, "start": start, "end": end}
        )
        operation = Operation(method="GET", path=f"{self.path}/usage", params=params)
        return to_api_result(await self._client.execute(operation))
