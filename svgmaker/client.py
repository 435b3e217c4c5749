"""SVGMaker API client.

``SVGMakerClient`` owns the request pipeline: every operation is admitted
once by the rate limiter, then issued through the transport under the retry
wrapper. Streaming operations are admitted once and issued once; their
bodies are decoded incrementally.

Example:
    async with SVGMakerClient("svgmaker-io-key") as client:
        result = await client.generate.configure(prompt="A red fox").execute()
        print(result.svg_url)
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import httpx
import structlog

from svgmaker.config import ClientConfig
from svgmaker.endpoints import (
    AccountEndpoint,
    ConvertNamespace,
    EditEndpoint,
    EnhancePromptEndpoint,
    GalleryEndpoint,
    GenerateEndpoint,
    GenerationsEndpoint,
    OptimizeSvgEndpoint,
)
from svgmaker.errors import SVGMakerError
from svgmaker.logging_config import configure_logging
from svgmaker.rate_limiter import RateLimiter
from svgmaker.retry import with_retries
from svgmaker.streaming import StreamEvent, decode_event_stream
from svgmaker.transport import Operation, Transport

__all__ = ["ResponseHook", "SVGMakerClient"]

logger = structlog.get_logger()

# Applied to every non-streaming result, in registration order.
ResponseHook = Callable[[Any], Any | Awaitable[Any]]


class SVGMakerClient:
    """Async client for the SVGMaker API.

    Attributes:
        generate: Text-to-SVG generation.
        edit: Image/SVG editing.
        convert: Conversion endpoints (ai_vectorize, trace, svg_to_vector,
            raster_to_raster, batch).
        generations: The caller's stored generations.
        gallery: Public gallery.
        account: Account info and usage.
        enhance_prompt: Prompt enhancement.
        optimize_svg: SVG optimization.
    """

    def __init__(
        self,
        api_key: str,
        config: ClientConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        **overrides: Any,
    ):
        """Initialize the client.

        Args:
            api_key: SVGMaker API key.
            config: Base configuration; ``api_key`` and ``overrides`` are
                applied on top of it.
            http_client: Client to send requests with. When omitted, one is
                created and closed by ``aclose()``.
            **overrides: Individual ``ClientConfig`` fields.

        Raises:
            SVGMakerError: VALIDATION if the API key is missing or the
                configuration is invalid.
        """
        if not api_key:
            raise SVGMakerError.validation("API key is required")

        self._config = (config or ClientConfig()).merged(api_key=api_key, **overrides)
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient()
        self._transport = Transport(self._http_client)
        self._limiter = RateLimiter(self._config.rate_limit)
        self._response_hooks: list[ResponseHook] = []

        if self._config.logging:
            configure_logging(self._config.log_level)

        self.generate = GenerateEndpoint(self)
        self.edit = EditEndpoint(self)
        self.convert = ConvertNamespace(self)
        self.generations = GenerationsEndpoint(self)
        self.gallery = GalleryEndpoint(self)
        self.account = AccountEndpoint(self)
        self.enhance_prompt = EnhancePromptEndpoint(self)
        self.optimize_svg = OptimizeSvgEndpoint(self)

        logger.debug(
            "svgmaker_client_initialized",
            base_url=self._config.base_url,
            rate_limit=self._config.rate_limit,
            max_retries=self._config.max_retries,
        )

    @property
    def config(self) -> ClientConfig:
        """Current configuration snapshot."""
        return self._config

    def set_config(self, **overrides: Any) -> "SVGMakerClient":
        """Replace the configuration for operations started from now on.

        In-flight operations keep the snapshot they started with. Changing
        ``rate_limit`` starts a fresh limiter window.

        Raises:
            SVGMakerError: VALIDATION for unknown or invalid options.
        """
        if "api_key" in overrides and not overrides["api_key"]:
            raise SVGMakerError.validation("API key is required")

        previous = self._config
        self._config = previous.merged(**overrides)
        if self._config.rate_limit != previous.rate_limit:
            self._limiter = RateLimiter(self._config.rate_limit)
        if self._config.logging and (
            not previous.logging or self._config.log_level != previous.log_level
        ):
            configure_logging(self._config.log_level)

        logger.debug("svgmaker_config_updated", options=sorted(overrides))
        return self

    def add_response_hook(self, hook: ResponseHook) -> "SVGMakerClient":
        """Register a callable applied to every non-streaming result.

        The hook receives the result and returns the (possibly replaced)
        result. Coroutine functions are awaited.
        """
        self._response_hooks.append(hook)
        return self

    async def execute(self, operation: Operation) -> Any:
        """Run ``operation`` through the rate limiter and retry wrapper.

        The configuration is captured once, so a concurrent ``set_config``
        does not affect retries of this operation.

        Raises:
            SVGMakerError: The classified failure.
        """
        config = self._config
        await self._limiter.admit()
        result = await with_retries(
            lambda: self._transport.send(operation, config), config
        )
        for hook in self._response_hooks:
            result = hook(result)
            if isinstance(result, Awaitable):
                result = await result
        return result

    async def stream_events(self, operation: Operation) -> AsyncIterator[StreamEvent]:
        """Issue a streaming operation and yield its decoded events.

        Admitted once and sent once; no retries. The response is closed when
        iteration finishes or the consumer stops early.
        """
        config = self._config
        await self._limiter.admit()
        async with self._transport.stream(operation, config) as chunks:
            async for event in decode_event_stream(chunks):
                yield event

    async def aclose(self) -> None:
        """Close the HTTP client if this client created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "SVGMakerClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
