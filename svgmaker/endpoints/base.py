"""Shared machinery for endpoint clients.

Endpoint clients hold an immutable parameter mapping. ``configure()``
returns a new client with merged parameters, so a configured client can be
reused as a template without being affected by later changes.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Self, TypeVar
from urllib.parse import quote

from pydantic import BaseModel

from svgmaker.errors import SVGMakerError
from svgmaker.files import FileInput, read_file_part
from svgmaker.responses import ApiResult, SVGResult
from svgmaker.schemas import merge_params, to_form_fields, validate_params
from svgmaker.streaming import normalize_record
from svgmaker.transport import FilePart

if TYPE_CHECKING:
    from svgmaker.client import SVGMakerClient

__all__ = [
    "ConfigurableEndpoint",
    "Endpoint",
    "file_parts",
    "form_fields",
    "query_params",
    "resource_path",
    "to_api_result",
    "to_svg_result",
]

P = TypeVar("P", bound=BaseModel)

_EMPTY: Mapping[str, Any] = MappingProxyType({})


class Endpoint:
    """Base for endpoint clients bound to an ``SVGMakerClient``."""

    def __init__(self, client: "SVGMakerClient"):
        self._client = client


class ConfigurableEndpoint(Endpoint, Generic[P]):
    """Endpoint client whose request is built from configured parameters.

    Subclasses set ``schema`` to the pydantic model the parameters are
    validated against when a request is issued.
    """

    schema: ClassVar[type[BaseModel]]

    def __init__(
        self,
        client: "SVGMakerClient",
        params: Mapping[str, Any] = _EMPTY,
    ):
        super().__init__(client)
        self._params = merge_params(_EMPTY, params)

    @property
    def params(self) -> Mapping[str, Any]:
        """Read-only view of the configured parameters."""
        return self._params

    def configure(self, **changes: Any) -> Self:
        """Return a new client with ``changes`` merged into the parameters.

        Passing ``None`` for a key removes it. This client is unchanged.
        """
        return type(self)(self._client, merge_params(self._params, changes))

    def _apply_defaults(self, params: Mapping[str, Any]) -> Mapping[str, Any]:
        return params

    def _validated(self, **overrides: Any) -> P:
        """Validate the configured parameters plus ``overrides``.

        Raises:
            SVGMakerError: VALIDATION listing every invalid field.
        """
        params = self._apply_defaults(merge_params(self._params, overrides))
        return validate_params(self.schema, params)  # type: ignore[return-value]


def resource_path(prefix: str, resource_id: str, suffix: str = "") -> str:
    """Build ``{prefix}/{id}{suffix}`` with the id percent-encoded.

    Raises:
        SVGMakerError: VALIDATION if ``resource_id`` is empty.
    """
    if not isinstance(resource_id, str) or not resource_id.strip():
        raise SVGMakerError.validation(
            "Validation failed: id: must be a non-empty string"
        )
    return f"{prefix}/{quote(resource_id, safe='')}{suffix}"


async def file_parts(
    field: str, files: FileInput | list[FileInput], default_name: str = "file"
) -> tuple[tuple[str, FilePart], ...]:
    """Read one or more file inputs into multipart parts under ``field``.

    Reads run in a worker thread so large uploads do not block the loop.
    """
    inputs = files if isinstance(files, list) else [files]
    return tuple([(field, await read_file_part(f, default_name)) for f in inputs])


def query_params(schema: type[BaseModel], raw: Mapping[str, Any]) -> dict[str, Any]:
    """Validate ``raw`` against ``schema`` and dump it with wire names.

    ``None`` values are treated as unset.
    """
    params = validate_params(schema, {k: v for k, v in raw.items() if v is not None})
    return params.model_dump(by_alias=True, exclude_none=True)


def form_fields(params: BaseModel, *file_fields: str) -> dict[str, str]:
    return to_form_fields(params, set(file_fields))


def to_api_result(result: Any) -> ApiResult:
    """Wrap a legacy (non-enveloped) body so every endpoint returns ApiResult."""
    if isinstance(result, ApiResult):
        return result
    return ApiResult(data=result)


def to_svg_result(result: Any, *, default_quality: str | None = None) -> SVGResult:
    """Convert a pipeline result into an ``SVGResult``.

    Embedded ``svgText`` and ``base64Png`` payloads are decoded.

    Raises:
        SVGMakerError: API if the payload is not a JSON object.
    """
    api_result = to_api_result(result)
    payload = api_result.data
    if not isinstance(payload, Mapping):
        raise SVGMakerError.api(
            f"Unexpected response payload: {type(payload).__name__}"
        )
    return SVGResult.from_payload(
        normalize_record(dict(payload)),
        api_result.metadata,
        default_quality=default_quality,
    )
