"""Request parameter schemas.

Pydantic models for every endpoint's parameters. Field names are
snake_case in Python and serialized with the camelCase names the service
expects. All schemas are frozen and use ``extra="forbid"`` to reject
unexpected options.

Endpoint clients keep parameters as an immutable mapping and merge changes
with ``merge_params``; the mapping is validated into one of these models
just before a request is issued.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Literal, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from svgmaker.errors import SVGMakerError

__all__ = [
    "AccountUsageParams",
    "AiVectorizeParams",
    "BatchConvertParams",
    "DownloadParams",
    "EditParams",
    "EnhancePromptParams",
    "GalleryListParams",
    "GenerateParams",
    "GenerationsListParams",
    "OptimizeSvgParams",
    "RasterToRasterParams",
    "StyleParams",
    "SvgToVectorParams",
    "TraceParams",
    "merge_params",
    "to_form_fields",
    "validate_params",
]

P = TypeVar("P", bound=BaseModel)

Quality = Literal["low", "medium", "high"]
AspectRatio = Literal["auto", "portrait", "landscape", "square"]
Background = Literal["auto", "transparent", "opaque"]
Style = Literal[
    "flat",
    "line_art",
    "engraving",
    "linocut",
    "silhouette",
    "isometric",
    "cartoon",
    "ghibli",
]
ColorMode = Literal["full_color", "monochrome", "few_colors"]
ImageComplexity = Literal["icon", "illustration", "scene"]
Composition = Literal[
    "centered_object", "repeating_pattern", "full_scene", "objects_in_grid"
]
TextStyle = Literal["only_title", "embedded_text"]
TracePreset = Literal["bw", "poster", "photo"]
TraceMode = Literal["pixel", "polygon", "spline"]
Hierarchical = Literal["stacked", "cutout"]
DxfVersion = Literal["R12", "R14"]
DownloadFormat = Literal["svg", "webp", "png", "svg-optimized", "svgz"]

_MAX_BATCH_FILES = 10


def _check_file_input(value: Any) -> Any:
    if isinstance(value, str | Path | bytes | bytearray):
        return value
    if callable(getattr(value, "read", None)):
        return value
    raise ValueError("must be a file path, bytes, or a binary file object")


class _Params(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class StyleParams(BaseModel):
    """Style hints for generate/edit. Sent with snake_case keys."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    style: Style | None = None
    color_mode: ColorMode | None = None
    image_complexity: ImageComplexity | None = None
    composition: Composition | None = None
    text: TextStyle | None = None


class _ModelOrQuality(_Params):
    quality: Quality | None = None
    model: str | None = None

    @model_validator(mode="after")
    def check_model_excludes_quality(self) -> "_ModelOrQuality":
        if self.model and self.quality:
            raise ValueError(
                "Cannot specify both 'model' and 'quality'. Use one or the other."
            )
        return self


class GenerateParams(_ModelOrQuality):
    prompt: str = Field(min_length=1)
    aspect_ratio: AspectRatio | None = None
    background: Background | None = None
    stream: bool | None = None
    base64_png: bool | None = None
    svg_text: bool | None = None
    style_params: StyleParams | None = None
    storage: bool | None = None


class EditParams(_ModelOrQuality):
    image: Any
    prompt: str | None = None
    mask: Any = None
    # Edit accepts its own style vocabulary; sent as a JSON object.
    style_params: dict[str, Any] | None = None
    aspect_ratio: AspectRatio | None = None
    background: Background | None = None
    stream: bool | None = None
    base64_png: bool | None = None
    svg_text: bool | None = None
    storage: bool | None = None

    @field_validator("image")
    @classmethod
    def check_image(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("image is required")
        return _check_file_input(value)

    @field_validator("mask")
    @classmethod
    def check_mask(cls, value: Any) -> Any:
        return value if value is None else _check_file_input(value)

    @model_validator(mode="after")
    def check_prompt_or_style(self) -> "EditParams":
        if not self.prompt and not self.style_params:
            raise ValueError("Either prompt or style_params is required.")
        return self


class _FileParams(_Params):
    file: Any

    @field_validator("file")
    @classmethod
    def check_file(cls, value: Any) -> Any:
        return _check_file_input(value)


class AiVectorizeParams(_FileParams):
    stream: bool | None = None
    svg_text: bool | None = None
    storage: bool | None = None


class TraceParams(_FileParams):
    algorithm: Literal["vtracer"] | None = None
    preset: TracePreset | None = None
    mode: TraceMode | None = None
    hierarchical: Hierarchical | None = None
    detail: float | None = Field(default=None, ge=0, le=100)
    smoothness: float | None = Field(default=None, ge=0, le=100)
    corners: float | None = Field(default=None, ge=0, le=100)
    reduce_noise: float | None = None


class SvgToVectorParams(_FileParams):
    to_format: Literal["PDF", "EPS", "DXF", "AI", "PS"]
    text_to_path: bool | None = None
    dxf_version: DxfVersion | None = None


class RasterToRasterParams(_FileParams):
    to_format: Literal["PNG", "JPG", "WEBP", "TIFF", "GIF", "AVIF"]
    quality: int | None = Field(default=None, ge=1, le=100)
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)


class BatchConvertParams(_Params):
    files: list[Any] = Field(min_length=1, max_length=_MAX_BATCH_FILES)
    to_format: str = Field(min_length=1)
    preset: TracePreset | None = None
    mode: TraceMode | None = None
    hierarchical: Hierarchical | None = None
    detail: float | None = None
    smoothness: float | None = None
    corners: float | None = None
    reduce_noise: float | None = None
    text_to_path: bool | None = None
    dxf_version: DxfVersion | None = None
    quality: int | None = None
    width: int | None = None
    height: int | None = None

    @field_validator("files")
    @classmethod
    def check_files(cls, value: list[Any]) -> list[Any]:
        return [_check_file_input(v) for v in value]


class OptimizeSvgParams(_FileParams):
    compress: bool | None = None


class EnhancePromptParams(_Params):
    prompt: str = Field(min_length=1)


class GenerationsListParams(_Params):
    page: int | None = Field(default=None, gt=0)
    limit: int | None = Field(default=None, ge=1, le=100)
    type: str | list[str] | None = None
    hashtags: str | list[str] | None = None
    categories: str | list[str] | None = None
    query: str | None = None


class GalleryListParams(GenerationsListParams):
    pro: str | None = None
    gold: str | None = None


class DownloadParams(_Params):
    format: DownloadFormat | None = None
    optimize: bool | None = None


class AccountUsageParams(_Params):
    days: int | None = Field(default=None, gt=0)
    start: str | None = None
    end: str | None = None

    @model_validator(mode="after")
    def check_days_or_range(self) -> "AccountUsageParams":
        has_range = self.start is not None or self.end is not None
        if self.days is not None and has_range:
            raise ValueError("Use either days or start/end, not both.")
        if has_range and (self.start is None or self.end is None):
            raise ValueError(
                "Both start and end dates are required when using date range."
            )
        return self


def merge_params(
    current: Mapping[str, Any], changes: Mapping[str, Any]
) -> Mapping[str, Any]:
    """Return a new read-only mapping of ``current`` updated with ``changes``.

    Keys whose new value is ``None`` are removed. Neither input is modified.
    """
    merged = {**current, **changes}
    return MappingProxyType({k: v for k, v in merged.items() if v is not None})


def _format_validation_error(error: ValidationError) -> str:
    issues = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue["loc"])
        message = issue["msg"]
        issues.append(f"{location}: {message}" if location else message)
    return "Validation failed: " + ", ".join(issues)


def validate_params(schema: type[P], raw: Mapping[str, Any]) -> P:
    """Validate raw parameters against ``schema``.

    Raises:
        SVGMakerError: VALIDATION describing every failed field.
    """
    try:
        return schema.model_validate(dict(raw))
    except ValidationError as e:
        raise SVGMakerError.validation(
            _format_validation_error(e), details=e.errors(include_url=False)
        ) from e


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, BaseModel):
        return json.dumps(value.model_dump(exclude_none=True))
    if isinstance(value, dict | list):
        return json.dumps(value)
    return str(value)


def to_form_fields(params: BaseModel, exclude: set[str]) -> dict[str, str]:
    """Serialize non-file parameters as multipart form fields.

    Args:
        params: Validated parameter model.
        exclude: Python field names to leave out (file fields).

    Returns:
        Mapping of wire field name to string value. Unset fields are omitted;
        nested objects are JSON-encoded.
    """
    fields: dict[str, str] = {}
    for name, info in type(params).model_fields.items():
        value = getattr(params, name)
        if name in exclude or value is None:
            continue
        fields[info.alias or name] = _form_value(value)
    return fields
