"""Transform pipeline: an ordered list of steps built once per item and then applied.

Step order is fixed: resize, encode parameters, ROI overlay, flatten, then
optimizations. Encode parameters are resolved while building and carried by the
final ``EncodeStep``.
"""

import math
import re
from dataclasses import dataclass, field
from io import BytesIO
from typing import List, Optional, Tuple, Union

import structlog
from PIL import Image, ImageColor, ImageFilter, ImageOps

from pikpix.core.constants import (
    CHROMA_SUBSAMPLING_RATES,
    CUSTOM_QUANTIZATION_TABLE,
    DENOISE_FILTER_SIZE,
    JPEG_ONLY_FORMATS,
    MAX_COMPRESSION,
    MIN_COMPRESSION,
)
from pikpix.core.conversion.formats.base import BaseFormatHandler, EncodeOptions
from pikpix.core.conversion.formats.registry import format_registry
from pikpix.core.exceptions import CodecError, InvalidParameterError, PikPixError
from pikpix.models.conversion import ConversionRequest

logger = structlog.get_logger()

RESIZE_PATTERN = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")

# Modes every ImageFilter kernel accepts
FILTERABLE_MODES = ("L", "RGB", "RGBA")


def _has_alpha(image: Image.Image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


def _filterable(image: Image.Image) -> Image.Image:
    if image.mode in FILTERABLE_MODES:
        return image
    return image.convert("RGBA" if _has_alpha(image) else "RGB")


def _lay_on_background(image: Image.Image, color: Tuple[int, ...]) -> Image.Image:
    rgba = image.convert("RGBA")
    background = Image.new("RGB", image.size, color[:3])
    background.paste(rgba, mask=rgba.getchannel("A"))
    return background


# Parameter parsing


def parse_compression(value: Optional[int]) -> Optional[int]:
    """Check a compression level against the accepted range."""
    if value is None:
        return None
    if not MIN_COMPRESSION <= value <= MAX_COMPRESSION:
        raise InvalidParameterError(
            "Invalid compression level. Please provide a value between "
            f"{MIN_COMPRESSION} and {MAX_COMPRESSION} (got {value}).",
            details={
                "field_name": "compression",
                "field_value": value,
                "constraints": f"{MIN_COMPRESSION}-{MAX_COMPRESSION}",
            },
        )
    return value


def parse_resize(value: str) -> Tuple[int, int]:
    """Parse ``WIDTHxHEIGHT`` into a pair of positive integers."""
    match = RESIZE_PATTERN.match(value)
    width, height = (int(match.group(1)), int(match.group(2))) if match else (0, 0)
    if width <= 0 or height <= 0:
        raise InvalidParameterError(
            "Invalid resize dimensions. Please provide dimensions in the format "
            f"WIDTHxHEIGHT or WIDTHXHEIGHT (got '{value}').",
            details={
                "field_name": "resize",
                "field_value": value,
                "constraints": "two positive integers separated by x or X",
            },
        )
    return width, height


def parse_blur(value: float) -> float:
    """Check that a blur sigma is a positive number."""
    if math.isnan(value) or value <= 0:
        raise InvalidParameterError(
            f"Invalid blur sigma value. Please provide a positive number (got {value}).",
            details={"field_name": "blur", "field_value": value, "constraints": "> 0"},
        )
    return value


def parse_subsample(value: str) -> int:
    """Map a chroma subsampling rate such as ``4:2:0`` to the encoder's code."""
    rate = CHROMA_SUBSAMPLING_RATES.get(value.strip())
    if rate is None:
        raise InvalidParameterError(
            f"Invalid chroma subsampling rate '{value}'. Supported rates are "
            f"{', '.join(CHROMA_SUBSAMPLING_RATES)}.",
            details={
                "field_name": "subsample",
                "field_value": value,
                "constraints": ", ".join(CHROMA_SUBSAMPLING_RATES),
            },
        )
    return rate


def parse_color(value: str) -> Tuple[int, ...]:
    """Resolve a CSS colour name or hex string into an RGB(A) tuple."""
    try:
        return ImageColor.getrgb(value)
    except ValueError:
        raise InvalidParameterError(
            f"Invalid flatten color '{value}'.",
            details={"field_name": "flatten", "field_value": value},
        )


@dataclass(frozen=True)
class Region:
    """One ROI rectangle and the JPEG quality it is re-encoded at."""

    x: int
    y: int
    width: int
    height: int
    quality: int


def parse_regions(value: str) -> Tuple[Region, ...]:
    """Parse ``x:y:w:h:q[,x:y:w:h:q...]`` into regions, keeping their order."""
    regions = []
    for chunk in value.split(","):
        parts = chunk.strip().split(":")
        try:
            if len(parts) != 5:
                raise ValueError(chunk)
            x, y, width, height, quality = (int(part) for part in parts)
        except ValueError:
            raise InvalidParameterError(
                f"Invalid ROI region '{chunk.strip()}'. Expected x:y:width:height:quality.",
                details={"field_name": "roi_compression", "field_value": value},
            )
        if x < 0 or y < 0 or width <= 0 or height <= 0:
            raise InvalidParameterError(
                f"Invalid ROI region '{chunk.strip()}'. Offsets must not be negative "
                "and sizes must be positive.",
                details={"field_name": "roi_compression", "field_value": value},
            )
        if not MIN_COMPRESSION <= quality <= MAX_COMPRESSION:
            raise InvalidParameterError(
                f"Invalid ROI quality {quality}. Please provide a value between "
                f"{MIN_COMPRESSION} and {MAX_COMPRESSION}.",
                details={"field_name": "roi_compression", "field_value": value},
            )
        regions.append(Region(x, y, width, height, quality))
    return tuple(regions)


# Steps


@dataclass(frozen=True)
class ResizeStep:
    width: int
    height: int
    preserve_aspect_ratio: bool = False

    def apply(self, image: Image.Image) -> Image.Image:
        if image.mode not in ("RGB", "RGBA", "L", "LA"):
            image = image.convert("RGBA" if _has_alpha(image) else "RGB")
        if self.preserve_aspect_ratio:
            # Scale to fit inside the box, up-scaling when smaller
            return ImageOps.contain(
                image, (self.width, self.height), method=Image.Resampling.LANCZOS
            )
        return image.resize((self.width, self.height), Image.Resampling.LANCZOS)


@dataclass(frozen=True)
class RoiOverlayStep:
    regions: Tuple[Region, ...]

    def apply(self, image: Image.Image) -> Image.Image:
        # Every patch is cut from the untouched base; later regions paint over earlier ones
        base = _filterable(image)
        canvas = base.copy()
        for region in self.regions:
            right = region.x + region.width
            bottom = region.y + region.height
            if right > base.width or bottom > base.height:
                raise InvalidParameterError(
                    f"ROI region {region.x}:{region.y}:{region.width}:{region.height} "
                    f"is outside the {base.width}x{base.height} image.",
                    details={
                        "field_name": "roi_compression",
                        "constraints": f"within {base.width}x{base.height}",
                    },
                )

            box = (region.x, region.y, right, bottom)
            patch = base.crop(box)
            buffer = BytesIO()
            patch.convert("L" if patch.mode == "L" else "RGB").save(
                buffer, format="JPEG", quality=region.quality
            )
            buffer.seek(0)
            with Image.open(buffer) as encoded:
                recoded = encoded.convert(base.mode)
            if base.mode == "RGBA":
                recoded.putalpha(patch.getchannel("A"))
            canvas.paste(recoded, box)
        return canvas


@dataclass(frozen=True)
class FlattenStep:
    color: Tuple[int, ...]

    def apply(self, image: Image.Image) -> Image.Image:
        if not _has_alpha(image):
            return image
        return _lay_on_background(image, self.color)


@dataclass(frozen=True)
class SharpenStep:
    def apply(self, image: Image.Image) -> Image.Image:
        return _filterable(image).filter(ImageFilter.SHARPEN)


@dataclass(frozen=True)
class DenoiseStep:
    size: int = DENOISE_FILTER_SIZE

    def apply(self, image: Image.Image) -> Image.Image:
        return _filterable(image).filter(ImageFilter.MedianFilter(self.size))


@dataclass(frozen=True)
class GrayscaleStep:
    def apply(self, image: Image.Image) -> Image.Image:
        return image.convert("LA" if _has_alpha(image) else "L")


@dataclass(frozen=True)
class BlurStep:
    sigma: float

    def apply(self, image: Image.Image) -> Image.Image:
        return _filterable(image).filter(ImageFilter.GaussianBlur(radius=self.sigma))


TransformStep = Union[
    ResizeStep,
    RoiOverlayStep,
    FlattenStep,
    SharpenStep,
    DenoiseStep,
    GrayscaleStep,
    BlurStep,
]


@dataclass(frozen=True)
class EncodeStep:
    """Final encode through the target format's handler."""

    format_name: str
    handler: BaseFormatHandler
    options: EncodeOptions
    params: dict

    def apply(self, image: Image.Image) -> bytes:
        buffer = BytesIO()
        self.handler.save_image(image, buffer, self.params)
        return buffer.getvalue()


@dataclass
class Pipeline:
    """Steps for one item plus the encoder and any non-fatal warnings."""

    steps: List[TransformStep]
    encoder: EncodeStep
    warnings: List[str] = field(default_factory=list)

    def apply(self, asset) -> bytes:
        """Decode the asset, run every step in order and encode the result.

        Raises:
            CodecError: If Pillow rejects the decode, a transform or the encode
            InvalidParameterError: If a step's parameters do not fit the image
        """
        try:
            source = Image.open(BytesIO(asset.data))
            source.load()
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            raise CodecError(
                "Failed to decode image.",
                details={
                    "operation": "decode",
                    "error": type(e).__name__,
                    "reason": str(e),
                },
            )

        with source:
            image = source
            for step in self.steps:
                try:
                    image = step.apply(image)
                except PikPixError:
                    raise
                except (OSError, ValueError) as e:
                    raise CodecError(
                        f"Failed to apply {type(step).__name__}: {str(e)}",
                        details={"operation": "transform", "error": type(e).__name__},
                    )
            return self.encoder.apply(image)


def _encode_step(request: ConversionRequest, warnings: List[str]) -> EncodeStep:
    format_name = request.format
    handler = format_registry.get_handler(format_name)
    capabilities = handler.capabilities
    compression = parse_compression(request.compression)
    rate = parse_subsample(request.subsample) if request.subsample is not None else None

    # Lossless and compression are exclusive; an unsupported lossless request
    # leaves the format's default encoding in place
    lossless = False
    quality = None
    if request.lossless:
        if capabilities.lossless:
            lossless = True
            quality = compression
        else:
            warnings.append(
                f"Lossless compression is not supported for format {format_name}."
            )
    elif compression is not None:
        if capabilities.quality:
            quality = compression
        else:
            warnings.append(
                f"Compression setting is not supported for format {format_name}."
            )

    # JPEG extras ride along with an explicit quality only
    with_quality = quality is not None

    progressive = False
    if request.progressive:
        if format_name not in JPEG_ONLY_FORMATS:
            warnings.append(
                f"Progressive encoding is not supported for format {format_name}."
            )
        else:
            progressive = with_quality

    subsampling = None
    if rate is not None:
        if not capabilities.chroma_subsampling:
            warnings.append(
                f"Chroma subsampling is not supported for format {format_name}."
            )
        elif with_quality:
            subsampling = rate

    qtables = None
    if request.adaptive_quantization:
        if not capabilities.adaptive_quantization:
            warnings.append(
                f"Adaptive quantization is not supported for format {format_name}."
            )
        elif with_quality:
            qtables = [list(CUSTOM_QUANTIZATION_TABLE)]

    requested_extras = request.progressive or rate is not None or request.adaptive_quantization
    if format_name in JPEG_ONLY_FORMATS and requested_extras and not with_quality:
        logger.debug("JPEG encoder options need a compression level", format=format_name)

    options = EncodeOptions(
        quality=quality,
        lossless=lossless,
        progressive=progressive,
        subsampling=subsampling,
        qtables=qtables,
    )
    return EncodeStep(
        format_name=format_name,
        handler=handler,
        options=options,
        params=handler.build_save_params(format_name, options),
    )


def build_pipeline(request: ConversionRequest) -> Pipeline:
    """
    Build the ordered transform steps for a request.

    Args:
        request: Validated conversion request

    Returns:
        Pipeline with its steps, encoder and warnings

    Raises:
        InvalidParameterError: If compression, resize, blur, subsample, ROI or
            flatten colour values are malformed
    """
    steps: List[TransformStep] = []
    warnings: List[str] = []

    # 1. Resize
    if request.resize is not None:
        width, height = parse_resize(request.resize)
        steps.append(ResizeStep(width, height, request.preserve_aspect_ratio))

    # 2. Encoding parameters
    encoder = _encode_step(request, warnings)

    # 3. Region-of-interest overlay
    if request.roi_compression:
        steps.append(RoiOverlayStep(parse_regions(request.roi_compression)))

    # 4. Flatten
    if request.flatten.enabled:
        steps.append(FlattenStep(parse_color(request.flatten.background)))

    # 5. Optimizations
    if request.auto_optimize:
        steps.extend([SharpenStep(), DenoiseStep()])
    else:
        if request.sharpen:
            steps.append(SharpenStep())
        if request.denoise:
            steps.append(DenoiseStep())
        if request.grayscale:
            steps.append(GrayscaleStep())
        if request.blur is not None:
            steps.append(BlurStep(parse_blur(request.blur)))

    logger.debug(
        "Built pipeline",
        format=request.format,
        steps=[type(step).__name__ for step in steps],
        warnings=len(warnings),
    )
    return Pipeline(steps=steps, encoder=encoder, warnings=warnings)
