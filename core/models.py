"""Data models for the bottle photography proxy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Mode(str, Enum):
    NATURALEZA = "naturaleza"
    SPOT = "spot"
    CORPORATIVO = "corporativo"
    CARIBE = "caribe"
    PUBLICITARIO = "publicitario"


class Sku(str, Enum):
    BOTTLE_600ML = "600ml"
    BOTTLE_335ML = "335ml"


class Resolution(str, Enum):
    ONE_K = "1K"
    TWO_K = "2K"
    FOUR_K = "4K"


class OutputFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"


ASPECT_RATIOS: tuple[str, ...] = (
    "auto",
    "21:9",
    "16:9",
    "3:2",
    "4:3",
    "5:4",
    "1:1",
    "4:5",
    "3:4",
    "2:3",
    "9:16",
)

SAFETY_TOLERANCES: tuple[str, ...] = ("1", "2", "3", "4", "5", "6")

DEFAULT_MODE = Mode.PUBLICITARIO
DEFAULT_SKU = Sku.BOTTLE_600ML
DEFAULT_ASPECT_RATIO = "9:16"
DEFAULT_RESOLUTION = Resolution.ONE_K
DEFAULT_OUTPUT_FORMAT = OutputFormat.PNG
DEFAULT_SAFETY_TOLERANCE = "4"
SCENE_MAX_CHARS = 700


@dataclass(frozen=True)
class Normalized(Generic[T]):
    """A sanitized value plus the reason the raw input was discarded, if it was."""
    value: T
    ignored: str | None = None


@dataclass(frozen=True)
class GenerationRequest:
    mode: Mode = DEFAULT_MODE
    scene: str = ""
    sku: Sku = DEFAULT_SKU
    tapa: bool = True
    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    resolution: Resolution = DEFAULT_RESOLUTION
    reference_image_url: str | None = None
    output_format: OutputFormat = DEFAULT_OUTPUT_FORMAT
    safety_tolerance: str = DEFAULT_SAFETY_TOLERANCE
    ignored: dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def has_reference(self) -> bool:
        return self.reference_image_url is not None

    def echo(self) -> dict[str, Any]:
        """Normalized fields as echoed back to the client."""
        return {
            "mode": self.mode.value,
            "sku": self.sku.value,
            "tapa": self.tapa,
            "aspect_ratio": self.aspect_ratio,
            "resolution": self.resolution.value,
            "output_format": self.output_format.value,
            "reference_image_url": self.reference_image_url,
            "reference_mode": self.has_reference,
        }


@dataclass
class UpstreamImageResult:
    url: str
    raw: Any = None


@dataclass
class Request:
    """Transport-neutral view of an inbound HTTP request."""
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    query: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.method = (self.method or "GET").upper()
        self.headers = {str(k).lower(): str(v) for k, v in (self.headers or {}).items()}
        self.query = dict(self.query or {})

    def header(self, name: str, default: str = "") -> str:
        return self.headers.get(name.lower(), default)
