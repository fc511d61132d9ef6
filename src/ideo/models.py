"""Value types shared by the option parser, request builder and client."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class AspectRatio(str, Enum):
    R1X1 = "1x1"
    R16X9 = "16x9"
    R9X16 = "9x16"
    R4X3 = "4x3"
    R3X4 = "3x4"
    R3X2 = "3x2"
    R2X3 = "2x3"
    R4X5 = "4x5"
    R5X4 = "5x4"
    R16X10 = "16x10"
    R10X16 = "10x16"
    R2X1 = "2x1"
    R1X2 = "1x2"
    R3X1 = "3x1"
    R1X3 = "1x3"


class RenderingSpeed(str, Enum):
    FLASH = "FLASH"
    TURBO = "TURBO"
    DEFAULT = "DEFAULT"
    QUALITY = "QUALITY"


class StyleType(str, Enum):
    AUTO = "AUTO"
    GENERAL = "GENERAL"
    REALISTIC = "REALISTIC"
    DESIGN = "DESIGN"
    FICTION = "FICTION"


class MagicPrompt(str, Enum):
    AUTO = "AUTO"
    ON = "ON"
    OFF = "OFF"


@dataclass(frozen=True)
class GenerationRequest:
    """Everything sent upstream for one invocation.

    Attributes:
        prompt: Prompt text, already stripped.
        aspect_ratio: Output aspect ratio class.
        rendering_speed: Quality/latency tier.
        num_images: How many images to request (>= 1).
        style_type: Optional style; omitted from the wire when None.
        negative_prompt: Optional text describing what to exclude.
        seed: Optional seed; the API picks one when None.
        magic_prompt: Optional prompt-enhancement mode.
        character_reference: Optional reference image uploaded with the request.
    """

    prompt: str
    aspect_ratio: AspectRatio = AspectRatio.R1X1
    rendering_speed: RenderingSpeed = RenderingSpeed.TURBO
    num_images: int = 1
    style_type: StyleType | None = None
    negative_prompt: str | None = None
    seed: int | None = None
    magic_prompt: MagicPrompt | None = None
    character_reference: Path | None = None


@dataclass(frozen=True)
class GenerationResult:
    """One image entry from the response, before its bytes are resolved."""

    index: int
    url: str | None = None
    inline: bytes | None = None
