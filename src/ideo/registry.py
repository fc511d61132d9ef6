"""Wire mapping for the Ideogram v3 generate endpoint.

Every upstream field name lives here so the rest of the package never
spells a JSON key directly. When the API evolves, update these tables.
"""

from __future__ import annotations

DEFAULT_API_URL = "https://api.ideogram.ai/v1/ideogram-v3/generate"
API_KEY_HEADER = "Api-Key"

# GenerationRequest attribute -> (wire name, always sent)
REQUEST_FIELDS: dict[str, tuple[str, bool]] = {
    "prompt": ("prompt", True),
    "aspect_ratio": ("aspect_ratio", True),
    "rendering_speed": ("rendering_speed", True),
    "num_images": ("num_images", True),
    "style_type": ("style_type", False),
    "negative_prompt": ("negative_prompt", False),
    "seed": ("seed", False),
    "magic_prompt": ("magic_prompt", False),
}

CHARACTER_REFERENCE_FIELD = "character_reference_images"
CHARACTER_REFERENCE_MAX_BYTES = 10 * 1024 * 1024
CHARACTER_REFERENCE_MIME_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
}

# Response layout: {"data": [{"url": ..., "b64_json": ...}, ...]}
RESPONSE_IMAGES_KEY = "data"
RESPONSE_URL_KEY = "url"
RESPONSE_INLINE_KEY = "b64_json"

# Keys searched, in order, for a human-readable message in error bodies.
ERROR_MESSAGE_KEYS = ("message", "error", "detail")
