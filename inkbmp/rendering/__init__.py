from .image import (
    DEFAULT_THRESHOLD,
    apply_threshold,
    image_to_raster,
    invert_image,
    load_image,
    normalize_image,
    raster_to_image,
    resize_to_fit,
    rotate_image,
)

__all__ = [
    "DEFAULT_THRESHOLD",
    "apply_threshold",
    "image_to_raster",
    "invert_image",
    "load_image",
    "normalize_image",
    "raster_to_image",
    "resize_to_fit",
    "rotate_image",
]
