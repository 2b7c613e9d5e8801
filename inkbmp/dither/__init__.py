from .kernels import KERNELS, DiffusionKernel, DitherAlgorithm
from .quantizer import diffuse_error, nearest_palette_index, quantize

__all__ = [
    "DiffusionKernel",
    "DitherAlgorithm",
    "KERNELS",
    "diffuse_error",
    "nearest_palette_index",
    "quantize",
]
