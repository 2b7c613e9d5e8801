from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

# (dx, dy, weight); the applied fraction is weight / divisor * dampening
Tap = Tuple[int, int, int]


class DitherAlgorithm(Enum):
    NONE = "none"
    FLOYD_STEINBERG = "floyd-steinberg"
    ATKINSON = "atkinson"
    FALSE_FLOYD_STEINBERG = "false-floyd-steinberg"
    JARVIS = "jarvis"
    STUCKI = "stucki"
    BURKES = "burkes"
    SIERRA3 = "sierra3"
    SIERRA2 = "sierra2"
    SIERRA_LITE = "sierra-lite"

    @classmethod
    def parse(cls, name: str) -> "DitherAlgorithm":
        """Map an external algorithm name onto the enum.

        Accepts the dashed names (``floyd-steinberg``), underscores and the
        camelCase spellings used by web front ends (``floydSteinberg``).
        ``sierra2-4a`` is the usual alias of Sierra Lite.
        """
        key = _normalize_name(name)
        algorithm = _ALIASES.get(key)
        if algorithm is None:
            known = ", ".join(a.value for a in cls)
            raise ValueError(f"Unknown dithering algorithm '{name}' (known: {known})")
        return algorithm


@dataclass(frozen=True)
class DiffusionKernel:
    taps: Tuple[Tap, ...]
    divisor: int = 1
    dampening: float = 1.0

    def weights(self) -> List[Tuple[int, int, float]]:
        """Return ``(dx, dy, fraction)`` with divisor and dampening applied."""
        return [(dx, dy, weight / self.divisor * self.dampening) for dx, dy, weight in self.taps]

    @property
    def total(self) -> float:
        """Fraction of the quantization error handed on to neighbors."""
        return sum(fraction for _, _, fraction in self.weights())


KERNELS: Dict[DitherAlgorithm, DiffusionKernel] = {
    DitherAlgorithm.NONE: DiffusionKernel(taps=()),
    DitherAlgorithm.FLOYD_STEINBERG: DiffusionKernel(
        taps=((1, 0, 7), (-1, 1, 3), (0, 1, 5), (1, 1, 1)),
        divisor=16,
    ),
    # Only 6/8 * 0.75 of the error is passed on; the rest is dropped on purpose.
    DitherAlgorithm.ATKINSON: DiffusionKernel(
        taps=((1, 0, 1), (2, 0, 1), (-1, 1, 1), (0, 1, 1), (1, 1, 1), (0, 2, 1)),
        divisor=8,
        dampening=0.75,
    ),
    DitherAlgorithm.FALSE_FLOYD_STEINBERG: DiffusionKernel(
        taps=((1, 0, 3), (0, 1, 3), (1, 1, 2)),
        divisor=8,
    ),
    DitherAlgorithm.JARVIS: DiffusionKernel(
        taps=(
            (1, 0, 7), (2, 0, 5),
            (-2, 1, 3), (-1, 1, 5), (0, 1, 7), (1, 1, 5), (2, 1, 3),
            (-2, 2, 1), (-1, 2, 3), (0, 2, 5), (1, 2, 3), (2, 2, 1),
        ),
        divisor=48,
    ),
    DitherAlgorithm.STUCKI: DiffusionKernel(
        taps=(
            (1, 0, 8), (2, 0, 4),
            (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
            (-2, 2, 1), (-1, 2, 2), (0, 2, 4), (1, 2, 2), (2, 2, 1),
        ),
        divisor=42,
    ),
    DitherAlgorithm.BURKES: DiffusionKernel(
        taps=(
            (1, 0, 8), (2, 0, 4),
            (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
        ),
        divisor=32,
    ),
    DitherAlgorithm.SIERRA3: DiffusionKernel(
        taps=(
            (1, 0, 5), (2, 0, 3),
            (-2, 1, 2), (-1, 1, 4), (0, 1, 5), (1, 1, 4), (2, 1, 2),
            (-1, 2, 2), (0, 2, 3), (1, 2, 2),
        ),
        divisor=32,
    ),
    DitherAlgorithm.SIERRA2: DiffusionKernel(
        taps=(
            (1, 0, 4), (2, 0, 3),
            (-2, 1, 1), (-1, 1, 2), (0, 1, 3), (1, 1, 2), (2, 1, 1),
        ),
        divisor=16,
    ),
    DitherAlgorithm.SIERRA_LITE: DiffusionKernel(
        taps=((1, 0, 2), (-1, 1, 1), (0, 1, 1)),
        divisor=4,
    ),
}


def _normalize_name(name: str) -> str:
    out = []
    prev = ""
    for ch in name.strip():
        if ch.isupper() and (prev.islower() or prev.isdigit()):
            out.append("-")
        out.append("-" if ch in "_ " else ch.lower())
        prev = ch
    return "".join(out)


_ALIASES: Dict[str, DitherAlgorithm] = {algorithm.value: algorithm for algorithm in DitherAlgorithm}
_ALIASES.update(
    {
        "off": DitherAlgorithm.NONE,
        "floyd": DitherAlgorithm.FLOYD_STEINBERG,
        "jarvis-judice-ninke": DitherAlgorithm.JARVIS,
        "sierra2-4a": DitherAlgorithm.SIERRA_LITE,
        "sierra-2-4a": DitherAlgorithm.SIERRA_LITE,
    }
)
