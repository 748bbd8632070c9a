"""Pixel encodings understood by the XYZL pipeline.

Encoding names follow sensor_msgs/image_encodings. Generic ``<bits><U|S|F>C<n>``
names are parsed; the named aliases below cover the usual camera formats.
"""

from __future__ import annotations
from dataclasses import dataclass
import re
from typing import Dict, Tuple
import numpy as np

_GENERIC = re.compile(r"^(8|16|32|64)(U|S|F)C([1-4])$")
_KINDS = {"U": "u", "S": "i", "F": "f"}

_ALIASES: Dict[str, Tuple[np.dtype, int]] = {
    "mono8": (np.dtype(np.uint8), 1),
    "mono16": (np.dtype(np.uint16), 1),
    "rgb8": (np.dtype(np.uint8), 3),
    "bgr8": (np.dtype(np.uint8), 3),
    "rgba8": (np.dtype(np.uint8), 4),
    "bgra8": (np.dtype(np.uint8), 4),
    "rgb16": (np.dtype(np.uint16), 3),
    "bgr16": (np.dtype(np.uint16), 3),
    "rgba16": (np.dtype(np.uint16), 4),
    "bgra16": (np.dtype(np.uint16), 4),
}

# Label encodings the projector reads directly
LABEL_INT32 = "32SC1"
LABEL_UINT8 = ("8UC1", "mono8")
SUPPORTED_LABEL_ENCODINGS = frozenset((LABEL_INT32,) + LABEL_UINT8)


def encoding_format(encoding: str) -> Tuple[np.dtype, int]:
    """Return (dtype, channels) for an image encoding.

    Raises:
        KeyError: if the encoding is not a known numeric image encoding.
    """
    if encoding in _ALIASES:
        return _ALIASES[encoding]
    m = _GENERIC.match(encoding)
    if m is None:
        raise KeyError(encoding)
    bits, kind, channels = m.groups()
    if kind == "F" and bits in ("8", "16"):
        raise KeyError(encoding)
    return np.dtype(f"{_KINDS[kind]}{int(bits) // 8}"), int(channels)


@dataclass(frozen=True)
class DepthEncoding:
    """Depth pixel format: storage type, unit conversion and no-data test."""
    name: str
    dtype: np.dtype
    unit_scale: float  # native unit -> meters

    @property
    def is_float(self) -> bool:
        return self.dtype.kind == "f"

    def valid(self, depth: np.ndarray) -> np.ndarray:
        """Element-wise validity mask: integers use 0 as no-data, floats anything non-finite."""
        if self.is_float:
            return np.isfinite(depth)
        return depth != 0


DEPTH_ENCODINGS: Dict[str, DepthEncoding] = {
    "16UC1": DepthEncoding("16UC1", np.dtype(np.uint16), 0.001),
    "mono16": DepthEncoding("mono16", np.dtype(np.uint16), 0.001),
    "32FC1": DepthEncoding("32FC1", np.dtype(np.float32), 1.0),
}
