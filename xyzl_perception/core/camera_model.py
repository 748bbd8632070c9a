"""Pinhole camera intrinsics taken from CameraInfo-style calibration."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
import numpy as np

# Entries scaled when the label image is resampled to the depth resolution
_K_SCALED = (0, 2, 4, 5)
_P_SCALED = (0, 2, 5, 6)

@dataclass(frozen=True)
class CameraIntrinsics:
    """Row-major K (3x3) and P (3x4) plus the resolution they belong to."""
    k: Tuple[float, ...]
    p: Tuple[float, ...]
    width: int
    height: int

    def __post_init__(self) -> None:
        if len(self.k) != 9:
            raise ValueError(f"K must have 9 entries, got {len(self.k)}")
        if len(self.p) != 12:
            raise ValueError(f"P must have 12 entries, got {len(self.p)}")

    @classmethod
    def from_matrices(
        cls,
        K: Sequence[float],
        P: Optional[Sequence[float]] = None,
        width: int = 0,
        height: int = 0,
    ) -> "CameraIntrinsics":
        """Build from K and P (any shape, flattened row-major). P defaults to [K | 0]."""
        k = tuple(float(v) for v in np.asarray(K, dtype=np.float64).ravel())
        if P is None:
            p_mat = np.zeros((3, 4), dtype=np.float64)
            p_mat[:, :3] = np.asarray(k, dtype=np.float64).reshape(3, 3)
            P = p_mat
        p = tuple(float(v) for v in np.asarray(P, dtype=np.float64).ravel())
        return cls(k=k, p=p, width=int(width), height=int(height))

    @classmethod
    def from_camera_info(cls, info) -> "CameraIntrinsics":
        """Build from a sensor_msgs/CameraInfo message."""
        return cls.from_matrices(info.k, info.p, info.width, info.height)

    @property
    def fx(self) -> float:
        return self.k[0]

    @property
    def fy(self) -> float:
        return self.k[4]

    @property
    def cx(self) -> float:
        return self.k[2]

    @property
    def cy(self) -> float:
        return self.k[5]

    @property
    def K(self) -> np.ndarray:
        return np.array(self.k, dtype=np.float64).reshape(3, 3)

    @property
    def P(self) -> np.ndarray:
        return np.array(self.p, dtype=np.float64).reshape(3, 4)

    def scaled(self, ratio: float, width: int, height: int) -> "CameraIntrinsics":
        """Copy with focal lengths and principal point multiplied by `ratio`."""
        k = list(self.k)
        p = list(self.p)
        for i in _K_SCALED:
            k[i] *= ratio
        for i in _P_SCALED:
            p[i] *= ratio
        return CameraIntrinsics(k=tuple(k), p=tuple(p), width=int(width), height=int(height))

class CameraModel:
    """Holds the most recently applied intrinsics."""

    def __init__(self) -> None:
        self._intr: Optional[CameraIntrinsics] = None

    def update(self, intr: CameraIntrinsics) -> CameraIntrinsics:
        self._intr = intr
        return intr

    @property
    def initialized(self) -> bool:
        return self._intr is not None

    @property
    def intrinsics(self) -> CameraIntrinsics:
        if self._intr is None:
            raise RuntimeError("camera model has no calibration yet")
        return self._intr
