# xyzl_perception/core/frame_types.py
from dataclasses import dataclass
import numpy as np

XYZL_DTYPE = np.dtype([
    ("x", "<f4"),
    ("y", "<f4"),
    ("z", "<f4"),
    ("label", "<u4"),
])

@dataclass(frozen=True, eq=False)
class ImageFrame:
    """Single image with the header fields the pipeline needs."""
    # HxW (or HxWxC) array in the dtype named by `encoding`
    data: np.ndarray
    encoding: str
    # Timing and coordinate frame
    stamp: float
    frame_id: str

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def step(self) -> int:
        """Row stride in bytes."""
        return int(self.data.strides[0])

@dataclass(frozen=True, eq=False)
class DepthFrame(ImageFrame):
    """Depth image (16UC1 millimeters or 32FC1 meters)."""

@dataclass(frozen=True, eq=False)
class LabelFrame(ImageFrame):
    """Per-pixel semantic/instance labels."""

@dataclass(frozen=True, eq=False)
class PointCloudXYZL:
    """Organized labeled cloud, one point per depth pixel (row-major)."""
    points: np.ndarray  # HxW structured array of XYZL_DTYPE
    stamp: float
    frame_id: str
    # Invalid pixels stay in the grid as NaN points
    is_dense: bool = False

    @property
    def width(self) -> int:
        return int(self.points.shape[1])

    @property
    def height(self) -> int:
        return int(self.points.shape[0])
