#!/usr/bin/env python3
"""Back-project a depth image and its label image into an XYZL cloud."""

import numpy as np
from xyzl_perception.core.camera_model import CameraIntrinsics
from xyzl_perception.core.encodings import DepthEncoding
from xyzl_perception.core.frame_types import XYZL_DTYPE

def project_xyzl(
    depth: np.ndarray,
    labels: np.ndarray,
    intr: CameraIntrinsics,
    encoding: DepthEncoding,
) -> np.ndarray:
    """Convert a depth image + label image to an organized XYZL point array.

    Args:
        depth: HxW depth in the native unit of `encoding`
        labels: HxW int32 or uint8 labels (HxWx1 is accepted)
        intr: Camera intrinsics matching the depth resolution
        encoding: Depth storage format (unit scale and no-data rule)

    Returns:
        HxW structured array with x, y, z (float32, meters) and label (uint32).
        Pixels with invalid depth or a negative label get NaN coordinates
        but keep their label.
    """
    if labels.ndim == 3 and labels.shape[2] == 1:
        labels = labels[:, :, 0]
    if depth.ndim != 2 or depth.shape != labels.shape:
        raise ValueError(f"depth {depth.shape} and labels {labels.shape} must be equal HxW arrays")
    if labels.dtype not in (np.int32, np.uint8):
        raise ValueError(f"labels must be int32 or uint8, got {labels.dtype}")

    h, w = depth.shape
    # Combine unit conversion with scaling by focal length for computing (X,Y)
    unit_scale = np.float32(encoding.unit_scale)
    constant_x = np.float32(encoding.unit_scale / intr.fx)
    constant_y = np.float32(encoding.unit_scale / intr.fy)
    center_x = np.float32(intr.cx)
    center_y = np.float32(intr.cy)

    u = np.arange(w, dtype=np.float32)[np.newaxis, :]
    v = np.arange(h, dtype=np.float32)[:, np.newaxis]
    d = depth.astype(np.float32)

    valid = encoding.valid(depth) & (labels >= 0)

    cloud = np.empty((h, w), dtype=XYZL_DTYPE)
    # inf depth times a zero offset is NaN; those pixels are masked anyway
    with np.errstate(invalid="ignore", over="ignore"):
        cloud["x"] = np.where(valid, (u - center_x) * d * constant_x, np.nan)
        cloud["y"] = np.where(valid, (v - center_y) * d * constant_y, np.nan)
        cloud["z"] = np.where(valid, d * unit_scale, np.nan)

    # Negative int32 labels wrap to their uint32 bit pattern
    if labels.dtype == np.int32:
        cloud["label"] = labels.view(np.uint32)
    else:
        cloud["label"] = labels.astype(np.uint32)
    return cloud
