"""Bring a label image to the depth image resolution."""

from __future__ import annotations
from typing import Tuple
import cv2
import numpy as np
from xyzl_perception.core.camera_model import CameraIntrinsics
from xyzl_perception.core.errors import DecodeFailure
from xyzl_perception.core.frame_types import DepthFrame, LabelFrame
from xyzl_perception.core.normalize import decode_label, normalize_label

# Element types cv2.resize handles
_RESIZABLE = frozenset(np.dtype(t) for t in (np.uint8, np.int8, np.uint16, np.int16, np.int32, np.float32, np.float64))

def reconcile_resolution(
    depth: DepthFrame,
    label: LabelFrame,
    intr: CameraIntrinsics,
) -> Tuple[LabelFrame, CameraIntrinsics]:
    """Resample `label` to the depth grid and scale `intr` to match.

    The scale is taken from the widths (depth / label). Only the first
    ``depth.height / ratio`` label rows are used, so a label image with extra
    rows at the bottom is cropped. Matching sizes are returned unchanged.

    Raises:
        DecodeFailure: either image is empty, the label can't be decoded or
            resized, or its rows don't cover the depth image.
    """
    if depth.width == label.width and depth.height == label.height:
        return label, intr

    if depth.width == 0 or depth.height == 0:
        raise DecodeFailure(f"empty depth image {depth.width}x{depth.height}")
    if label.width == 0 or label.height == 0:
        raise DecodeFailure(f"empty label image {label.width}x{label.height}")

    ratio = float(depth.width) / float(label.width)
    rows = int(depth.height / ratio)
    if rows <= 0 or rows > label.height:
        raise DecodeFailure(
            f"label {label.width}x{label.height} can't be resized to depth "
            f"{depth.width}x{depth.height}: needs {rows} rows at ratio {ratio:.3f}"
        )

    data = decode_label(label)
    if data.dtype not in _RESIZABLE and (data.ndim == 2 or data.shape[2] == 1):
        # e.g. 64SC1: convert to 32SC1 first so acceptance does not depend on size
        label = normalize_label(label)
        data = decode_label(label)
    try:
        resized = cv2.resize(
            data[:rows],
            (depth.width, depth.height),
            interpolation=cv2.INTER_NEAREST,
        )
    except (cv2.error, TypeError) as e:
        raise DecodeFailure(f"label resize failed: {e}") from e
    # cv2 drops a trailing singleton channel axis
    if data.ndim == 3 and resized.ndim == 2:
        resized = resized[:, :, np.newaxis]

    out = LabelFrame(
        data=resized,
        encoding=label.encoding,
        stamp=label.stamp,
        frame_id=label.frame_id,
    )
    return out, intr.scaled(ratio, depth.width, depth.height)
