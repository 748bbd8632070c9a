"""XyzlProcessor: one synchronized depth + label + calibration triple -> labeled cloud."""

from __future__ import annotations
from typing import Optional
import numpy as np
from xyzl_perception.core.camera_model import CameraIntrinsics, CameraModel
from xyzl_perception.core.encodings import DEPTH_ENCODINGS, DepthEncoding
from xyzl_perception.core.errors import (
    FrameMismatch,
    FrameRejected,
    DecodeFailure,
    InvalidCalibration,
    UnsupportedDepthEncoding,
)
from xyzl_perception.core.frame_types import DepthFrame, LabelFrame, PointCloudXYZL
from xyzl_perception.core.normalize import decode_label, normalize_label
from xyzl_perception.core.projector import project_xyzl
from xyzl_perception.core.reconcile import reconcile_resolution

class XyzlProcessor:
    """Runs the per-frame pipeline; rejected frames are logged and skipped."""

    def __init__(self, name: str = "PointCloudXyzl", logger=None):
        """`logger` is an rclpy logger; defaults to the `point_cloud_xyzl` one."""
        if logger is None:
            from rclpy.logging import get_logger
            logger = get_logger("point_cloud_xyzl")
        self.name = name
        self.log = logger
        self.camera = CameraModel()
        self.frames_processed = 0
        self.frames_dropped = 0

    def process_frame(
        self,
        depth: DepthFrame,
        label: LabelFrame,
        intr: CameraIntrinsics,
    ) -> Optional[PointCloudXYZL]:
        """Return the cloud for this triple, or None if the frame was dropped."""
        try:
            cloud = self._process(depth, label, intr)
        except FrameRejected as e:
            self.frames_dropped += 1
            self.log.error(
                f"[{self.name}] drop frame ({type(e).__name__}): {e}",
                throttle_duration_sec=5.0,
            )
            return None
        self.frames_processed += 1
        return cloud

    def _process(self, depth: DepthFrame, label: LabelFrame, intr: CameraIntrinsics) -> PointCloudXYZL:
        # Check for bad inputs
        if depth.frame_id != label.frame_id:
            raise FrameMismatch(
                f"Depth image frame id [{depth.frame_id}] doesn't match label frame id [{label.frame_id}]"
            )

        encoding = self._depth_encoding(depth)
        if np.ndim(label.data) not in (2, 3):
            raise DecodeFailure(f"label data must be 2D or 3D, got shape {np.shape(label.data)}")

        # Resize label (and intrinsics) to the depth resolution if needed
        label, intr = reconcile_resolution(depth, label, intr)
        label = normalize_label(label)

        if intr.fx == 0.0 or intr.fy == 0.0:
            raise InvalidCalibration(f"zero focal length fx={intr.fx} fy={intr.fy}")
        intr = self.camera.update(intr)

        points = project_xyzl(np.asarray(depth.data), decode_label(label), intr, encoding)
        # Use depth image time stamp
        return PointCloudXYZL(points=points, stamp=depth.stamp, frame_id=depth.frame_id)

    @staticmethod
    def _depth_encoding(depth: DepthFrame) -> DepthEncoding:
        encoding = DEPTH_ENCODINGS.get(depth.encoding)
        if encoding is None:
            raise UnsupportedDepthEncoding(f"Depth image has unsupported encoding [{depth.encoding}]")
        data = np.asarray(depth.data)
        if data.ndim != 2 or data.dtype != encoding.dtype:
            raise UnsupportedDepthEncoding(
                f"depth data ({data.dtype}, shape {data.shape}) does not match encoding [{depth.encoding}]"
            )
        return encoding
