#!/usr/bin/env python3
"""Pack labeled clouds into PointCloud2 messages."""

from typing import Optional
import numpy as np
from sensor_msgs.msg import PointCloud2, PointField
from builtin_interfaces.msg import Time as TimeMsg
from xyzl_perception.core.frame_types import XYZL_DTYPE, PointCloudXYZL

def xyzl_to_cloud2(cloud: PointCloudXYZL, stamp: TimeMsg, frame_id: Optional[str] = None) -> PointCloud2:
    """Pack an organized XYZL cloud into a PointCloud2 message.

    Args:
        cloud: HxW cloud from XyzlProcessor
        stamp: ROS time for message header (the depth image stamp)
        frame_id: TF frame for the points, defaults to the cloud's
    """
    points = cloud.points
    if points.ndim != 2 or points.dtype != XYZL_DTYPE:
        raise ValueError("cloud.points must be an HxW array of XYZL_DTYPE")

    msg = PointCloud2()
    msg.header.frame_id = frame_id if frame_id is not None else cloud.frame_id
    msg.header.stamp = stamp
    msg.height = int(points.shape[0])
    msg.width = int(points.shape[1])
    msg.is_bigendian = False
    msg.is_dense = bool(cloud.is_dense)

    # x, y, z as float32 and label as uint32
    msg.fields = [
        PointField(name="x", offset=0, datatype=PointField.FLOAT32, count=1),
        PointField(name="y", offset=4, datatype=PointField.FLOAT32, count=1),
        PointField(name="z", offset=8, datatype=PointField.FLOAT32, count=1),
        PointField(name="label", offset=12, datatype=PointField.UINT32, count=1),
    ]

    msg.point_step = XYZL_DTYPE.itemsize
    msg.row_step = msg.point_step * msg.width
    msg.data = np.ascontiguousarray(points).tobytes()

    return msg
