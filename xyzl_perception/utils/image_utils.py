#!/usr/bin/env python3
"""Convert sensor_msgs Image / CompressedImage messages to pipeline frames."""

from typing import Tuple
import cv2
import numpy as np
from cv_bridge import CvBridge, CvBridgeError
from xyzl_perception.core.encodings import encoding_format
from xyzl_perception.core.errors import DecodeFailure, UnsupportedDepthEncoding
from xyzl_perception.core.frame_types import DepthFrame, LabelFrame
from xyzl_perception.utils.depth_codec import decode_compressed_depth

_KIND_LETTER = {"u": "U", "i": "S", "f": "F"}

def message_stamp(msg) -> float:
    """Header stamp in seconds."""
    stamp = msg.header.stamp
    return float(stamp.sec) + float(stamp.nanosec) * 1e-9

def _encoding_of_array(arr: np.ndarray) -> str:
    """Generic encoding name (e.g. 16UC1) for a decoded array."""
    channels = 1 if arr.ndim == 2 else int(arr.shape[2])
    return f"{arr.dtype.itemsize * 8}{_KIND_LETTER[arr.dtype.kind]}C{channels}"

def _compressed_encoding(fmt: str, arr: np.ndarray) -> str:
    # image_transport writes e.g. "16UC1; png compressed"
    head = fmt.split(";")[0].strip()
    try:
        dtype, channels = encoding_format(head)
    except KeyError:
        return _encoding_of_array(arr)
    got = 1 if arr.ndim == 2 else int(arr.shape[2])
    if dtype != arr.dtype or channels != got:
        return _encoding_of_array(arr)
    return head

def _decode(bridge: CvBridge, msg) -> Tuple[np.ndarray, str]:
    if hasattr(msg, "format"):
        if "compressedDepth" in msg.format:
            return decode_compressed_depth(msg.format, msg.data)
        arr = bridge.compressed_imgmsg_to_cv2(msg, desired_encoding="passthrough")
        return arr, _compressed_encoding(msg.format, arr)
    arr = bridge.imgmsg_to_cv2(msg, desired_encoding="passthrough")
    return arr, msg.encoding

def depth_frame_from_msg(bridge: CvBridge, msg) -> DepthFrame:
    """Decode a depth image; undecodable encodings are UnsupportedDepthEncoding."""
    try:
        arr, encoding = _decode(bridge, msg)
    except (CvBridgeError, cv2.error, TypeError, KeyError, ValueError) as e:
        raise UnsupportedDepthEncoding(f"cannot decode depth image: {e}") from e
    return DepthFrame(data=arr, encoding=encoding, stamp=message_stamp(msg), frame_id=msg.header.frame_id)

def label_frame_from_msg(bridge: CvBridge, msg) -> LabelFrame:
    """Decode a label image; failures are DecodeFailure."""
    try:
        arr, encoding = _decode(bridge, msg)
    except (CvBridgeError, cv2.error, TypeError, KeyError, ValueError) as e:
        raise DecodeFailure(f"cv_bridge exception: {e}") from e
    return LabelFrame(data=arr, encoding=encoding, stamp=message_stamp(msg), frame_id=msg.header.frame_id)
