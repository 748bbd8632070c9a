#!/usr/bin/env python3
"""Decode compressed_depth_image_transport payloads ("compressedDepth" transport)."""

import struct
from typing import Tuple
import cv2
import numpy as np

# int32 format + float32 depthQuantA + float32 depthQuantB
_CONFIG_HEADER = struct.Struct("<iff")

def decode_compressed_depth(fmt: str, data: bytes) -> Tuple[np.ndarray, str]:
    """Return (depth array, encoding) for a compressedDepth CompressedImage.

    Args:
        fmt: CompressedImage.format, e.g. "16UC1; compressedDepth png"
        data: CompressedImage.data (config header followed by PNG)

    16UC1 images are stored as-is. 32FC1 images are stored as quantized inverse
    depth: depth = A / (inv - B), with inv == 0 meaning no measurement.
    """
    encoding = fmt.split(";")[0].strip()
    if "compressedDepth" not in fmt or "png" not in fmt:
        raise ValueError(f"unsupported compressedDepth format '{fmt}'")
    if encoding not in ("16UC1", "32FC1"):
        raise ValueError(f"unsupported compressedDepth encoding '{encoding}'")

    raw = bytes(data)
    if len(raw) <= _CONFIG_HEADER.size:
        raise ValueError("compressedDepth payload too short")
    _, quant_a, quant_b = _CONFIG_HEADER.unpack_from(raw, 0)

    img = cv2.imdecode(np.frombuffer(raw, dtype=np.uint8, offset=_CONFIG_HEADER.size), cv2.IMREAD_UNCHANGED)
    if img is None or img.dtype != np.uint16 or img.ndim != 2:
        raise ValueError("compressedDepth payload is not a 16-bit single channel PNG")

    if encoding == "16UC1":
        return img, encoding

    inv = img.astype(np.float32)
    with np.errstate(divide="ignore"):
        depth = np.float32(quant_a) / (inv - np.float32(quant_b))
    depth[img == 0] = np.nan
    return depth.astype(np.float32), encoding
