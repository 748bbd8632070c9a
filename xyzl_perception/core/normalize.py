"""Label decoding and re-encoding to a projector-readable format."""

from __future__ import annotations
import numpy as np
from xyzl_perception.core.encodings import LABEL_INT32, SUPPORTED_LABEL_ENCODINGS, encoding_format
from xyzl_perception.core.errors import DecodeFailure
from xyzl_perception.core.frame_types import LabelFrame

_INT32 = np.iinfo(np.int32)

def decode_label(label: LabelFrame) -> np.ndarray:
    """Return the label pixels after checking them against the declared encoding."""
    try:
        dtype, channels = encoding_format(label.encoding)
    except KeyError:
        raise DecodeFailure(f"unknown label encoding [{label.encoding}]") from None

    data = np.asarray(label.data)
    if data.ndim not in (2, 3):
        raise DecodeFailure(f"label image must be 2D or 3D, got shape {data.shape}")
    got_channels = 1 if data.ndim == 2 else int(data.shape[2])
    if data.dtype != dtype or got_channels != channels:
        raise DecodeFailure(
            f"label data ({data.dtype}, {got_channels} ch) does not match encoding [{label.encoding}]"
        )
    return data

def normalize_label(label: LabelFrame) -> LabelFrame:
    """Pass supported encodings through, otherwise convert losslessly to 32SC1."""
    if label.encoding in SUPPORTED_LABEL_ENCODINGS:
        return label

    data = decode_label(label)
    if data.ndim == 3:
        if data.shape[2] != 1:
            raise DecodeFailure(f"cannot convert {data.shape[2]}-channel [{label.encoding}] to {LABEL_INT32}")
        data = data[:, :, 0]

    if data.size:
        if data.dtype.kind == "f":
            if not np.all(np.isfinite(data)):
                raise DecodeFailure(f"non-finite labels in [{label.encoding}] image")
            if not np.all(data == np.trunc(data)):
                raise DecodeFailure(f"fractional labels in [{label.encoding}] image")
        lo, hi = data.min(), data.max()
        if lo < _INT32.min or hi > _INT32.max:
            raise DecodeFailure(f"labels in [{label.encoding}] image exceed the {LABEL_INT32} range")

    return LabelFrame(
        data=data.astype(np.int32),
        encoding=LABEL_INT32,
        stamp=label.stamp,
        frame_id=label.frame_id,
    )
