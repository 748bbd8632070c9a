"""Per-frame rejection reasons. None of these are fatal to the node."""


class FrameRejected(Exception):
    """A synchronized triple was dropped without producing a cloud."""


class FrameMismatch(FrameRejected):
    """Depth and label images are in different coordinate frames."""


class DecodeFailure(FrameRejected):
    """The label image could not be decoded, resized or re-encoded."""


class UnsupportedDepthEncoding(FrameRejected):
    """The depth image encoding has no projection rule."""


class InvalidCalibration(FrameRejected):
    """CameraInfo has a zero focal length (camera not calibrated)."""
