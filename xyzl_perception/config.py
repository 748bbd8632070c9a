"""Configuration for the XYZL point cloud node.

Defaults live in XyzlConfig; config/xyzl.yaml (``point_cloud_xyzl:`` section)
overrides them, and ROS parameters override the file.
"""
from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union
import yaml

# Depth may also arrive as compressed_depth_image_transport PNG (16UC1 or 32FC1)
DEPTH_TRANSPORTS = ("raw", "compressed", "compressedDepth")
IMAGE_TRANSPORTS = ("raw", "compressed")

@dataclass(frozen=True)
class XyzlConfig:
    # Input topics (relative, remap as needed)
    depth_topic: str = "depth_registered/image_rect"
    label_topic: str = "label/label"
    info_topic: str = "label/camera_info"
    # Output topic
    points_topic: str = "depth_registered/points"
    # Message synchronization
    queue_size: int = 5
    slop: float = 0.1
    # Image transport hints
    depth_image_transport: str = "raw"
    image_transport: str = "raw"
    # How often to check for output subscribers
    connection_check_sec: float = 1.0

    def __post_init__(self) -> None:
        if int(self.queue_size) < 1:
            raise ValueError(f"queue_size must be >= 1, got {self.queue_size}")
        if float(self.slop) < 0.0:
            raise ValueError(f"slop must be >= 0, got {self.slop}")
        if float(self.connection_check_sec) <= 0.0:
            raise ValueError(f"connection_check_sec must be > 0, got {self.connection_check_sec}")
        for name, allowed in (("depth_image_transport", DEPTH_TRANSPORTS), ("image_transport", IMAGE_TRANSPORTS)):
            value = getattr(self, name)
            if value not in allowed:
                raise ValueError(f"{name} '{value}' not supported (use one of {allowed})")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XyzlConfig":
        """Build from a mapping, coercing types; unknown keys are an error."""
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValueError(f"unknown point_cloud_xyzl keys: {unknown}")
        kwargs = {}
        for key, value in data.items():
            default = known[key].default
            kwargs[key] = type(default)(value)
        return cls(**kwargs)

def load_config(path: Union[str, Path]) -> XyzlConfig:
    """Read the ``point_cloud_xyzl`` section of a YAML file."""
    with open(path, "r") as f:
        cfg = yaml.safe_load(f) or {}

    section = cfg.get("point_cloud_xyzl", {}) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'point_cloud_xyzl' in {path} must be a mapping")
    return XyzlConfig.from_dict(section)
