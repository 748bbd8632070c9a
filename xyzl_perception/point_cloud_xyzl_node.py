"""ROS 2 node that fuses depth + label images into a labeled PointCloud2.

Configuration is read from xyzl.yaml (path passed as a ROS parameter) and
individual ROS parameters override it. Inputs are only subscribed while the
output topic has subscribers.
"""
from __future__ import annotations
from dataclasses import replace
from pathlib import Path
from typing import List, Optional
import rclpy
from rclpy.node import Node
from ament_index_python.packages import get_package_share_directory
from cv_bridge import CvBridge
from message_filters import ApproximateTimeSynchronizer, Subscriber
from sensor_msgs.msg import CameraInfo, CompressedImage, Image, PointCloud2
from xyzl_perception.config import XyzlConfig, load_config
from xyzl_perception.core.camera_model import CameraIntrinsics
from xyzl_perception.core.errors import FrameRejected
from xyzl_perception.core.pipeline import XyzlProcessor
from xyzl_perception.core.subscription_gate import SubscriptionGate
from xyzl_perception.utils.cloud_utils import xyzl_to_cloud2
from xyzl_perception.utils.image_utils import depth_frame_from_msg, label_frame_from_msg

class PointCloudXyzlNode(Node):
    """Depth image + label image + CameraInfo -> PointCloud2 (x, y, z, label)."""

    def __init__(self) -> None:
        """Load config, create publisher and synchronizer, start the subscriber check."""
        super().__init__("point_cloud_xyzl")

        self.cfg = self._load_config()
        self.log = self.get_logger()
        self.log.info(
            f"[PointCloudXyzl] depth='{self.cfg.depth_topic}' ({self.cfg.depth_image_transport}) "
            f"label='{self.cfg.label_topic}' ({self.cfg.image_transport}) info='{self.cfg.info_topic}' "
            f"queue_size={self.cfg.queue_size} slop={self.cfg.slop}"
        )

        self._bridge = CvBridge()
        self._processor = XyzlProcessor(logger=self.log)
        # Subscriptions and synchronizer exist only while the output has subscribers
        self._subs: List[Subscriber] = []
        self._ats: Optional[ApproximateTimeSynchronizer] = None

        self._pub_points = self.create_publisher(PointCloud2, self.cfg.points_topic, 1)
        self._gate = SubscriptionGate(self._subscribe, self._unsubscribe)
        self._timer = self.create_timer(float(self.cfg.connection_check_sec), self._check_connections)

    def _load_config(self) -> XyzlConfig:
        """YAML file first, then ROS parameter overrides."""
        self.declare_parameter("config_file", "xyzl.yaml")
        config_file = str(self.get_parameter("config_file").value)
        cfg_path = Path(config_file)
        if not cfg_path.is_absolute():
            cfg_path = Path(get_package_share_directory("xyzl_perception")) / "config" / config_file
        self.get_logger().info(f"Loading xyzl config: {cfg_path}")
        cfg = load_config(cfg_path)

        # Parameters default to the file values
        self.declare_parameter("queue_size", cfg.queue_size)
        self.declare_parameter("slop", cfg.slop)
        self.declare_parameter("depth_image_transport", cfg.depth_image_transport)
        self.declare_parameter("image_transport", cfg.image_transport)
        return replace(
            cfg,
            queue_size=int(self.get_parameter("queue_size").value),
            slop=float(self.get_parameter("slop").value),
            depth_image_transport=str(self.get_parameter("depth_image_transport").value),
            image_transport=str(self.get_parameter("image_transport").value),
        )

    def _image_subscriber(self, topic: str, transport: str) -> Subscriber:
        if transport in ("compressed", "compressedDepth"):
            return Subscriber(self, CompressedImage, f"{topic}/{transport}")
        return Subscriber(self, Image, topic)

    def _check_connections(self) -> None:
        self._gate.update(self._pub_points.get_subscription_count())

    def _subscribe(self) -> None:
        """Someone listens to the output: subscribe to the inputs."""
        self._subs = [
            self._image_subscriber(self.cfg.depth_topic, self.cfg.depth_image_transport),
            self._image_subscriber(self.cfg.label_topic, self.cfg.image_transport),
            Subscriber(self, CameraInfo, self.cfg.info_topic),
        ]
        self._ats = ApproximateTimeSynchronizer(
            self._subs,
            queue_size=int(self.cfg.queue_size),
            slop=float(self.cfg.slop),
        )
        self._ats.registerCallback(self._cb)
        self.log.info("[PointCloudXyzl] output has subscribers, input subscriptions started")

    def _unsubscribe(self) -> None:
        """Nobody listens anymore: drop the input subscriptions and buffered messages."""
        for sub in self._subs:
            self.destroy_subscription(sub.sub)
        self._subs = []
        self._ats = None
        self.log.info("[PointCloudXyzl] no subscribers, input subscriptions stopped")

    def _cb(self, depth_msg, label_msg, info_msg: CameraInfo) -> None:
        """Synchronized callback for depth + label + CameraInfo."""
        try:
            depth = depth_frame_from_msg(self._bridge, depth_msg)
            label = label_frame_from_msg(self._bridge, label_msg)
        except FrameRejected as e:
            self.log.error(f"[PointCloudXyzl] drop frame: {e}", throttle_duration_sec=5.0)
            return
        intr = CameraIntrinsics.from_camera_info(info_msg)

        cloud = self._processor.process_frame(depth, label, intr)
        if cloud is None:
            return
        self._pub_points.publish(xyzl_to_cloud2(cloud, depth_msg.header.stamp))

def main(args=None) -> None:
    """Entry point: ros2 run xyzl_perception point_cloud_xyzl_node"""
    rclpy.init(args=args)
    node = PointCloudXyzlNode()
    rclpy.spin(node)
    node.destroy_node()
    rclpy.shutdown()

if __name__ == "__main__":
    main()
