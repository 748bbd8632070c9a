#!/usr/bin/env python3
"""Launches PointCloudXyzlNode only."""

from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node
from launch_ros.substitutions import FindPackageShare
from launch.substitutions import PathJoinSubstitution

def generate_launch_description() -> LaunchDescription:
    config_file = LaunchConfiguration("config_file")
    queue_size = LaunchConfiguration("queue_size")
    depth_image_transport = LaunchConfiguration("depth_image_transport")
    image_transport = LaunchConfiguration("image_transport")
    use_sim_time = LaunchConfiguration("use_sim_time")
    log_level = LaunchConfiguration("log_level")

    config_path = PathJoinSubstitution(
        [FindPackageShare("xyzl_perception"), "config", config_file]
    )

    return LaunchDescription([
        DeclareLaunchArgument(
            "config_file",
            default_value="xyzl.yaml",
            description="Point cloud configuration YAML in xyzl_perception/config.",
        ),
        DeclareLaunchArgument(
            "queue_size", default_value="5", description="Synchronizer queue depth per input."
        ),
        DeclareLaunchArgument(
            "depth_image_transport", default_value="raw", description="Depth transport: raw, compressed or compressedDepth."
        ),
        DeclareLaunchArgument(
            "image_transport", default_value="raw", description="Label transport: raw or compressed."
        ),
        DeclareLaunchArgument(
            "use_sim_time", default_value="false", description="Use Gazebo / simulation time."
        ),
        DeclareLaunchArgument(
            "log_level", default_value="info", description="ROS 2 log level."
        ),
        Node(
            package="xyzl_perception",
            executable="point_cloud_xyzl_node",
            name="point_cloud_xyzl",
            output="screen",
            parameters=[{
                "config_file": config_path,
                "queue_size": queue_size,
                "depth_image_transport": depth_image_transport,
                "image_transport": image_transport,
                "use_sim_time": use_sim_time,
            }],
            arguments=["--ros-args", "--log-level", log_level],
        ),
    ])
