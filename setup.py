from setuptools import find_packages, setup
import os
from glob import glob

package_name = 'xyzl_perception'

setup(
    # Package metadata
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    # Install data files for ROS 2
    data_files=[
        ('share/ament_index/resource_index/packages', ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        (os.path.join('share', package_name, 'launch'), glob('launch/*.py')),
        (os.path.join('share', package_name, 'config'), glob('config/*.yaml')),
    ],
    # rclpy, message_filters, cv_bridge and the message packages come from ROS (package.xml)
    install_requires=['setuptools', 'numpy', 'opencv-python', 'PyYAML'],
    extras_require={'test': ['pytest']},
    zip_safe=True,
    # Maintainer information
    maintainer='pratik',
    maintainer_email='pratik.adhikari@smail.inf.h-brs.de',
    description='Labeled point cloud (x, y, z, label) from depth and label images',
    license='BSD-3-Clause',
    tests_require=['pytest'],
    # Executable entry points
    entry_points={
        'console_scripts': [
            'point_cloud_xyzl_node = xyzl_perception.point_cloud_xyzl_node:main',
        ],
    },
)
