from pathlib import Path

import pytest

from xyzl_perception.config import XyzlConfig, load_config

PACKAGE_CONFIG = Path(__file__).resolve().parents[1] / "config" / "xyzl.yaml"


def test_defaults():
    cfg = XyzlConfig()

    assert cfg.queue_size == 5
    assert cfg.depth_image_transport == "raw"
    assert cfg.image_transport == "raw"


def test_shipped_config_loads():
    cfg = load_config(PACKAGE_CONFIG)

    assert cfg == XyzlConfig()


def test_partial_file_keeps_defaults(tmp_path):
    path = tmp_path / "xyzl.yaml"
    path.write_text("point_cloud_xyzl:\n  queue_size: 10\n  slop: 1\n  image_transport: compressed\n")

    cfg = load_config(path)

    assert cfg.queue_size == 10
    assert cfg.slop == 1.0
    assert isinstance(cfg.slop, float)
    assert cfg.image_transport == "compressed"
    assert cfg.depth_topic == "depth_registered/image_rect"


def test_empty_file_is_all_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert load_config(path) == XyzlConfig()


@pytest.mark.parametrize(
    "body",
    [
        "point_cloud_xyzl:\n  queue_size: 0\n",
        "point_cloud_xyzl:\n  depth_image_transport: theora\n",
        "point_cloud_xyzl:\n  image_transport: compressedDepth\n",
        "point_cloud_xyzl:\n  slop: -1\n",
        "point_cloud_xyzl:\n  qeue_size: 3\n",
        "point_cloud_xyzl: [1, 2]\n",
    ],
)
def test_bad_values_are_rejected(tmp_path, body):
    path = tmp_path / "bad.yaml"
    path.write_text(body)

    with pytest.raises(ValueError):
        load_config(path)


def test_compressed_depth_transport_is_for_depth_only():
    cfg = XyzlConfig(depth_image_transport="compressedDepth", image_transport="compressed")

    assert cfg.depth_image_transport == "compressedDepth"
    with pytest.raises(ValueError):
        XyzlConfig(image_transport="compressedDepth")
