import dataclasses
import string

import numpy as np
import pytest

from rgbdkit.camera import CameraInfo, PinholeCameraModel
from rgbdkit.image import Image, depth_mm_to_meters

_rng = np.random.default_rng()


def random_string(length=10):
    letters = np.array(list(string.ascii_lowercase))
    return "".join(_rng.choice(letters, size=length))


def generate_random_image():
    rgb = _rng.integers(1, 128, size=(480, 640, 3), dtype=np.uint8)
    depth = _rng.uniform(0.0, 100.0, size=(480, 640)).astype(np.float32)
    info = CameraInfo(
        width=640,
        height=480,
        distortion_model="plumb_bob",
        D=(0.0,) * 5,
        K=(554.2559327880068, 0.0, 320.5, 0.0, 554.2559327880068, 240.5, 0.0, 0.0, 1.0),
        R=(1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0),
        P=(554.2559327880068, 0.0, 320.5, 0.0, 0.0, 554.2559327880068, 240.5, 0.0,
           0.0, 0.0, 1.0, 0.0),
    )
    return Image(rgb, depth, PinholeCameraModel(info), random_string(),
                 float(_rng.uniform(0, 1000000)))


def test_empty_clone():
    image1 = Image()
    image2 = image1.clone()
    assert image1 == image2
    assert not (image1 != image2)


def test_random_clone():
    image1 = generate_random_image()
    image2 = image1.clone()
    assert image1 == image2
    assert not (image1 != image2)


def test_clone_is_deep():
    image1 = generate_random_image()
    image2 = image1.clone()
    assert image2.rgb is not image1.rgb
    image2.depth[0, 0] += 1.0
    assert image1 != image2


def test_two_random_images_differ():
    image1 = generate_random_image()
    image2 = generate_random_image()
    assert (image1 == image2) is False
    assert (image1 != image2) is True


def test_different_frame_id():
    image1 = generate_random_image()
    image2 = image1.clone()
    image2.frame_id = "bla"
    assert not (image1 == image2)
    assert image1 != image2


def test_different_timestamp():
    image1 = generate_random_image()
    image2 = image1.clone()
    image2.timestamp = image1.timestamp + 10.0
    assert not (image1 == image2)
    assert image1 != image2


def test_different_camera_model():
    image1 = generate_random_image()
    image2 = image1.clone()
    info = image2.camera_model.camera_info
    image2.set_camera_info(dataclasses.replace(info, width=info.width + 10))
    assert not (image1 == image2)
    assert image1 != image2


def test_different_depth_image():
    image1 = generate_random_image()
    image2 = image1.clone()
    depth = image2.depth
    depth[0, 0] += 0.1
    image2.depth = depth
    assert not (image1 == image2)
    assert image1 != image2


def test_different_rgb_image():
    image1 = generate_random_image()
    image2 = image1.clone()
    color = image2.rgb
    color[0, 0] = np.minimum(color[0, 0].astype(np.int32) * 2, 255).astype(np.uint8)
    image2.rgb = color
    assert not (image1 == image2)
    assert image1 != image2


def test_set_camera_model_copies_calibration():
    source = generate_random_image()
    image = Image()
    image.set_camera_model(source.camera_model)
    assert image.camera_model.camera_info == source.camera_model.camera_info
    assert image.camera_model is not source.camera_model


def test_str_mentions_types_and_frame():
    image = generate_random_image()
    text = str(image)
    assert "CV_32FC1" in text
    assert "CV_8UC3" in text
    assert f"frame_id: {image.frame_id}" in text


def test_depth_mm_to_meters_converts_uint16():
    depth = np.array([[1500, 0]], dtype=np.uint16)
    result = depth_mm_to_meters(depth)
    assert result.dtype == np.float32
    assert result[0, 0] == pytest.approx(1.5)
    assert result[0, 1] == 0.0


def test_depth_mm_to_meters_leaves_float_untouched():
    depth = np.array([[1.25]], dtype=np.float32)
    assert depth_mm_to_meters(depth) is depth