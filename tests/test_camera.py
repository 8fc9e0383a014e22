import dataclasses

import pytest

from rgbdkit.camera import CameraInfo, PinholeCameraModel, pinhole_camera_info

FX = 554.2559327880068
CX = 320.5
CY = 240.5


def make_info():
    return pinhole_camera_info(FX, FX, CX, CY, 0.0, 0.0, 640, 480)


def test_pinhole_info_layout():
    info = make_info()
    assert info.K[0] == FX
    assert info.K[2] == CX
    assert info.K[5] == CY
    assert info.P[0] == FX
    assert info.P[6] == CY
    assert info.distortion_model == "plumb_bob"
    assert info.D == (0.0,) * 5
    assert (info.width, info.height) == (640, 480)


def test_rotation_is_identity():
    info = make_info()
    assert info.R == (1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0)


def test_model_parameters_from_info():
    model = PinholeCameraModel()
    model.from_camera_info(pinhole_camera_info(FX, 500.0, CX, CY, 3.0, 4.0, 640, 480))
    assert model.initialized
    assert model.fx == FX
    assert model.fy == 500.0
    assert model.cx == CX
    assert model.cy == CY
    assert model.Tx == 3.0
    assert model.Ty == 4.0
    assert model.full_resolution == (640, 480)


def test_uninitialized_model():
    model = PinholeCameraModel()
    assert not model.initialized
    assert model.camera_info == CameraInfo()
    with pytest.raises(RuntimeError):
        _ = model.fx


def test_ray_through_principal_point():
    model = PinholeCameraModel(make_info())
    assert model.project_pixel_to_ray(CX, CY) == (0.0, 0.0, 1.0)


def test_ray_scales_with_offset():
    model = PinholeCameraModel(make_info())
    x, y, z = model.project_pixel_to_ray(CX + FX, CY - FX)
    assert x == pytest.approx(1.0)
    assert y == pytest.approx(-1.0)
    assert z == 1.0


def test_project_uninitialized_raises():
    with pytest.raises(RuntimeError):
        PinholeCameraModel().project_pixel_to_ray(1.0, 2.0)


def test_info_equality_and_change():
    a = make_info()
    b = make_info()
    assert a == b
    assert dataclasses.replace(b, width=b.width + 10) != a


def test_info_validates_lengths():
    with pytest.raises(ValueError):
        CameraInfo(K=(1.0, 2.0))
    with pytest.raises(ValueError):
        CameraInfo(P=(0.0,) * 9)


def test_from_camera_info_rejects_other_types():
    with pytest.raises(TypeError):
        PinholeCameraModel().from_camera_info({"width": 640})