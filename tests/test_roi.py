import math

import numpy as np
import pytest

from rgbdkit.camera import PinholeCameraModel, pinhole_camera_info
from rgbdkit.image import Image
from rgbdkit.roi import ImageHistory, PointStamped, RegionOfInterest, points_from_rois


def _image(depth, timestamp=5.0, frame_id="camera"):
    info = pinhole_camera_info(100.0, 100.0, 40.0, 30.0, 0.0, 0.0, 80, 60)
    rgb = np.zeros((60, 80, 3), dtype=np.uint8)
    return Image(rgb, depth, PinholeCameraModel(info), frame_id, timestamp)


def _flat(value, shape=(60, 80)):
    return np.full(shape, value, dtype=np.float32)


def test_center_roi_projects_on_axis():
    image = _image(_flat(2.0))
    [point] = points_from_rois(image, [RegionOfInterest(30, 20, 20, 20)])
    assert isinstance(point, PointStamped)
    assert point.frame_id == "camera"
    assert point.stamp == 5.0
    assert point.x == pytest.approx(0.0)
    assert point.y == pytest.approx(0.0)
    assert point.z == pytest.approx(2.0)


def test_half_resolution_depth_gives_same_point():
    full = points_from_rois(_image(_flat(2.0)), [RegionOfInterest(30, 20, 20, 20)])[0]
    half = points_from_rois(
        _image(_flat(2.0, (30, 40))), [RegionOfInterest(30, 20, 20, 20)]
    )[0]
    assert (half.x, half.y, half.z) == pytest.approx((full.x, full.y, full.z))


def test_offset_roi_moves_point_sideways():
    [point] = points_from_rois(_image(_flat(2.0)), [RegionOfInterest(50, 20, 20, 20)])
    assert point.x == pytest.approx(0.4)
    assert point.y == pytest.approx(0.0)


def test_median_depth_is_used():
    depth = _flat(1.0)
    depth[:, 40:] = 3.0
    [point] = points_from_rois(_image(depth), [RegionOfInterest(30, 20, 20, 20)])
    assert point.z == pytest.approx(3.0)


def test_invalid_depths_give_nan_point():
    depth = _flat(0.0)
    depth[:10, :10] = np.nan
    [point] = points_from_rois(_image(depth), [RegionOfInterest(0, 0, 20, 20)])
    assert point.frame_id == "camera"
    assert [math.isnan(v) for v in (point.x, point.y, point.z)] == [True, True, True]


def test_roi_is_capped_to_image():
    [point] = points_from_rois(_image(_flat(2.0)), [RegionOfInterest(70, 50, 40, 40)])
    assert point.z == pytest.approx(2.0)
    assert point.x > 0


def test_one_point_per_roi():
    rois = [RegionOfInterest(30, 20, 20, 20), RegionOfInterest(50, 20, 20, 20)]
    assert len(points_from_rois(_image(_flat(2.0)), rois)) == 2
    assert points_from_rois(_image(_flat(2.0)), []) == []


def test_missing_depth_raises():
    image = _image(None)
    with pytest.raises(ValueError):
        points_from_rois(image, [RegionOfInterest(0, 0, 10, 10)])


def test_empty_history_raises():
    history = ImageHistory()
    with pytest.raises(LookupError):
        history.lookup(0)


def test_zero_stamp_gives_newest():
    history = ImageHistory()
    for t in (1.0, 2.0, 3.0):
        history.add(_image(_flat(1.0), timestamp=t))
    assert history.lookup(0).timestamp == 3.0


def test_stamp_gives_oldest_not_after_it():
    history = ImageHistory()
    for t in (1.0, 2.0, 3.0):
        history.add(_image(_flat(1.0), timestamp=t))
    assert history.lookup(2.5).timestamp == 1.0
    with pytest.raises(LookupError):
        history.lookup(0.5)


def test_history_is_bounded():
    history = ImageHistory(capacity=3)
    for t in (1.0, 2.0, 3.0, 4.0, 5.0):
        history.add(_image(_flat(1.0), timestamp=t))
    assert len(history) == 3
    with pytest.raises(LookupError):
        history.lookup(2.0)
    assert history.lookup(3.0).timestamp == 3.0


def test_default_capacity():
    history = ImageHistory()
    image = _image(_flat(1.0))
    for _ in range(101):
        history.add(image)
    assert len(history) == 100


def test_frames_without_depth_are_skipped():
    history = ImageHistory()
    assert history.add(_image(None)) is False
    assert len(history) == 0


def test_history_stores_copies():
    history = ImageHistory()
    image = _image(_flat(1.0), timestamp=4.0)
    assert history.add(image) is True
    image.depth[:] = 9.0
    assert float(history.lookup(0).depth[0, 0]) == 1.0


def test_invalid_capacity():
    with pytest.raises(ValueError):
        ImageHistory(capacity=0)