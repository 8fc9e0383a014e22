"""3D points from image regions of interest, over a history of frames."""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass

import numpy as np

from .image import Image

HISTORY_CAPACITY = 100


@dataclass(frozen=True)
class RegionOfInterest:
    """A rectangle in colour-image pixels."""

    x_offset: int = 0
    y_offset: int = 0
    height: int = 0
    width: int = 0
    do_rectify: bool = False


@dataclass(frozen=True)
class PointStamped:
    """A 3D point in a frame at a time."""

    frame_id: str
    stamp: float
    x: float
    y: float
    z: float


class ImageHistory:
    """A bounded buffer of recent frames that carry depth."""

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._images: deque[Image] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._images)

    def add(self, image: Image) -> bool:
        """Store a copy of a frame; frames without depth are not stored."""
        if image.depth is None:
            return False
        self._images.append(image.clone())
        return True

    def lookup(self, stamp: float) -> Image:
        """The frame to use for a request stamp.

        A stamp of 0 means the newest frame; otherwise the oldest stored
        frame whose timestamp is not after the stamp.
        """
        if self._images and stamp == 0:
            return self._images[-1]
        found = next((img for img in self._images if img.timestamp <= stamp), None)
        if found is None:
            raise LookupError(
                f"I could not find an images in my image buffer for timestamp {stamp:.2f}"
            )
        return found


def _scaled(x: int, y: int, factor: np.float32) -> tuple[int, int]:
    return (
        int(np.rint(np.float32(x) * factor)),
        int(np.rint(np.float32(y) * factor)),
    )


def _point(image: Image, roi: RegionOfInterest) -> PointStamped:
    depth = image.depth
    rows, cols = depth.shape[:2]
    ratio = np.float32(cols) / np.float32(image.rgb.shape[1])

    x1, y1 = _scaled(roi.x_offset, roi.y_offset, ratio)
    x2, y2 = _scaled(roi.x_offset + roi.width, roi.y_offset + roi.height, ratio)
    left, right = sorted((x1, x2))
    top, bottom = sorted((y1, y2))
    center_x = int(np.rint(0.5 * (left + right)))
    center_y = int(np.rint(0.5 * (top + bottom)))

    xa, xb = sorted((max(0, left), min(cols - 1, right)))
    ya, yb = sorted((max(0, top), min(rows - 1, bottom)))
    window = np.asarray(depth[ya:yb, xa:xb], dtype=np.float32).ravel()
    depths = np.sort(window[(window > 0) & ~np.isnan(window)])

    if depths.size == 0:
        return PointStamped(image.frame_id, image.timestamp, math.nan, math.nan, math.nan)

    median = float(depths[depths.size // 2])
    model = image.camera_model
    camera_width = model.full_resolution[0] or image.rgb.shape[1]
    scale = cols / camera_width
    ray = model.project_pixel_to_ray(center_x / scale, center_y / scale)
    x, y, z = (component * median for component in ray)
    return PointStamped(image.frame_id, image.timestamp, x, y, z)


def points_from_rois(image: Image, rois) -> list[PointStamped]:
    """3D points at the median valid depth of each region of interest.

    A region without any valid depth gives a point of NaN coordinates.
    """
    if image.depth is None or image.rgb is None:
        raise ValueError("image needs both a depth and a colour image")
    if not image.camera_model.initialized:
        raise ValueError("image has no camera model")
    return [_point(image, roi) for roi in rois]