"""Storage formats for colour and depth images and camera model kinds."""

from __future__ import annotations

from enum import IntEnum


class RGBStorageType(IntEnum):
    NONE = 0
    LOSSLESS = 1
    JPG = 2


class DepthStorageType(IntEnum):
    NONE = 0
    LOSSLESS = 1
    PNG = 2


class CameraModelType(IntEnum):
    NONE = 0
    PINHOLE = 1


_RGB_NAMES = {
    "none": RGBStorageType.NONE,
    "lossless": RGBStorageType.LOSSLESS,
    "jpg": RGBStorageType.JPG,
}

_DEPTH_NAMES = {
    "none": DepthStorageType.NONE,
    "lossless": DepthStorageType.LOSSLESS,
    "png": DepthStorageType.PNG,
}


def parse_rgb_storage(name: str) -> RGBStorageType:
    """Colour storage type for a name: 'none', 'lossless' or 'jpg'."""
    try:
        return _RGB_NAMES[name]
    except KeyError:
        raise ValueError(
            "Unknown 'rgb_storage' type: should be 'none', 'lossless', or 'jpg'."
        ) from None


def parse_depth_storage(name: str) -> DepthStorageType:
    """Depth storage type for a name: 'none', 'lossless' or 'png'."""
    try:
        return _DEPTH_NAMES[name]
    except KeyError:
        raise ValueError(
            "Unknown 'depth_storage' type: should be 'none', 'lossless', or 'png'."
        ) from None