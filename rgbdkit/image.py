"""An RGB-D frame: colour image, depth image, camera model, frame and time."""

from __future__ import annotations

import numpy as np

from .camera import CameraInfo, PinholeCameraModel

_DEPTH_TYPE_NAMES = {
    np.dtype(np.uint8): "8U",
    np.dtype(np.int8): "8S",
    np.dtype(np.uint16): "16U",
    np.dtype(np.int16): "16S",
    np.dtype(np.int32): "32S",
    np.dtype(np.float32): "32F",
    np.dtype(np.float64): "64F",
    np.dtype(np.float16): "16F",
}


def _type_string(array: np.ndarray | None) -> str:
    if array is None:
        return "CV_8UC1"
    channels = array.shape[2] if array.ndim == 3 else 1
    depth = _DEPTH_TYPE_NAMES.get(array.dtype, str(array.dtype))
    return f"CV_{depth}C{channels}"


def _size_string(array: np.ndarray | None) -> str:
    if array is None:
        return "0 x 0"
    return f"{array.shape[1]} x {array.shape[0]}"


def _same_bits(a: np.ndarray | None, b: np.ndarray | None) -> bool:
    if a is b:
        return True
    if a is None or b is None:
        return False
    if a.shape != b.shape or a.dtype != b.dtype:
        return False
    return a.tobytes() == b.tobytes()


def depth_mm_to_meters(depth: np.ndarray) -> np.ndarray:
    """Convert a 16-bit millimetre depth image to float32 metres.

    Images of any other type are returned unchanged.
    """
    if depth.dtype != np.uint16:
        return depth
    return depth.astype(np.float32) / np.float32(1000)


class Image:
    """One RGB-D frame."""

    def __init__(
        self,
        rgb: np.ndarray | None = None,
        depth: np.ndarray | None = None,
        camera_model: PinholeCameraModel | None = None,
        frame_id: str = "",
        timestamp: float = 0.0,
    ) -> None:
        self.rgb = rgb
        self.depth = depth
        self.frame_id = frame_id
        self.timestamp = float(timestamp)
        self.camera_model = PinholeCameraModel()
        if camera_model is not None:
            self.set_camera_model(camera_model)

    def set_camera_info(self, info: CameraInfo) -> None:
        """Set the camera model from a calibration."""
        self.camera_model.from_camera_info(info)

    def set_camera_model(self, model: PinholeCameraModel) -> None:
        """Take over the calibration of another model."""
        self.camera_model.from_camera_info(model.camera_info)

    def clone(self) -> "Image":
        """A deep copy of this frame."""
        image = Image(
            rgb=None if self.rgb is None else self.rgb.copy(),
            depth=None if self.depth is None else self.depth.copy(),
            frame_id=self.frame_id,
            timestamp=self.timestamp,
        )
        if self.camera_model.initialized:
            image.set_camera_model(self.camera_model)
        return image

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        if self.timestamp > 0 and abs(self.timestamp - other.timestamp) > 1e-9:
            return False
        if self.frame_id and self.frame_id != other.frame_id:
            return False
        if self.camera_model.camera_info != other.camera_model.camera_info:
            return False
        if not _same_bits(self.depth, other.depth):
            return False
        return _same_bits(self.rgb, other.rgb)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return (
            f"Depth: {_size_string(self.depth)}@({_type_string(self.depth)})\n"
            f"color: {_size_string(self.rgb)}@({_type_string(self.rgb)})\n"
            f"frame_id: {self.frame_id}\n"
            f"timestamp: {self.timestamp!r}\n"
            f"camera model: \n{self.camera_model.camera_info}"
        )

    def __repr__(self) -> str:
        return f"Image(frame_id={self.frame_id!r}, timestamp={self.timestamp!r})"