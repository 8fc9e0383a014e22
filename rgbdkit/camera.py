"""Pinhole camera description and model."""

from __future__ import annotations

from dataclasses import dataclass, field

PLUMB_BOB = "plumb_bob"


def _floats(values, length: int | None, name: str) -> tuple[float, ...]:
    result = tuple(float(v) for v in values)
    if length is not None and len(result) != length:
        raise ValueError(f"{name} must hold {length} values, got {len(result)}")
    return result


@dataclass(frozen=True)
class CameraInfo:
    """Calibration of a camera: intrinsics, rectification and projection."""

    width: int = 0
    height: int = 0
    distortion_model: str = ""
    D: tuple[float, ...] = ()
    K: tuple[float, ...] = field(default=(0.0,) * 9)
    R: tuple[float, ...] = field(default=(0.0,) * 9)
    P: tuple[float, ...] = field(default=(0.0,) * 12)
    binning_x: int = 0
    binning_y: int = 0
    roi_x_offset: int = 0
    roi_y_offset: int = 0
    roi_height: int = 0
    roi_width: int = 0
    roi_do_rectify: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "D", _floats(self.D, None, "D"))
        object.__setattr__(self, "K", _floats(self.K, 9, "K"))
        object.__setattr__(self, "R", _floats(self.R, 9, "R"))
        object.__setattr__(self, "P", _floats(self.P, 12, "P"))
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))


def pinhole_camera_info(fx, fy, cx, cy, tx, ty, width, height) -> CameraInfo:
    """Build a distortion-free plumb-bob calibration from pinhole parameters."""
    k = [0.0] * 9
    k[0], k[2], k[4], k[5], k[8] = fx, cx, fy, cy, 1.0
    r = [0.0] * 9
    r[0] = r[4] = r[8] = 1.0
    p = [0.0] * 12
    p[0], p[2], p[3], p[5], p[6], p[7], p[10] = fx, cx, tx, fy, cy, ty, 1.0
    return CameraInfo(
        width=width,
        height=height,
        distortion_model=PLUMB_BOB,
        D=(0.0,) * 5,
        K=k,
        R=r,
        P=p,
    )


class PinholeCameraModel:
    """A pinhole camera model, initialized from a CameraInfo."""

    def __init__(self, info: CameraInfo | None = None) -> None:
        self._info: CameraInfo | None = None
        if info is not None:
            self.from_camera_info(info)

    def from_camera_info(self, info: CameraInfo) -> None:
        """Set the model from a calibration."""
        if not isinstance(info, CameraInfo):
            raise TypeError("camera info must be a CameraInfo")
        self._info = info

    @property
    def initialized(self) -> bool:
        return self._info is not None

    @property
    def camera_info(self) -> CameraInfo:
        """The calibration, or an empty one when the model is not initialized."""
        return self._info if self._info is not None else CameraInfo()

    def _require(self) -> CameraInfo:
        if self._info is None:
            raise RuntimeError("camera model is not initialized")
        return self._info

    @property
    def fx(self) -> float:
        return self._require().P[0]

    @property
    def fy(self) -> float:
        return self._require().P[5]

    @property
    def cx(self) -> float:
        return self._require().P[2]

    @property
    def cy(self) -> float:
        return self._require().P[6]

    @property
    def Tx(self) -> float:
        return self._require().P[3]

    @property
    def Ty(self) -> float:
        return self._require().P[7]

    @property
    def full_resolution(self) -> tuple[int, int]:
        """(width, height) of the calibrated sensor."""
        info = self._require()
        return info.width, info.height

    def project_pixel_to_ray(self, u: float, v: float) -> tuple[float, float, float]:
        """Ray through pixel (u, v) in the camera frame, with z = 1."""
        x = (u - self.cx - self.Tx) / self.fx
        y = (v - self.cy - self.Ty) / self.fy
        return x, y, 1.0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PinholeCameraModel):
            return NotImplemented
        return self._info == other._info

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PinholeCameraModel({self._info!r})"