"""Binary serialization of RGB-D images."""

from __future__ import annotations

import io

import numpy as np
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from .archive import InputArchive, OutputArchive
from .camera import pinhole_camera_info
from .image import Image
from .storage import CameraModelType, DepthStorageType, RGBStorageType

SERIALIZATION_VERSION = 2
JPEG_QUALITY = 95
PNG_COMPRESSION = 1

_DEPTH_Z0 = np.float32(100)
_DEPTH_MAX = np.float32(10)


class SerializationError(Exception):
    """Raised when an image cannot be written or read."""


def encode_jpeg(rgb: np.ndarray, quality: int = JPEG_QUALITY) -> bytes:
    """Compress a BGR colour image to JPEG."""
    if rgb.ndim != 3 or rgb.shape[2] != 3:
        raise SerializationError("RGB image compression failed: expected 3 channels")
    rgb_order = np.ascontiguousarray(rgb[..., ::-1], dtype=np.uint8)
    buffer = io.BytesIO()
    try:
        PILImage.fromarray(rgb_order, "RGB").save(buffer, "JPEG", quality=quality)
    except (OSError, ValueError) as exc:
        raise SerializationError(f"RGB image compression failed: {exc}") from exc
    return buffer.getvalue()


def _encode_png16(array: np.ndarray) -> bytes:
    data = np.ascontiguousarray(array, dtype="<u2")
    buffer = io.BytesIO()
    try:
        PILImage.fromarray(data, "I;16").save(
            buffer, "PNG", compress_level=PNG_COMPRESSION
        )
    except (OSError, ValueError) as exc:
        raise SerializationError(f"Depth image compression failed: {exc}") from exc
    return buffer.getvalue()


def decode_image(data: bytes) -> np.ndarray:
    """Decode a compressed image unchanged; colour images come back as BGR."""
    try:
        with PILImage.open(io.BytesIO(data)) as picture:
            picture.load()
            mode = picture.mode
            array = np.asarray(picture)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise SerializationError(f"could not decode image: {exc}") from exc
    if mode == "RGB":
        return np.ascontiguousarray(array[..., ::-1])
    if mode == "RGBA":
        return np.ascontiguousarray(array[..., [2, 1, 0, 3]])
    if mode.startswith("I;16") or mode == "I":
        return array.astype(np.uint16)
    return np.array(array)


def quantize_depth(depth: np.ndarray) -> tuple[np.ndarray, float, float]:
    """Quantize float depths (metres) to inverse 16-bit values.

    Returns the quantized image and the two quantization parameters.
    Depths that are NaN or not below the maximum depth become 0.
    """
    quant_a = _DEPTH_Z0 * (_DEPTH_Z0 + np.float32(1.0))
    quant_b = np.float32(1.0) - quant_a / _DEPTH_MAX
    values = np.asarray(depth, dtype=np.float32)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        valid = values < _DEPTH_MAX
        inverse = np.where(valid, quant_a / values + quant_b, np.float32(0))
        inverse = np.clip(np.nan_to_num(inverse, nan=0.0), 0, 65535)
    return inverse.astype(np.uint16), float(quant_a), float(quant_b)


def dequantize_depth(inverse: np.ndarray, quant_a: float, quant_b: float) -> np.ndarray:
    """Turn inverse 16-bit values back into float depths; 0 becomes NaN."""
    values = np.asarray(inverse).astype(np.float32)
    a = np.float32(quant_a)
    b = np.float32(quant_b)
    with np.errstate(divide="ignore", invalid="ignore"):
        depth = np.where(values != 0, a / (values - b), np.float32(np.nan))
    return depth.astype(np.float32)


def _checked(enum_type, value, what: str):
    try:
        return enum_type(value)
    except ValueError:
        raise SerializationError(f"Unsupported {what}: {value}") from None


def serialize(
    image: Image,
    archive: OutputArchive,
    rgb_type: RGBStorageType = RGBStorageType.LOSSLESS,
    depth_type: DepthStorageType = DepthStorageType.LOSSLESS,
) -> None:
    """Write an image to an archive with the given storage formats."""
    rgb_type = _checked(RGBStorageType, rgb_type, "RGB storage type")
    depth_type = _checked(DepthStorageType, depth_type, "depth storage type")

    model = image.camera_model
    if not model.initialized:
        raise SerializationError("rgbd.serialize: cam_model not initialized")

    rgb = image.rgb
    if rgb is None:
        rgb_type = RGBStorageType.NONE
    elif rgb.ndim != 3 or rgb.shape[2] != 3:
        raise SerializationError("RGB image must have three channels")

    depth = image.depth
    if depth is None:
        depth_type = DepthStorageType.NONE
    elif depth.ndim != 2:
        raise SerializationError("depth image must have one channel")

    archive.write_int(SERIALIZATION_VERSION)
    archive.write_string(image.frame_id)
    archive.write_double(image.timestamp)

    archive.write_int(CameraModelType.PINHOLE)
    archive.write_double(model.fx)
    archive.write_double(model.fy)
    archive.write_double(model.cx)
    archive.write_double(model.cy)
    archive.write_double(model.Tx)
    archive.write_double(model.Ty)
    width, height = model.full_resolution
    archive.write_int(width)
    archive.write_int(height)

    archive.write_int(rgb_type)
    if rgb_type is RGBStorageType.LOSSLESS:
        archive.write_int(rgb.shape[1])
        archive.write_int(rgb.shape[0])
        archive.write_bytes(np.ascontiguousarray(rgb, dtype=np.uint8).tobytes())
    elif rgb_type is RGBStorageType.JPG:
        data = encode_jpeg(rgb, JPEG_QUALITY)
        archive.write_int(len(data))
        archive.write_bytes(data)

    archive.write_int(depth_type)
    if depth_type is DepthStorageType.LOSSLESS:
        archive.write_int(depth.shape[1])
        archive.write_int(depth.shape[0])
        archive.write_bytes(np.ascontiguousarray(depth, dtype="<f4").tobytes())
    elif depth_type is DepthStorageType.PNG:
        inverse, quant_a, quant_b = quantize_depth(depth)
        archive.write_float(quant_a)
        archive.write_float(quant_b)
        data = _encode_png16(inverse)
        archive.write_int(len(data))
        archive.write_bytes(data)


def _read_size(archive: InputArchive) -> tuple[int, int]:
    width = archive.read_int()
    height = archive.read_int()
    if width < 0 or height < 0:
        raise SerializationError(f"invalid image size {width} x {height}")
    return width, height


def deserialize(archive: InputArchive) -> Image:
    """Read an image written by serialize()."""
    version = archive.read_int()
    image = Image(frame_id=archive.read_string(), timestamp=archive.read_double())

    cam_type = archive.read_int()
    if cam_type == CameraModelType.PINHOLE:
        fx, fy = archive.read_double(), archive.read_double()
        cx, cy = archive.read_double(), archive.read_double()
        tx, ty = archive.read_double(), archive.read_double()
        width = height = 0
        if version >= 2:
            width, height = archive.read_int(), archive.read_int()
        image.set_camera_info(
            pinhole_camera_info(fx, fy, cx, cy, tx, ty, width, height)
        )
    elif cam_type != CameraModelType.NONE:
        raise SerializationError(
            f"rgbd.deserialize: Unsupported camera model: {cam_type}"
        )

    rgb_type = archive.read_int()
    if rgb_type == RGBStorageType.LOSSLESS:
        width, height = _read_size(archive)
        data = archive.read_bytes(width * height * 3)
        image.rgb = np.frombuffer(data, dtype=np.uint8).reshape(height, width, 3).copy()
    elif rgb_type == RGBStorageType.JPG:
        size = archive.read_int()
        image.rgb = decode_image(archive.read_bytes(size))
    elif rgb_type != RGBStorageType.NONE:
        raise SerializationError(
            f"rgbd.deserialize: Unsupported rgb storage format: {rgb_type}"
        )

    depth_type = archive.read_int()
    if depth_type == DepthStorageType.LOSSLESS:
        width, height = _read_size(archive)
        data = archive.read_bytes(width * height * 4)
        image.depth = (
            np.frombuffer(data, dtype="<f4").reshape(height, width).astype(np.float32)
        )
    elif depth_type == DepthStorageType.PNG:
        quant_a = archive.read_float()
        quant_b = archive.read_float()
        size = archive.read_int()
        decompressed = decode_image(archive.read_bytes(size))
        if decompressed.ndim != 2:
            raise SerializationError("compressed depth image must have one channel")
        image.depth = dequantize_depth(decompressed, quant_a, quant_b)
    elif depth_type != DepthStorageType.NONE:
        raise SerializationError(
            f"rgbd.deserialize: Unsupported depth storage format: {depth_type}"
        )

    return image