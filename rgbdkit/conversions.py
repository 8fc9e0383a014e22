"""Conversions between RGB-D images and transport messages."""

from __future__ import annotations

import gzip
import io
import sys
import zlib
from dataclasses import dataclass

import numpy as np
import zstandard
from PIL import Image as PILImage

from .archive import InputArchive, OutputArchive
from .camera import CameraInfo, pinhole_camera_info
from .image import Image
from .serialization import (
    SerializationError,
    decode_image,
    deserialize,
    dequantize_depth,
    encode_jpeg,
    quantize_depth,
    serialize,
)
from .storage import DepthStorageType, RGBStorageType

DEPTH_ENCODING = "32FC1"
RGB_ENCODING = "bgr8"
_PNG_COMPRESSION = 1


@dataclass(frozen=True)
class ImageMessage:
    """A raw image as it travels over the wire."""

    height: int
    width: int
    encoding: str
    is_bigendian: int
    step: int
    data: bytes
    frame_id: str = ""
    stamp: float = 0.0


@dataclass(frozen=True)
class RGBDMessage:
    """A combined colour and depth message.

    Version 1 carries a JPEG colour image, a PNG inverse-depth image, the two
    depth quantization parameters and the pinhole parameters
    (fx, fy, cx, cy, Tx, Ty). Versions 2 to 4 carry a serialized image in
    ``rgb``: plain, gzip-compressed or zstd-compressed respectively.
    """

    version: int
    rgb: bytes = b""
    depth: bytes = b""
    params: tuple[float, ...] = ()
    cam_info: tuple[float, ...] = ()
    frame_id: str = ""
    stamp: float = 0.0


def _encoding(array: np.ndarray) -> str:
    if array.dtype == np.float32 and array.ndim == 2:
        return DEPTH_ENCODING
    if array.dtype == np.uint8 and array.ndim == 3 and array.shape[2] == 3:
        return RGB_ENCODING
    raise ValueError(
        f"unsupported image type: dtype {array.dtype}, shape {array.shape}"
    )


def _to_message(array: np.ndarray, encoding: str) -> ImageMessage:
    data = np.ascontiguousarray(array)
    height, width = data.shape[:2]
    return ImageMessage(
        height=height,
        width=width,
        encoding=encoding,
        is_bigendian=int(sys.byteorder == "big"),
        step=width * data.itemsize * (data.shape[2] if data.ndim == 3 else 1),
        data=data.tobytes(),
    )


def image_to_message(array: np.ndarray) -> ImageMessage:
    """Wrap a float32 depth image or a BGR colour image in a message."""
    return _to_message(array, _encoding(array))


def image_to_message_with_camera(array: np.ndarray, info: CameraInfo) -> ImageMessage:
    """Wrap an image in a message sized to the camera's resolution.

    The image is cropped where it is larger and padded with zeros where it
    is smaller than the camera resolution.
    """
    encoding = _encoding(array)
    shape = (info.height, info.width) + array.shape[2:]
    fitted = np.zeros(shape, dtype=array.dtype)
    rows = min(info.height, array.shape[0])
    cols = min(info.width, array.shape[1])
    fitted[:rows, :cols] = array[:rows, :cols]
    return _to_message(fitted, encoding)


def _encode_png16(array: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    data = np.ascontiguousarray(array, dtype="<u2")
    try:
        PILImage.fromarray(data, "I;16").save(
            buffer, "PNG", compress_level=_PNG_COMPRESSION
        )
    except (OSError, ValueError) as exc:
        raise SerializationError(f"Depth image compression failed: {exc}") from exc
    return buffer.getvalue()


def _version1_message(image: Image) -> RGBDMessage:
    model = image.camera_model
    if not model.initialized:
        raise SerializationError("camera model not initialized")
    if image.rgb is None or image.depth is None:
        raise SerializationError("version 1 messages need both rgb and depth images")
    inverse, quant_a, quant_b = quantize_depth(image.depth)
    return RGBDMessage(
        version=1,
        rgb=encode_jpeg(image.rgb),
        depth=_encode_png16(inverse),
        params=(quant_a, quant_b),
        cam_info=(model.fx, model.fy, model.cx, model.cy, model.Tx, model.Ty),
        frame_id=image.frame_id,
        stamp=image.timestamp,
    )


def message_from_image(
    image: Image,
    version: int = 2,
    rgb_type: RGBStorageType = RGBStorageType.LOSSLESS,
    depth_type: DepthStorageType = DepthStorageType.LOSSLESS,
) -> RGBDMessage:
    """Pack an image into a message of the given version.

    The storage types apply to versions 2 to 4; version 1 always uses JPEG
    colour and PNG depth.
    """
    if version == 1:
        return _version1_message(image)
    if version not in (2, 3, 4):
        raise SerializationError(f"convert: version '{version}' not supported")
    archive = OutputArchive()
    serialize(image, archive, rgb_type, depth_type)
    payload = archive.getvalue()
    if version == 3:
        payload = gzip.compress(payload)
    elif version == 4:
        payload = zstandard.ZstdCompressor().compress(payload)
    return RGBDMessage(
        version=version, rgb=payload, frame_id=image.frame_id, stamp=image.timestamp
    )


def _image_from_version1(msg: RGBDMessage) -> Image:
    if len(msg.params) < 2 or len(msg.cam_info) < 6:
        raise SerializationError("version 1 message lacks depth or camera parameters")
    rgb = decode_image(msg.rgb)
    decompressed = decode_image(msg.depth)
    depth = dequantize_depth(
        decompressed, np.float32(msg.params[0]), np.float32(msg.params[1])
    )
    fx, fy, cx, cy, tx, ty = msg.cam_info[:6]
    image = Image(rgb=rgb, depth=depth, frame_id=msg.frame_id, timestamp=msg.stamp)
    image.set_camera_info(
        pinhole_camera_info(fx, fy, cx, cy, tx, ty, rgb.shape[1], rgb.shape[0])
    )
    return image


def _decompress(msg: RGBDMessage) -> bytes:
    try:
        if msg.version == 3:
            return gzip.decompress(msg.rgb)
        if msg.version == 4:
            return zstandard.ZstdDecompressor().decompressobj().decompress(msg.rgb)
    except (OSError, EOFError, zlib.error, zstandard.ZstdError) as exc:
        raise SerializationError(f"could not decompress message: {exc}") from exc
    return msg.rgb


def image_from_message(msg: RGBDMessage) -> Image:
    """Unpack an image from a message of any supported version."""
    if msg.version == 1:
        return _image_from_version1(msg)
    if msg.version not in (2, 3, 4):
        raise SerializationError(f"convert: version '{msg.version}' not supported")
    try:
        return deserialize(InputArchive(_decompress(msg)))
    except EOFError as exc:
        raise SerializationError(f"truncated message: {exc}") from exc