# rgbdkit

A library for RGB-D frames. A frame holds a BGR colour image, a float32 depth
image in metres, the pinhole camera model that produced them, a frame id and
a timestamp. The package stores frames in a compact binary format, packs them
into wire messages, finds 3D points from regions of interest and decides which
transport a client should read from.

## Modules

- `rgbdkit.camera`: the frozen `CameraInfo` calibration record (`K`, `R`, `P`,
  `D`, size, binning and region of interest), `PinholeCameraModel` with
  `from_camera_info`, `initialized`, `fx`, `fy`, `cx`, `cy`, `Tx`, `Ty`,
  `full_resolution` and `project_pixel_to_ray`, and `pinhole_camera_info`,
  which builds a distortion-free plumb-bob calibration from
  `fx, fy, cx, cy, tx, ty, width, height`.
- `rgbdkit.image`: the `Image` frame with `clone`, `set_camera_info`,
  `set_camera_model` and value equality (timestamp, frame id, calibration and
  the exact bits of both images), plus `depth_mm_to_meters` for 16-bit
  millimetre depth maps.
- `rgbdkit.storage`: the `RGBStorageType` (`NONE`, `LOSSLESS`, `JPG`),
  `DepthStorageType` (`NONE`, `LOSSLESS`, `PNG`) and `CameraModelType`
  (`NONE`, `PINHOLE`) enums, and `parse_rgb_storage` / `parse_depth_storage`,
  which accept `"none"`, `"lossless"`, `"jpg"` and `"none"`, `"lossless"`,
  `"png"` and raise `ValueError` for anything else.
- `rgbdkit.archive`: `OutputArchive` and `InputArchive`, a little-endian
  binary stream of 32-bit ints, floats, doubles, length-prefixed UTF-8
  strings and raw bytes. Reading past the end raises `EOFError`.
- `rgbdkit.serialization`: `serialize(image, archive, rgb_type, depth_type)`
  and `deserialize(archive)`, with lossless or JPEG (quality 95) colour and
  lossless or quantized 16-bit PNG depth. The helpers `encode_jpeg`,
  `decode_image`, `quantize_depth` and `dequantize_depth` are public.
  Failures raise `SerializationError`.
- `rgbdkit.conversions`: the `ImageMessage` and `RGBDMessage` records,
  `image_to_message` and `image_to_message_with_camera` (crops or zero-pads
  to the camera resolution) for single images, and `message_from_image` /
  `image_from_message` for whole frames. Message version 1 carries JPEG
  colour and PNG inverse depth; version 2 a serialized frame; version 3 the
  same gzip-compressed; version 4 the same zstd-compressed.
- `rgbdkit.roi`: `ImageHistory` keeps up to 100 recent frames that carry
  depth; `lookup(0)` returns the newest, any other stamp the oldest frame not
  after it, and `LookupError` is raised when none fits. `points_from_rois`
  turns `RegionOfInterest` boxes (in colour pixels) into `PointStamped` 3D
  points at the median valid depth inside each box, or NaN coordinates when
  the box has no valid depth.
- `rgbdkit.options`: `parse_publish_options` turns arguments such as
  `--rgb`, `--depth`, `--rgbd`, `--pc` or `--all` into `PublishOptions`.
  With no recognised option, colour and depth are selected; `-h`/`--help`
  raises `UsageRequested` carrying `usage()`; an unknown `--` option raises
  `UnknownOption`; other arguments are listed in `ignored`.
- `rgbdkit.switching`: `TransportSelector` picks `TransportMode.SHM` while a
  host announcement naming this host arrived within three check cycles
  (3 / frequency seconds, 20 Hz by default), and `TransportMode.RGBD`
  otherwise.

## Examples

Building a frame and writing it to bytes:

```python
import numpy as np

from rgbdkit.archive import InputArchive, OutputArchive
from rgbdkit.camera import PinholeCameraModel, pinhole_camera_info
from rgbdkit.image import Image
from rgbdkit.serialization import deserialize, serialize
from rgbdkit.storage import parse_depth_storage, parse_rgb_storage

info = pinhole_camera_info(554.26, 554.26, 320.5, 240.5, 0.0, 0.0, 640, 480)
image = Image(
    rgb=np.zeros((480, 640, 3), dtype=np.uint8),
    depth=np.full((480, 640), 2.0, dtype=np.float32),
    camera_model=PinholeCameraModel(info),
    frame_id="camera",
    timestamp=12.5,
)

out = OutputArchive()
serialize(image, out, parse_rgb_storage("lossless"), parse_depth_storage("lossless"))
restored = deserialize(InputArchive(out.getvalue()))
assert restored == image
```

Lossless storage keeps the pixels exactly. The camera is stored by its
pinhole parameters and size only, so a frame whose calibration was built with
`pinhole_camera_info` compares equal after the round trip. A frame without a
camera model raises `SerializationError`.

Packing a frame into a zstd-compressed message and back:

```python
from rgbdkit.conversions import image_from_message, message_from_image

msg = message_from_image(image, version=4)
same = image_from_message(msg)
```

Choosing what to publish from command-line style arguments:

```python
from rgbdkit.options import UsageRequested, parse_publish_options

try:
    options = parse_publish_options(["--rgbd", "--pc"])
except UsageRequested as help_text:
    print(help_text)
```

## What the package does not do

rgbdkit is a library only. It installs no commands, runs no servers or
clients, does not open shared memory and does not publish or subscribe on
any network. `TransportSelector` only decides which transport to use; the
transports themselves, and the programs that would read frames from a camera
and publish them, are not part of the package.