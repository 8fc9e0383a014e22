"""Command-line options that choose what an RGB-D bridge publishes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

PROGRAM = "rgbd_to_ros"


class UsageRequested(Exception):
    """Raised when help is asked for; the message is the usage text."""


class UnknownOption(ValueError):
    """Raised for an unrecognised long option."""

    def __init__(self, option: str) -> None:
        super().__init__(f"[{PROGRAM}] Unknown option: '{option}'.")
        self.option = option


@dataclass(frozen=True)
class PublishOptions:
    """Which streams to publish, and the arguments that were ignored."""

    rgb: bool = False
    depth: bool = False
    pointcloud: bool = False
    ignored: tuple[str, ...] = ()


def usage() -> str:
    """The help text."""
    return "\n".join(
        [
            f"Usage: {PROGRAM} [OPTIONS]",
            "    If no valid options are provided, rgb and depth images and camera info will be published",
            "Options:",
            "    -h, --help:         show this message",
            "    -a, --all:          publish rgb, depth and pointcloud",
            "    --rgb, --color:     publish rgb image and camera info",
            "    --depth:            publish depth image and camera info",
            "    --rgbd:             publish rgb and depth images and camera info",
            "    --pc, --pointcloud: publish pointcloud",
        ]
    )


_FLAGS = {
    "-a": {"rgb", "depth", "pointcloud"},
    "--all": {"rgb", "depth", "pointcloud"},
    "--rgb": {"rgb"},
    "--color": {"rgb"},
    "--depth": {"depth"},
    "--rgbd": {"rgb", "depth"},
    "--pc": {"pointcloud"},
    "--pointcloud": {"pointcloud"},
}


def parse_publish_options(args: Iterable[str]) -> PublishOptions:
    """Parse arguments (without the program name) into publish options.

    Without any valid option, rgb and depth are published. Unknown long
    options raise UnknownOption; other unknown arguments are ignored.
    """
    selected: set[str] = set()
    ignored: list[str] = []
    valid_arg_provided = False
    for opt in args:
        if opt in ("-h", "--help"):
            raise UsageRequested(usage())
        if opt in _FLAGS:
            selected |= _FLAGS[opt]
            valid_arg_provided = True
        elif opt.startswith("--"):
            raise UnknownOption(opt)
        else:
            ignored.append(opt)
    if not valid_arg_provided:
        selected = {"rgb", "depth"}
    return PublishOptions(
        rgb="rgb" in selected,
        depth="depth" in selected,
        pointcloud="pointcloud" in selected,
        ignored=tuple(ignored),
    )