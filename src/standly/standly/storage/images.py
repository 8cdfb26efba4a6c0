from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class CropBox:
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["CropBox"]:
        if not data:
            return None
        try:
            return cls(
                x=int(round(float(data["x"]))),
                y=int(round(float(data["y"]))),
                width=int(round(float(data["width"]))),
                height=int(round(float(data["height"]))),
            )
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Invalid crop area")


def decode_image(data: bytes) -> np.ndarray:
    nparr = np.frombuffer(data, np.uint8)
    img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValidationError("Invalid image")

    # RGBA (4 channels) -> BGR
    if len(img.shape) == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    # Grayscale (1 channel) -> BGR
    elif len(img.shape) == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

    return np.ascontiguousarray(img, dtype=np.uint8)


def crop_image(img: np.ndarray, box: Optional[CropBox]) -> np.ndarray:
    """Crop ``box`` clamped to the image; no box means a centered square."""
    h, w = img.shape[:2]
    if box is None:
        side = min(h, w)
        box = CropBox(x=(w - side) // 2, y=(h - side) // 2, width=side, height=side)

    x0 = min(max(box.x, 0), w - 1)
    y0 = min(max(box.y, 0), h - 1)
    x1 = min(max(box.x + box.width, x0 + 1), w)
    y1 = min(max(box.y + box.height, y0 + 1), h)
    return img[y0:y1, x0:x1]


def crop_avatar(data: bytes, box: Optional[CropBox] = None, *, size: int = 256) -> bytes:
    """Decode, crop and re-encode an uploaded avatar as a ``size`` x ``size`` PNG."""
    cropped = crop_image(decode_image(data), box)
    resized = cv2.resize(cropped, (size, size), interpolation=cv2.INTER_AREA)
    ok, buf = cv2.imencode(".png", resized)
    if not ok:
        raise ValidationError("Could not encode image")
    return buf.tobytes()
