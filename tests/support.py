"""Builders shared by the test modules."""

from pathlib import Path

import numpy as np
from PIL import Image

from strip_splitter.splitting import SplitSettings

DEFAULT_SETTINGS = SplitSettings(
    split_height=300,
    sensitivity=50,
    scan_line_step=5,
    ignorable_border=10,
)


def uniform_image(height: int, width: int = 50, value: int = 200) -> np.ndarray:
    """RGB buffer of a single colour."""
    return np.full((height, width, 3), value, dtype=np.uint8)


def mark_rows(buffer: np.ndarray, rows) -> np.ndarray:
    """Give the rows alternating black and white columns, so they are never safe."""
    for y in rows:
        buffer[y, :] = 0
        buffer[y, ::2] = 255
    return buffer


def striped_image(height: int, width: int = 50) -> np.ndarray:
    """Buffer where every row is unsafe at any sensitivity above 0."""
    return mark_rows(uniform_image(height, width), range(height))


def write_image(path: Path, buffer: np.ndarray) -> Path:
    Image.fromarray(buffer).save(path)
    return path


class FakeRedis:
    """In-memory stand-in for the few Redis calls the job service makes."""

    def __init__(self):
        self.store: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}

    def setex(self, key, ttl, value):
        self.store[key] = value.encode() if isinstance(value, str) else value
        self.ttls[key] = ttl
        return True

    def get(self, key):
        return self.store.get(key)

    def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0

    def scan_iter(self, pattern):
        prefix = pattern.rstrip("*")
        return [key for key in list(self.store) if key.startswith(prefix)]
