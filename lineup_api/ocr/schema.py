from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class BBox:
    """Axis-aligned pixel box, (x0, y0) top-left and (x1, y1) bottom-right."""

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    def union(self, other: "BBox") -> "BBox":
        return BBox(
            x0=min(self.x0, other.x0),
            y0=min(self.y0, other.y0),
            x1=max(self.x1, other.x1),
            y1=max(self.y1, other.y1),
        )

    @staticmethod
    def covering(boxes: Iterable["BBox"]) -> "BBox":
        it = iter(boxes)
        try:
            out = next(it)
        except StopIteration:
            raise ValueError("covering() needs at least one box") from None
        for b in it:
            out = out.union(b)
        return out

    def to_list(self) -> list[int]:
        return [self.x0, self.y0, self.x1, self.y1]


@dataclass(frozen=True)
class RawWord:
    text: str
    conf: float  # 0..100, engine scale
    bbox: BBox


@dataclass(frozen=True)
class Line:
    text: str
    conf: float  # mean of word confidences
    bbox: BBox

    @property
    def reading_key(self) -> tuple[int, int]:
        # top->bottom, then left->right
        return (self.bbox.y0, self.bbox.x0)
