"""Connector routing geometry.

Pure functions over plain rectangles; no Qt, no model mutation.

A connector leaves the right-edge midpoint of the source box and enters the
left-edge midpoint of the target box.  It is drawn as two quadratic segments
meeting halfway along a vertical run at mid_x, which gives a smooth S-curve:

    source ──╮
             │   (mid_x, my)
             ╰── target

    M sx sy  Q mid_x sy  mid_x my  Q mid_x ty  tx ty
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .graph_model import GraphConnection


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box, container-relative."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.right and self.y <= py <= self.bottom


@dataclass(frozen=True)
class ConnectorPath:
    """Two-segment quadratic curve from (sx, sy) to (tx, ty)."""
    conn_id: str
    sx: float
    sy: float
    tx: float
    ty: float

    @property
    def mid_x(self) -> float:
        return (self.sx + self.tx) / 2

    @property
    def mid_y(self) -> float:
        return (self.sy + self.ty) / 2

    def segments(self) -> list[tuple[tuple[float, float], tuple[float, float], tuple[float, float]]]:
        """[(start, control, end), (start, control, end)]"""
        mx, my = self.mid_x, self.mid_y
        return [
            ((self.sx, self.sy), (mx, self.sy), (mx, my)),
            ((mx, my), (mx, self.ty), (self.tx, self.ty)),
        ]

    def to_svg(self) -> str:
        mx, my = self.mid_x, self.mid_y
        return (f"M {_fmt(self.sx)} {_fmt(self.sy)} "
                f"Q {_fmt(mx)} {_fmt(self.sy)} {_fmt(mx)} {_fmt(my)} "
                f"Q {_fmt(mx)} {_fmt(self.ty)} {_fmt(self.tx)} {_fmt(self.ty)}")

    def point_at(self, t: float) -> tuple[float, float]:
        """Point on the whole curve, t in [0, 1] (first half = first segment)."""
        t = max(0.0, min(1.0, t))
        seg = self.segments()[0 if t < 0.5 else 1]
        u = t * 2 if t < 0.5 else t * 2 - 1
        return _quad(seg, u)

    def distance_to(self, px: float, py: float, samples: int = 30) -> float:
        """Approximate minimum distance from (px, py) to the curve."""
        best = float("inf")
        for i in range(samples + 1):
            bx, by = self.point_at(i / samples)
            d = ((px - bx) ** 2 + (py - by) ** 2) ** 0.5
            if d < best:
                best = d
        return best


def _quad(seg, u: float) -> tuple[float, float]:
    (x0, y0), (cx, cy), (x1, y1) = seg
    mu = 1 - u
    return (mu * mu * x0 + 2 * mu * u * cx + u * u * x1,
            mu * mu * y0 + 2 * mu * u * cy + u * u * y1)


def _fmt(v: float) -> str:
    # 450.0 → "450", 12.5 → "12.5"
    return f"{v:g}"


# ---------------------------------------------------------------------------
# Anchors
# ---------------------------------------------------------------------------

def source_anchor(box: Rect) -> tuple[float, float]:
    return (box.right, box.y + box.height / 2)


def target_anchor(box: Rect) -> tuple[float, float]:
    return (box.x, box.y + box.height / 2)


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------

def route(conn_id: str, from_box: Rect, to_box: Rect) -> ConnectorPath:
    sx, sy = source_anchor(from_box)
    tx, ty = target_anchor(to_box)
    return ConnectorPath(conn_id, sx, sy, tx, ty)


def route_all(connections: Iterable[GraphConnection],
              box_for: Callable[[str], Optional[Rect]]) -> list[ConnectorPath]:
    """Route every connection whose two endpoints resolve to a box.

    box_for(node_id) returns the node's current rendered box, or None for a
    node that no longer exists; such connections are skipped.  Paths are
    always built from scratch; nothing is cached between calls.
    """
    paths = []
    for conn in connections:
        src = box_for(conn.from_node)
        dst = box_for(conn.to_node)
        if src is None or dst is None:
            continue
        paths.append(route(conn.id, src, dst))
    return paths
