"""
Predefined Barrier Shapes

Named obstacles stored as flat coordinate-pair lists (x0, y0, x1, y1, ...).
Coordinates are laid out for a 200 x 80 tunnel with the obstacle centred
at (40, 40); pairs that fall outside a smaller grid are simply skipped when
the shape is placed.

Shapes are referenced by 1-based index, as in the shape menu.
"""

import json

import numpy as np

NOMINAL_CX = 40
NOMINAL_CY = 40


class BarrierShape:
    """
    A named barrier shape.

    Parameters
    ----------
    name : str
        Display name
    locations : sequence of int
        Flat coordinate pairs (x0, y0, x1, y1, ...)
    """

    def __init__(self, name, locations):
        locations = tuple(int(v) for v in locations)
        if len(locations) % 2:
            raise ValueError(f"locations must hold (x, y) pairs, got {len(locations)} values")
        self.name = name
        self.locations = locations

    def __len__(self):
        return len(self.locations) // 2

    def pairs(self):
        """Iterate over the (x, y) pairs."""
        locs = self.locations
        for i in range(0, len(locs), 2):
            yield locs[i], locs[i + 1]

    def to_dict(self):
        return {"name": self.name, "locations": list(self.locations)}

    def __repr__(self):
        return f"BarrierShape({self.name!r}, {len(self)} cells)"


def _flatten(cells):
    """Deduplicate (x, y) cells, keep first-seen order, and flatten."""
    seen = set()
    flat = []
    for x, y in cells:
        key = (int(x), int(y))
        if key not in seen:
            seen.add(key)
            flat.extend(key)
    return flat


def _line(x0, y0, x1, y1):
    """Cells along a straight segment, one per step of the longer axis."""
    n = max(abs(x1 - x0), abs(y1 - y0)) + 1
    xs = np.rint(np.linspace(x0, x1, n)).astype(int)
    ys = np.rint(np.linspace(y0, y1, n)).astype(int)
    return list(zip(xs, ys))


def _disc(cx, cy, radius):
    """Cells of a filled circle."""
    r = int(np.ceil(radius))
    X, Y = np.meshgrid(np.arange(cx - r, cx + r + 1), np.arange(cy - r, cy + r + 1))
    mask = (X - cx) ** 2 + (Y - cy) ** 2 <= radius * radius
    return list(zip(X[mask], Y[mask]))


def _wedge(tip_x, cy, length, half_height):
    """Filled wedge pointing upstream, tip at (tip_x, cy)."""
    cells = []
    for dx in range(length + 1):
        h = int(round(half_height * dx / length))
        for dy in range(-h, h + 1):
            cells.append((tip_x + dx, cy + dy))
    return cells


def _airfoil(lead_x, cy, chord, thickness=0.12, angle_deg=-8.0):
    """
    Filled symmetric NACA 4-digit profile, rotated about the leading edge.

    A negative angle tilts the trailing edge down (positive lift for flow along +x).
    """
    xi = np.linspace(0.0, 1.0, 4 * chord + 1)
    half = 5.0 * thickness * chord * (0.2969 * np.sqrt(xi) - 0.1260 * xi
                                      - 0.3516 * xi ** 2 + 0.2843 * xi ** 3
                                      - 0.1015 * xi ** 4)
    theta = np.radians(angle_deg)
    cos_t, sin_t = np.cos(theta), np.sin(theta)

    cells = []
    for s, h in zip(xi * chord, half):
        for t in np.arange(-h, h + 0.25, 0.25):
            x = lead_x + s * cos_t - t * sin_t
            y = cy + s * sin_t + t * cos_t
            cells.append((int(round(x)), int(round(y))))
    return cells


def _build_shapes(cx=NOMINAL_CX, cy=NOMINAL_CY):
    return [
        BarrierShape("Short line", _flatten(_line(cx, cy - 8, cx, cy + 8))),
        BarrierShape("Long line", _flatten(_line(cx, cy - 20, cx, cy + 20))),
        BarrierShape("Diagonal", _flatten(_line(cx - 10, cy - 10, cx + 10, cy + 10))),
        BarrierShape("Shallow diagonal", _flatten(_line(cx - 15, cy - 5, cx + 15, cy + 5))),
        BarrierShape("Small circle", _flatten(_disc(cx, cy, 5))),
        BarrierShape("Large circle", _flatten(_disc(cx, cy, 12))),
        BarrierShape("Line with spoiler",
                     _flatten(_line(cx, cy - 10, cx, cy + 10) + _line(cx + 1, cy, cx + 12, cy))),
        BarrierShape("Circle with spoiler",
                     _flatten(_disc(cx, cy, 8) + _line(cx + 9, cy, cx + 20, cy))),
        BarrierShape("Right angle",
                     _flatten(_line(cx, cy - 10, cx, cy + 10) + _line(cx + 1, cy + 10, cx + 14, cy + 10))),
        BarrierShape("Wedge", _flatten(_wedge(cx - 10, cy, 20, 8))),
        BarrierShape("Airfoil", _flatten(_airfoil(cx - 10, cy, 30))),
    ]


BARRIER_SHAPES = _build_shapes()


def get_shape(index, shapes=None):
    """
    Look up a shape by 1-based index.

    Returns
    -------
    shape : BarrierShape or None
        None if the index is out of range
    """
    shapes = BARRIER_SHAPES if shapes is None else shapes
    if 1 <= index <= len(shapes):
        return shapes[index - 1]
    return None


def barrier_locations(barrier):
    """
    Flat coordinate pairs of every barrier cell off the one-cell border,
    in row-major order.
    """
    interior = np.zeros(barrier.shape, dtype=bool)
    interior[1:-1, 1:-1] = barrier[1:-1, 1:-1] != 0
    ys, xs = np.nonzero(interior)
    return [int(v) for pair in zip(xs, ys) for v in pair]


def shape_from_barrier(barrier, name="Barrier locations"):
    """Capture the current barrier map as a BarrierShape."""
    return BarrierShape(name, barrier_locations(barrier))


def shapes_to_json(shapes):
    """Serialize a list of shapes to a JSON string."""
    return json.dumps([shape.to_dict() for shape in shapes], indent=1)


def save_shapes(shapes, path):
    with open(path, "w") as fh:
        fh.write(shapes_to_json(shapes))


def load_shapes(path):
    """
    Read shapes written by save_shapes.

    Returns
    -------
    shapes : list of BarrierShape
    """
    with open(path) as fh:
        data = json.load(fh)
    return [BarrierShape(item["name"], item["locations"]) for item in data]
