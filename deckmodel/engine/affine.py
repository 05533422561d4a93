"""2-D affine matrices for placing shapes.

Matrices use the row-vector convention::

    [x' y' 1] = [x y 1] * | a b 0 |
                          | c d 0 |
                          | e f 1 |

so ``x' = a*x + c*y + e`` and ``y' = b*x + d*y + f``. Positive angles rotate
clockwise on screen, where y grows downward.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class AffineMatrix:
    """An immutable 2-D linear map plus translation."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    def is_close(self, other: "AffineMatrix", tolerance: float = 1e-9) -> bool:
        """Compare two matrices within an absolute tolerance."""
        return all(
            math.isclose(mine, theirs, rel_tol=0.0, abs_tol=tolerance)
            for mine, theirs in zip(self.as_tuple(), other.as_tuple())
        )

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        """Return (a, b, c, d, e, f)."""
        return (self.a, self.b, self.c, self.d, self.e, self.f)


IDENTITY = AffineMatrix()


def identity() -> AffineMatrix:
    """The neutral element of composition."""
    return IDENTITY


def translate(tx: float, ty: float) -> AffineMatrix:
    """Translation by (tx, ty)."""
    return AffineMatrix(e=tx, f=ty)


def scale(sx: float, sy: float) -> AffineMatrix:
    """Scale about the origin."""
    return AffineMatrix(a=sx, d=sy)


def rotate(degrees: float) -> AffineMatrix:
    """Clockwise rotation about the origin."""
    radians = math.radians(degrees)
    cos = math.cos(radians)
    sin = math.sin(radians)
    return AffineMatrix(a=cos, b=sin, c=-sin, d=cos)


def compose(m1: AffineMatrix, m2: AffineMatrix) -> AffineMatrix:
    """Return ``m1 . m2``: apply m2 first, then m1."""
    return AffineMatrix(
        a=m2.a * m1.a + m2.b * m1.c,
        b=m2.a * m1.b + m2.b * m1.d,
        c=m2.c * m1.a + m2.d * m1.c,
        d=m2.c * m1.b + m2.d * m1.d,
        e=m2.e * m1.a + m2.f * m1.c + m1.e,
        f=m2.e * m1.b + m2.f * m1.d + m1.f,
    )


def compose_all(*matrices: AffineMatrix) -> AffineMatrix:
    """Compose left to right: ``compose_all(m1, m2, m3) == m1 . m2 . m3``."""
    result = IDENTITY
    for matrix in matrices:
        result = compose(result, matrix)
    return result


def rotate_about_point(degrees: float, cx: float, cy: float) -> AffineMatrix:
    """Clockwise rotation about (cx, cy)."""
    return compose_all(translate(cx, cy), rotate(degrees), translate(-cx, -cy))


def mirror_about_point(flip_h: bool, flip_v: bool, cx: float, cy: float) -> AffineMatrix:
    """Mirror horizontally and/or vertically about (cx, cy)."""
    return compose_all(
        translate(cx, cy),
        scale(-1.0 if flip_h else 1.0, -1.0 if flip_v else 1.0),
        translate(-cx, -cy),
    )


def apply_to_point(matrix: AffineMatrix, x: float, y: float) -> tuple[float, float]:
    """Transform a single point."""
    return (
        matrix.a * x + matrix.c * y + matrix.e,
        matrix.b * x + matrix.d * y + matrix.f,
    )


def apply_to_rect(
    matrix: AffineMatrix,
    x: float,
    y: float,
    width: float,
    height: float,
) -> tuple[float, float, float, float]:
    """Transform a rectangle and return the axis-aligned box of its corners.

    Rotated rectangles come back as their enclosing box, not as a rotated
    rectangle; callers keep the rotation angle separately.

    Returns:
        (x, y, width, height) of the bounding box.
    """
    corners = [
        apply_to_point(matrix, x, y),
        apply_to_point(matrix, x + width, y),
        apply_to_point(matrix, x, y + height),
        apply_to_point(matrix, x + width, y + height),
    ]
    xs = [point[0] for point in corners]
    ys = [point[1] for point in corners]
    left = min(xs)
    top = min(ys)
    return left, top, max(xs) - left, max(ys) - top
