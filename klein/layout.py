"""Screen layout: splitting the terminal area into the editor's panels."""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """A rectangle of terminal cells."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Column just past the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Row just past the bottom edge."""
        return self.y + self.height

    @property
    def area(self) -> int:
        """Number of cells covered."""
        return self.width * self.height


class _Direction(enum.Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class _Kind(enum.Enum):
    LENGTH = "length"
    PERCENTAGE = "percentage"
    MIN = "min"
    FILL = "fill"


@dataclass(frozen=True)
class _Constraint:
    kind: _Kind
    value: int


def _length(n: int) -> _Constraint:
    return _Constraint(_Kind.LENGTH, n)


def _percentage(p: int) -> _Constraint:
    return _Constraint(_Kind.PERCENTAGE, p)


def _min(n: int) -> _Constraint:
    return _Constraint(_Kind.MIN, n)


def _fill(weight: int) -> _Constraint:
    return _Constraint(_Kind.FILL, weight)


def _sizes(total: int, constraints: list[_Constraint]) -> list[int]:
    """Share ``total`` cells out between the constraints.

    Fixed sizes are granted in order while space remains; what is left goes
    to the fill segments by weight, else to the last minimum, else to the
    last segment.
    """
    sizes: list[int] = []
    remaining = total
    for constraint in constraints:
        if constraint.kind is _Kind.LENGTH or constraint.kind is _Kind.MIN:
            wanted = constraint.value
        elif constraint.kind is _Kind.PERCENTAGE:
            # Round half away from zero.
            wanted = (total * constraint.value * 2 + 100) // 200
        else:
            wanted = 0
        granted = min(max(wanted, 0), remaining)
        sizes.append(granted)
        remaining -= granted

    if remaining <= 0 or not constraints:
        return sizes

    fills = [i for i, c in enumerate(constraints) if c.kind is _Kind.FILL]
    if fills:
        weights = [max(constraints[i].value, 0) for i in fills]
        weight_total = sum(weights)
        if weight_total == 0:
            weights = [1] * len(fills)
            weight_total = len(fills)
        given = 0
        for index, weight in zip(fills, weights):
            share = remaining * weight // weight_total
            sizes[index] += share
            given += share
        sizes[fills[-1]] += remaining - given
        return sizes

    mins = [i for i, c in enumerate(constraints) if c.kind is _Kind.MIN]
    target = mins[-1] if mins else len(constraints) - 1
    sizes[target] += remaining
    return sizes


def _split(area: Rect, direction: _Direction, constraints: list[_Constraint]) -> list[Rect]:
    if direction is _Direction.VERTICAL:
        rects = []
        y = area.y
        for size in _sizes(area.height, constraints):
            rects.append(Rect(area.x, y, area.width, size))
            y += size
        return rects
    rects = []
    x = area.x
    for size in _sizes(area.width, constraints):
        rects.append(Rect(x, area.y, size, area.height))
        x += size
    return rects


def get_main_layout(area: Rect, show_terminal: bool) -> list[Rect]:
    """Rows: menu bar, tab bar, workspace, terminal (10 rows when shown), status bar."""
    return _split(
        area,
        _Direction.VERTICAL,
        [
            _length(1),
            _length(1),
            _fill(1),
            _length(10 if show_terminal else 0),
            _length(1),
        ],
    )


def get_maximized_terminal_layout(area: Rect) -> list[Rect]:
    """Rows as in the main layout, with tabs and workspace hidden and the terminal filling."""
    return _split(
        area,
        _Direction.VERTICAL,
        [_length(1), _length(0), _length(0), _fill(1), _length(1)],
    )


def get_editor_layout(area: Rect, show_sidebar: bool) -> list[Rect]:
    """Columns: sidebar (30 wide when shown) and editor."""
    return _split(
        area,
        _Direction.HORIZONTAL,
        [_length(30 if show_sidebar else 0), _min(0)],
    )


def centered_rect(percent_x: int, percent_y: int, r: Rect) -> Rect:
    """A rectangle taking the given percentages of ``r``, centred within it."""
    margin_y = (100 - percent_y) // 2
    rows = _split(
        r,
        _Direction.VERTICAL,
        [_percentage(margin_y), _percentage(percent_y), _percentage(margin_y)],
    )
    margin_x = (100 - percent_x) // 2
    return _split(
        rows[1],
        _Direction.HORIZONTAL,
        [_percentage(margin_x), _percentage(percent_x), _percentage(margin_x)],
    )[1]