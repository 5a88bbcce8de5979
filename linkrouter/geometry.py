"""Window geometry for the browser picker."""

from __future__ import annotations

from dataclasses import dataclass

WINDOW_BORDER_WIDTH = 1.0
PADDING_X = 5.0
PADDING_Y = 10.0
ITEM_WIDTH = 210.0
ITEM_HEIGHT = 32.0
MAX_VISIBLE_ITEMS = 6
SCREEN_MARGIN = 5.0


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its two corners."""

    x0: float
    y0: float
    x1: float
    y1: float

    def inflate(self, dx: float, dy: float) -> Rect:
        """Grow the rectangle by ``dx`` and ``dy`` on each side (shrink if negative)."""
        return Rect(self.x0 - dx, self.y0 - dy, self.x1 + dx, self.y1 + dy)


def calculate_visible_browser_count(browsers_total: int) -> int:
    """Number of rows shown without scrolling: at most six, at least one."""
    return max(1, min(MAX_VISIBLE_ITEMS, browsers_total))


def calculate_window_size(item_count: int) -> Size:
    width = ITEM_WIDTH + PADDING_X * 2.0 + WINDOW_BORDER_WIDTH * 2.0
    scroll_area_height = item_count * ITEM_HEIGHT
    height = scroll_area_height + 5.0 + 12.0 + PADDING_Y * 2.0 + 10.0
    return Size(width, height)


def recalculate_window_size(browser_count: int) -> Size:
    return calculate_window_size(calculate_visible_browser_count(browser_count))


def calculate_window_position(
    mouse_position: Point, screen_rect: Rect, window_size: Size
) -> Point:
    """Place the window at the mouse, pushed back inside the screen if needed."""
    x, y = mouse_position.x, mouse_position.y

    if x < screen_rect.x0:
        x = screen_rect.x0
    if x + window_size.width > screen_rect.x1:
        x = screen_rect.x1 - window_size.width

    if y < screen_rect.y0:
        y = screen_rect.y0
    if y + window_size.height > screen_rect.y1:
        y = screen_rect.y1 - window_size.height

    return Point(x, y)


def main_window_frame(
    browser_count: int, mouse_position: Point, screen_rect: Rect
) -> tuple[Size, Point]:
    """Size and position of the main window for the given screen work area."""
    usable = screen_rect.inflate(-SCREEN_MARGIN, -SCREEN_MARGIN)
    size = recalculate_window_size(browser_count)
    return size, calculate_window_position(mouse_position, usable, size)