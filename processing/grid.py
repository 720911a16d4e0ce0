"""
Conversion between the packed PixelBuffer and the 2D-indexable PixelGrid.

The packed buffer stores pixels row by row. The grid transposes that into
``[x][y]`` order so neighbor lookups such as "the pixel at (x-1, y+1)" are
plain indexing. No filtering happens here.
"""

from .buffer import PixelBuffer, PixelGrid


def buffer_to_grid(buffer: PixelBuffer) -> PixelGrid:
    """Move a buffer's pixels into a new grid.

    Ownership transfers to the grid: ``buffer`` is released and must not
    be used afterward.
    """
    cells = buffer.as_array().transpose(1, 0, 2).copy(order="C")
    grid = PixelGrid(cells)
    buffer.release()
    return grid


def grid_to_buffer(grid: PixelGrid) -> PixelBuffer:
    """Pack a grid into a freshly allocated buffer of the same dimensions."""
    rows = grid.cells.transpose(1, 0, 2).copy(order="C")
    return PixelBuffer(grid.width, grid.height, rows.reshape(-1))
