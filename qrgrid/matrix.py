"""
QR module matrix construction.

The matrix is built in a fixed order: finder patterns and separators,
timing patterns, alignment patterns, then (standard profile only)
format and version information. Each of these stamps writes only cells
that are still unset, so a function module is never overwritten. Data
bits are then threaded through the remaining cells in the zigzag order
and, for the standard profile, a mask is applied to the data cells.

Classes
-------
ModuleMatrix
    Mutable construction grid for one symbol.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Sequence

import numpy as np

from .levels import ErrorCorrectionLevel
from .versions import symbol_size

UNSET = -1
LIGHT = 0
DARK = 1

FORMAT_GENERATOR = 0x537  # (15, 5) BCH generator
FORMAT_XOR_MASK = 0x5412
VERSION_GENERATOR = 0x1F25  # (18, 6) Golay generator

# Mask patterns 0..7; each returns True where a data module is inverted.
MASK_PATTERNS: List[Callable[[np.ndarray, np.ndarray], np.ndarray]] = [
    lambda r, c: (r + c) % 2 == 0,
    lambda r, c: r % 2 == 0,
    lambda r, c: c % 3 == 0,
    lambda r, c: (r + c) % 3 == 0,
    lambda r, c: (r // 2 + c // 3) % 2 == 0,
    lambda r, c: (r * c) % 2 + (r * c) % 3 == 0,
    lambda r, c: ((r * c) % 2 + (r * c) % 3) % 2 == 0,
    lambda r, c: ((r + c) % 2 + (r * c) % 3) % 2 == 0,
]


def format_information(level: ErrorCorrectionLevel, mask_pattern: int) -> int:
    """Return the 15-bit masked format word for a level and mask."""
    data = (level.format_bits << 3) | mask_pattern
    rem = data
    for _ in range(10):
        rem = (rem << 1) ^ ((rem >> 9) * FORMAT_GENERATOR)
    return ((data << 10) | rem) ^ FORMAT_XOR_MASK


def version_information(version: int) -> int:
    """Return the 18-bit version word (versions 7 and above)."""
    rem = version
    for _ in range(12):
        rem = (rem << 1) ^ ((rem >> 11) * VERSION_GENERATOR)
    return (version << 12) | rem


class ModuleMatrix:
    """
    Construction grid for a QR symbol.

    Cells start ``UNSET`` and become ``LIGHT`` or ``DARK``. Cells set by a
    pattern stamp are also flagged in the function mask and are skipped
    by data placement and masking.

    Parameters
    ----------
    version : int
        Symbol version; the grid is ``version * 4 + 17`` modules square.

    Attributes
    ----------
    version : int
        Symbol version.
    size : int
        Side length in modules.
    """

    def __init__(self, version: int) -> None:
        self.version = version
        self.size = symbol_size(version)
        self._cells = np.full((self.size, self.size), UNSET, dtype=np.int8)
        self._function = np.zeros((self.size, self.size), dtype=bool)

    # ---------- Stamping ----------

    def _stamp(self, row: int, col: int, dark: bool) -> None:
        """Set a function module if it lies inside the grid and is unset."""
        if not (0 <= row < self.size and 0 <= col < self.size):
            return
        if self._cells[row, col] != UNSET:
            return
        self._cells[row, col] = DARK if dark else LIGHT
        self._function[row, col] = True

    def add_finder_patterns(self) -> None:
        """Stamp the three 7x7 finder patterns and their light separators."""
        last = self.size - 7
        for top, left in ((0, 0), (last, 0), (0, last)):
            for r in range(7):
                for c in range(7):
                    ring = r in (0, 6) or c in (0, 6)
                    core = 2 <= r <= 4 and 2 <= c <= 4
                    self._stamp(top + r, left + c, ring or core)
            for r in range(-1, 8):
                for c in range(-1, 8):
                    if r in (-1, 7) or c in (-1, 7):
                        self._stamp(top + r, left + c, False)

    def add_timing_patterns(self) -> None:
        """Stamp the alternating timing patterns on row 6 and column 6."""
        for i in range(8, self.size - 8):
            self._stamp(6, i, i % 2 == 0)
            self._stamp(i, 6, i % 2 == 0)

    def _in_finder_zone(self, row: int, col: int) -> bool:
        far = self.size - 9
        return (
            (row <= 8 and col <= 8)
            or (row <= 8 and col >= far)
            or (row >= far and col <= 8)
        )

    def add_alignment_patterns(self, positions: Sequence[int]) -> None:
        """
        Stamp 5x5 alignment patterns centered on every coordinate pair.

        Parameters
        ----------
        positions : sequence of int
            Center coordinates; every (row, col) combination is used
            except those that would fall on a finder pattern.
        """
        for row in positions:
            for col in positions:
                if self._in_finder_zone(row, col):
                    continue
                for dr in range(-2, 3):
                    for dc in range(-2, 3):
                        dark = abs(dr) == 2 or abs(dc) == 2 or (dr == 0 and dc == 0)
                        self._stamp(row + dr, col + dc, dark)

    def add_format_information(self, level: ErrorCorrectionLevel, mask_pattern: int) -> None:
        """Stamp both copies of the format word and the dark module."""
        word = format_information(level, mask_pattern)
        size = self.size

        def bit(i: int) -> bool:
            return (word >> i) & 1 == 1

        # Around the top-left finder.
        for i in range(6):
            self._stamp(i, 8, bit(i))
        self._stamp(7, 8, bit(6))
        self._stamp(8, 8, bit(7))
        self._stamp(8, 7, bit(8))
        for i in range(9, 15):
            self._stamp(8, 14 - i, bit(i))

        # Split between the top-right and bottom-left finders.
        for i in range(8):
            self._stamp(8, size - 1 - i, bit(i))
        for i in range(8, 15):
            self._stamp(size - 15 + i, 8, bit(i))
        self._stamp(size - 8, 8, True)

    def add_version_information(self) -> None:
        """Stamp both 6x3 version blocks (versions 7 and above only)."""
        if self.version < 7:
            return
        word = version_information(self.version)
        for i in range(18):
            dark = (word >> i) & 1 == 1
            a = self.size - 11 + i % 3
            b = i // 3
            self._stamp(b, a, dark)
            self._stamp(a, b, dark)

    # ---------- Data ----------

    def place_data(self, bits: Iterable[int]) -> int:
        """
        Thread a bitstream through every unset cell.

        Columns are visited in two-column strips from the right edge,
        skipping the vertical timing column. Strips alternate between
        upward and downward traversal, and within a row the right
        column is filled before the left. Once `bits` runs out the
        remaining unset cells are filled light.

        Returns
        -------
        int
            Number of bits consumed.
        """
        source = iter(bits)
        placed = 0
        upward = True

        col = self.size - 1
        while col > 0:
            if col == 6:
                col -= 1
            rows = range(self.size - 1, -1, -1) if upward else range(self.size)
            for row in rows:
                for c in (col, col - 1):
                    if self._cells[row, c] != UNSET:
                        continue
                    bit = next(source, None)
                    if bit is None:
                        self._cells[row, c] = LIGHT
                    else:
                        self._cells[row, c] = DARK if bit else LIGHT
                        placed += 1
            upward = not upward
            col -= 2
        return placed

    def apply_mask(self, mask_pattern: int) -> None:
        """Invert the data modules selected by one of the eight mask patterns."""
        if not 0 <= mask_pattern < len(MASK_PATTERNS):
            raise ValueError(f"mask pattern must be in 0..7, got {mask_pattern}")
        r, c = np.indices(self._cells.shape)
        selected = MASK_PATTERNS[mask_pattern](r, c) & ~self._function
        self._cells[selected] ^= 1

    # ---------- Output ----------

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the tri-state cell grid."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    @property
    def function_mask(self) -> np.ndarray:
        """Read-only boolean grid; True marks function modules."""
        view = self._function.view()
        view.flags.writeable = False
        return view

    def to_array(self) -> np.ndarray:
        """
        Finalize the grid to a boolean array.

        Returns
        -------
        numpy.ndarray
            Read-only bool array of shape (size, size); True is dark.
            Cells never assigned are reported light.
        """
        modules = self._cells == DARK
        modules.flags.writeable = False
        return modules
