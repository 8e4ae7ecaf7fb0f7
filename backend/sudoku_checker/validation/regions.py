"""The 81 grid coordinates partitioned into nine 3×3 regions."""

from functools import lru_cache

from sudoku_checker.models.puzzle import BOX_SIZE, GRID_SIZE, Coordinate

RegionIndexTable = tuple[tuple[Coordinate, ...], ...]


def build_region_table() -> RegionIndexTable:
    """Build the table: regions in row-major block order, cells row-major within each block."""
    regions = []
    for top in range(0, GRID_SIZE, BOX_SIZE):
        for left in range(0, GRID_SIZE, BOX_SIZE):
            regions.append(tuple(
                (row, col)
                for row in range(top, top + BOX_SIZE)
                for col in range(left, left + BOX_SIZE)
            ))
    return tuple(regions)


@lru_cache
def get_region_table() -> RegionIndexTable:
    """Shared table, built on first use and reused by every run."""
    return build_region_table()
