"""Tests for the terrain height field."""
import numpy as np
import pytest

from straitbuilder.constants import ALONG_RANGE, COAST_BAND, COAST_HEIGHT, LAND_DEPTH, SHORE_U
from straitbuilder.heightfield import (
    PLAZA_HEIGHT, elevation, elevation_grid, ground_height, surface_grid, terrain_top,
)
from straitbuilder.models import Side
from straitbuilder.terrain import elevation as terrain_elevation


ALONGS = list(range(-ALONG_RANGE, ALONG_RANGE, 17))


class TestElevation:
    """Tests for elevation()."""

    def test_coast_band_flat(self):
        """Inside the coastal band the ground sits at the quay height."""
        for lateral in range(COAST_BAND):
            for along in ALONGS:
                assert elevation(lateral, along) == COAST_HEIGHT

    def test_floor(self):
        """Never below the coast height."""
        for lateral in range(LAND_DEPTH):
            for along in ALONGS:
                assert elevation(lateral, along) >= COAST_HEIGHT

    @pytest.mark.parametrize("along", ALONGS)
    def test_monotone_inland(self, along):
        """Height never drops moving away from the water."""
        heights = [elevation(lateral, along) for lateral in range(LAND_DEPTH)]
        assert all(a <= b for a, b in zip(heights, heights[1:]))

    def test_hills_rise(self):
        """The back of the shore is well above the quay."""
        assert elevation(LAND_DEPTH - 1, 0) > COAST_HEIGHT + 10

    def test_integer(self):
        assert isinstance(elevation(60, 13), int)

    def test_terrain_reexport(self):
        """terrain.elevation is the same function."""
        assert terrain_elevation is elevation


class TestGrids:
    """Tests for the sampled grids."""

    def test_grid_matches_scalar(self):
        """The grid sampler agrees with the scalar function cell by cell."""
        laterals = np.arange(0, LAND_DEPTH, 7)
        alongs = np.arange(-50, 50, 9)
        grid = elevation_grid(laterals, alongs)
        assert grid.shape == (len(laterals), len(alongs))
        for i, lat in enumerate(laterals):
            for j, alo in enumerate(alongs):
                assert grid[i, j] == elevation(int(lat), int(alo))

    def test_plaza_levelled(self):
        """The mosque plaza is flat on the European shore."""
        heights, plaza, corridor = surface_grid(Side.EUROPE)
        assert plaza.any()
        assert (heights[plaza] == PLAZA_HEIGHT).all()
        assert corridor.any()
        assert not (plaza & corridor).any()

    def test_ground_height_plaza(self):
        """ground_height reports the plaza level inside the plaza."""
        assert ground_height(Side.EUROPE, 10, 10) == PLAZA_HEIGHT
        assert ground_height(Side.EUROPE, 100, 150) == elevation(100, 150)


class TestTerrainTop:
    """Tests for terrain_top(), the column lookup used to seat structures."""

    def test_open_water(self):
        for ix in (0, SHORE_U - 1, -(SHORE_U - 1)):
            assert terrain_top(ix, 0) is None

    def test_beyond_land(self):
        assert terrain_top(SHORE_U + LAND_DEPTH, 0) is None
        assert terrain_top(SHORE_U, ALONG_RANGE) is None

    def test_matches_surface(self, side):
        heights = surface_grid(side)[0]
        x_dir = side.x_dir
        for lateral in (0, COAST_BAND, LAND_DEPTH - 1):
            for along in ALONGS:
                ix = x_dir * (SHORE_U + lateral)
                assert terrain_top(ix, along) == heights[lateral, along + ALONG_RANGE]

    def test_mirrored(self):
        for along in ALONGS:
            assert terrain_top(SHORE_U + 60, along) == terrain_top(-(SHORE_U + 60), along)
