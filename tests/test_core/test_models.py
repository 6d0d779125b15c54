#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Tests for the isochrone-grid stellar models.

The toy grid from conftest is linear in every coordinate, so interpolated
magnitudes are checked against the exact analytic values.
"""

import numpy as np
import numpy.testing as npt
import pytest
from conftest import MIN_MASS, TOY_AGES, TOY_FEH, TOY_Y, make_toy_grid, toy_mags, toy_tip

from clustercmd.core.models import (
    MODELS,
    ChabMsModel,
    MsRgbModel,
    StellarModel,
    _blend_isochrones,
    _bracket,
    make_model,
)
from clustercmd.data.filters import FILTERS
from clustercmd.data.loader import save_model_grid
from clustercmd.errors import OutOfGridRange


class TestBracket:

    def test_interior(self):
        lo, hi, frac = _bracket(np.array([1.0, 2.0, 4.0]), 3.0, "x")
        assert (lo, hi) == (1, 2)
        assert frac == pytest.approx(0.5)

    def test_on_node(self):
        assert _bracket(np.array([1.0, 2.0, 4.0]), 2.0, "x") == (1, 1, 0.0)
        assert _bracket(np.array([1.0, 2.0, 4.0]), 1.0, "x") == (0, 0, 0.0)
        assert _bracket(np.array([1.0, 2.0, 4.0]), 4.0, "x") == (2, 2, 0.0)

    def test_single_node(self):
        assert _bracket(np.array([0.27]), 0.27, "Y") == (0, 0, 0.0)
        with pytest.raises(OutOfGridRange):
            _bracket(np.array([0.27]), 0.28, "Y")

    @pytest.mark.parametrize("value", [0.5, 4.5, np.nan])
    def test_outside(self, value):
        with pytest.raises(OutOfGridRange):
            _bracket(np.array([1.0, 2.0, 4.0]), value, "x")


class TestBlendIsochrones:

    def test_zero_weight_corner_ignored(self):
        """A NaN entry on a zero-weight isochrone does not spoil the blend."""
        masses = np.array([[1.0, 2.0], [np.nan, np.nan]])
        mags = np.array([[[5.0], [4.0]], [[np.nan], [np.nan]]])
        mass, mag = _blend_isochrones(np.array([1.0, 0.0]), masses, mags)
        npt.assert_allclose(mass, [1.0, 2.0])
        npt.assert_allclose(mag[:, 0], [5.0, 4.0])

    def test_weighted_sum(self):
        masses = np.array([[1.0, 2.0], [3.0, 4.0]])
        mags = np.array([[[1.0], [2.0]], [[3.0], [4.0]]])
        mass, mag = _blend_isochrones(np.array([0.25, 0.75]), masses, mags)
        npt.assert_allclose(mass, [2.5, 3.5])
        npt.assert_allclose(mag[:, 0], [2.5, 3.5])


class TestMsRgbModel:

    def test_interface(self, toy_model):
        assert isinstance(toy_model, StellarModel)
        assert toy_model.n_filters == len(FILTERS)

    def test_is_supported(self, toy_model):
        assert toy_model.is_supported("UBVRIJHK")
        assert not toy_model.is_supported("SDSS")

    @pytest.mark.parametrize(
        "age, feh, y, mass",
        [
            (9.0, 0.0, 0.25, 1.0),  # on grid nodes
            (9.25, -0.2, 0.27, 0.9),  # fully interpolated
            (9.8, -0.5, 0.30, 1.55),  # on feh/Y edges
            (10.0, -0.1, 0.26, 0.41),  # near the lowest tabulated mass
        ],
    )
    def test_lookup_exact(self, toy_model, age, feh, y, mass):
        mags = toy_model.lookup(age, feh, y, mass)
        npt.assert_allclose(mags, toy_mags(age, feh, y, mass), atol=1e-10)

    def test_agb_tip(self, toy_model):
        assert toy_model.agb_tip_mass(9.0, 0.0, 0.25) == pytest.approx(toy_tip(9.0))
        assert toy_model.agb_tip_mass(9.7, -0.3, 0.28) == pytest.approx(toy_tip(9.7))

    def test_derived_isochrone_drops_padding(self, toy_model):
        mass, mags = toy_model.derive_isochrone(9.5, 0.0, 0.25)
        assert np.all(np.isfinite(mass))
        assert np.all(np.diff(mass) > 0)
        assert mags.shape == (len(mass), len(FILTERS))

    def test_lookup_is_repeatable(self, toy_model):
        first = toy_model.lookup(9.3, -0.1, 0.28, 1.1)
        second = toy_model.lookup(9.3, -0.1, 0.28, 1.1)
        npt.assert_array_equal(first, second)

    @pytest.mark.parametrize(
        "age, feh, y, mass",
        [
            (8.5, 0.0, 0.25, 1.0),  # too young
            (9.5, 0.3, 0.25, 1.0),  # too metal rich
            (9.5, 0.0, 0.20, 1.0),  # helium below the grid
            (9.5, 0.0, 0.25, MIN_MASS - 0.3),  # below the lowest mass
            (9.5, 0.0, 0.25, 1.9),  # above the AGB tip
        ],
    )
    def test_out_of_grid(self, toy_model, age, feh, y, mass):
        with pytest.raises(OutOfGridRange):
            toy_model.lookup(age, feh, y, mass)

    def test_out_of_grid_is_value_error(self, toy_model):
        with pytest.raises(ValueError):
            toy_model.lookup(11.0, 0.0, 0.25, 1.0)

    def test_bad_shapes(self):
        masses, mags = make_toy_grid(TOY_FEH, TOY_Y, TOY_AGES)
        with pytest.raises(ValueError):
            MsRgbModel(TOY_FEH, TOY_Y, TOY_AGES[:2], masses, mags, FILTERS)
        with pytest.raises(ValueError):
            MsRgbModel(TOY_FEH, TOY_Y, TOY_AGES, masses, mags, FILTERS[:4])
        with pytest.raises(ValueError):
            MsRgbModel(TOY_FEH[::-1], TOY_Y, TOY_AGES, masses, mags, FILTERS)


class TestChabMsModel:

    def test_grid_shape(self, chab_model):
        assert chab_model.masses.shape[:3] == (4, 5, 19)

    def test_is_supported(self, chab_model):
        assert chab_model.is_supported("UBVRIJHK")
        assert not chab_model.is_supported("ACS")

    def test_lookup(self, chab_model):
        mags = chab_model.lookup(9.1, -0.3, 0.29, 0.95)
        npt.assert_allclose(mags, toy_mags(9.1, -0.3, 0.29, 0.95), atol=1e-10)

    def test_rejects_other_shapes(self):
        masses, mags = make_toy_grid(TOY_FEH, TOY_Y, TOY_AGES)
        with pytest.raises(ValueError):
            ChabMsModel(TOY_FEH, TOY_Y, TOY_AGES, masses, mags, FILTERS)


class TestMakeModel:

    def test_registry(self):
        assert MODELS["chaboyer"] is ChabMsModel
        assert MODELS["grid"] is MsRgbModel

    def test_from_file(self, tmp_path, chab_grid):
        path = str(tmp_path / "chab.h5")
        save_model_grid(path, *chab_grid)
        model = make_model("Chaboyer", path, verbose=False)
        assert isinstance(model, ChabMsModel)
        npt.assert_allclose(
            model.lookup(9.6, 0.0, 0.27, 1.2), toy_mags(9.6, 0.0, 0.27, 1.2), atol=1e-10
        )

    def test_unknown_family(self, tmp_path):
        with pytest.raises(KeyError):
            make_model("yale", str(tmp_path / "missing.h5"), verbose=False)


class TestBacktrackingIsochrone:
    """EEP tables whose masses fall back before rising again."""

    @pytest.fixture
    def model(self):
        masses = np.array([0.5, 1.0, 2.0, 1.5, 1.8]).reshape(1, 1, 1, 5)
        mags = np.repeat(
            np.array([9.0, 8.0, 4.0, 6.0, 5.0])[:, None], len(FILTERS), axis=1
        ).reshape(1, 1, 1, 5, len(FILTERS))
        return MsRgbModel([0.0], [0.27], [9.0], masses, mags, FILTERS)

    def test_derived_masses_strictly_increase(self, model):
        mass, mags = model.derive_isochrone(9.0, 0.0, 0.27)
        npt.assert_array_equal(mass, [0.5, 1.0, 2.0])
        npt.assert_array_equal(mags[:, 0], [9.0, 8.0, 4.0])

    def test_agb_tip_is_largest_mass(self, model):
        assert model.agb_tip_mass(9.0, 0.0, 0.27) == 2.0

    def test_lookup_ignores_backtrack(self, model):
        npt.assert_allclose(model.lookup(9.0, 0.0, 0.27, 1.5), np.full(len(FILTERS), 6.0))
