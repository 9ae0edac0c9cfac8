import warnings

import numpy as np
import pandas as pd
import pytest

from FBW.exceptions import ConfigurationError, ConsistencyWarning
from FBW.fbw import distribute_fish_outlets, fish_distribution
from FBW.parameters import Parameters
from FBW.effectiveness import RouteEffectivenessTable
from FBW.structures import StructureConfig
from FBW.temperature import TemperatureSplit


def _make_daily():
    return pd.DataFrame(
        [
            {"Date": "2021-01-10", "elev": 1500.0, "outflow_flow": 100.0, "spill_flow": 20.0,
             "turb_flow": 60.0, "RO_flow": 20.0, "approaching_daily": 0.02, "approaching_daily_postDPE": 0.015},
            {"Date": "2021-04-01", "elev": 1500.0, "outflow_flow": 100.0, "spill_flow": 5.0,
             "turb_flow": 80.0, "RO_flow": 15.0, "approaching_daily": 0.05, "approaching_daily_postDPE": 0.04},
            {"Date": "2021-07-04", "elev": 1400.0, "outflow_flow": 0.0, "spill_flow": 0.0,
             "turb_flow": 0.0, "RO_flow": 0.0, "approaching_daily": 0.01, "approaching_daily_postDPE": 0.01},
            {"Date": "2021-12-20", "elev": 1500.0, "outflow_flow": 90.0, "spill_flow": 50.0,
             "turb_flow": 30.0, "RO_flow": 10.0, "approaching_daily": 0.03, "approaching_daily_postDPE": 0.02},
        ],
        index=[10, 11, 12, 13],
    )


def _make_params(structure_type="FSO", nets=False, **kwargs):
    structure = StructureConfig(structure_type=structure_type, bottom_elev=1450.0, top_elev=1560.0,
                                max_flow=30.0, **kwargs)
    route_eff = RouteEffectivenessTable(
        q_ratio=(0.0, 0.5, 1.0),
        spill=(0.5, 1.0, 1.0),
        turb=(1.0, 1.0, 1.0),
        RO=(0.8, 1.0, 1.0),
        FPS=(1.5, 1.2, 1.0),
    )
    return Parameters(structure=structure, route_eff=route_eff, nets=nets, spill_normally_used=False)


def test_run_keeps_rows_and_adds_distribution():
    daily = _make_daily()
    out = fish_distribution(_make_params("FSC")).run(daily)
    assert list(out.index) == [10, 11, 12, 13]
    for col in ("FPS_flow", "F_spill", "F_turb", "F_RO", "F_FPS", "F_NoPass", "undefined"):
        assert col in out.columns
    assert "B_spill" not in out.columns
    defined = out[~out.undefined]
    passed = defined[["F_spill", "F_turb", "F_RO", "F_FPS"]].sum(axis=1)
    np.testing.assert_allclose(passed + defined.F_NoPass, defined.approaching_daily)


def test_zero_flow_day_is_flagged():
    dist = fish_distribution(_make_params("NONE"))
    out = dist.run(_make_daily())
    assert out.loc[12, "undefined"]
    assert np.isnan(out.loc[12, "F_spill"])
    assert dist.undefined_days == [pd.Timestamp("2021-07-04")]

    out = fish_distribution(_make_params("NONE"), zero_flow="zero").run(_make_daily())
    assert out.loc[12, "F_spill"] == 0.0


def test_fso_reduces_outlet_flows():
    out = fish_distribution(_make_params("FSO")).run(_make_daily())
    # 30 cfs taken from 20 spill then 10 from RO
    assert out.loc[10, "spill_flow"] == 0.0
    assert out.loc[10, "RO_flow"] == 10.0
    assert out.loc[10, "turb_flow"] == 60.0
    assert out.loc[10, "FPS_flow"] == 30.0


def test_verbose_columns():
    out = fish_distribution(_make_params("FSS")).run(_make_daily(), verbose=True)
    for col in ("Q_tot", "B_spill", "B_FPS", "pB_turb", "RE_RO", "RE_FPS", "adj_total", "adequate_elev"):
        assert col in out.columns
    assert out.loc[11, "B_FPS"] == 30.0


def test_daily_results_in_order():
    results = fish_distribution(_make_params("FSO")).daily(_make_daily())
    assert [r.date for r in results] == list(pd.to_datetime(_make_daily().Date))


def test_weir_window_in_run():
    dist = fish_distribution(_make_params("FISH WEIR", weir_start="01-11", weir_end="28-02"))
    with warnings.catch_warnings():
        warnings.simplefilter("error", ConsistencyWarning)
        out = dist.run(_make_daily())
    assert dist.warnings == []
    # January 10: weir active, all 20 cfs of spill go over the weir
    assert out.loc[10, "FPS_flow"] == 20.0
    assert out.loc[10, "spill_flow"] == 0.0
    # April 1: weir closed
    assert out.loc[11, "FPS_flow"] == 0.0
    assert out.loc[11, "spill_flow"] == 5.0
    # December 20: capped at capacity
    assert out.loc[13, "FPS_flow"] == 30.0
    assert out.loc[13, "spill_flow"] == 20.0


def test_weir_missing_dates_collected():
    with pytest.warns(ConsistencyWarning):
        params = _make_params("FISH WEIR")
    dist = fish_distribution(params)
    assert any("active all year" in w for w in dist.warnings)


def test_missing_columns():
    daily = _make_daily().drop(columns="RO_flow")
    with pytest.raises(ConfigurationError, match="RO_flow"):
        fish_distribution(_make_params()).run(daily)


def test_nets_through_wrapper():
    param_list = {
        "alt_desc": {"collector": "FSC", "nets": "y", "fps_max_elev": 1560.0},
        "route_specs": pd.DataFrame(
            {"max_flow": [np.nan, np.nan, np.nan, 30.0],
             "bottom_elev": [np.nan, np.nan, np.nan, 1450.0],
             "normally_used": ["y", "y", "y", "y"]},
            index=["RO", "Turb", "Spill", "FPS"],
        ),
        "route_eff": pd.DataFrame({"q_ratio": [0.0, 1.0], "Spill": [1.0, 1.0], "RO": [1.0, 1.0],
                                   "Turb": [1.0, 1.0]}),
    }
    out = distribute_fish_outlets(_make_daily(), param_list)
    np.testing.assert_allclose(out.F_FPS, out.approaching_daily_postDPE)
    assert (out.F_turb == 0.0).all()
    assert (out.F_spill == 0.0).all()


def test_rerun_replaces_result_columns():
    dist = fish_distribution(_make_params("FSC"))
    first = dist.run(_make_daily(), verbose=True)
    again = dist.run(first, verbose=True)
    assert not again.columns.duplicated().any()
    assert list(again.columns) == list(first.columns)
    np.testing.assert_allclose(again.F_FPS, first.F_FPS)


def test_fss_temperature_split_from_schedule():
    temp_split = TemperatureSplit(pd.DataFrame({"Date": ["2020-01-01"], "ADEQUATE": [0.25]}),
                                  {2021: "ADEQUATE"})
    structure = StructureConfig(structure_type="FSS", bottom_elev=1450.0, top_elev=1560.0,
                                max_flow=1000.0, use_temp_split=True, temp_split=temp_split)
    params = Parameters(structure=structure, route_eff=_make_params().route_eff)
    out = fish_distribution(params).run(_make_daily(), verbose=True)
    # outflow less the 25% withdrawn for temperature, none below the window
    np.testing.assert_allclose(out.FPS_flow, [75.0, 75.0, 0.0, 67.5])
    np.testing.assert_allclose(out.temp_split, 0.25)


def test_negative_or_missing_flow_rejected():
    daily = _make_daily()
    daily.loc[11, "turb_flow"] = -5.0
    with pytest.raises(ConfigurationError, match="turb_flow"):
        fish_distribution(_make_params("FISH WEIR", weir_start="01-11", weir_end="28-02")).run(daily)

    daily = _make_daily()
    daily.loc[10, "spill_flow"] = np.nan
    with pytest.raises(ConfigurationError, match="spill_flow"):
        fish_distribution(_make_params("FISH WEIR", weir_start="01-11", weir_end="28-02")).run(daily)


def test_postdpe_above_approaching_rejected():
    daily = _make_daily()
    daily.loc[13, "approaching_daily_postDPE"] = 0.05
    with pytest.raises(ConfigurationError, match="approaching_daily_postDPE"):
        fish_distribution(_make_params()).run(daily)
