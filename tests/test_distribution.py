import numpy as np
import pandas as pd
import pytest

from FBW.distribution import distribute
from FBW.effectiveness import RouteEffectivenessTable, build_lookups
from FBW.records import (DailyRecord, FPSFlow, OutletFlowAllocation,
                         VerboseDistributionResult)


def _make_day(approaching=1200.0, post=1000.0):
    return DailyRecord(
        date=pd.Timestamp("2021-05-01"),
        elev=150.0,
        outflow_flow=100.0,
        spill_flow=30.0,
        turb_flow=50.0,
        RO_flow=10.0,
        approaching_daily=approaching,
        approaching_daily_postDPE=post,
    )


def _make_allocation(spill=30.0, turb=50.0, ro=10.0, fps=10.0):
    Q_tot = spill + turb + ro + fps
    return OutletFlowAllocation(
        B_spill=spill,
        B_turb=turb,
        B_RO=ro,
        B_FPS=fps,
        Q_tot=Q_tot,
        spill_flow=spill,
        turb_flow=turb,
        RO_flow=ro,
    )


def _make_lookups(spill=1.0, turb=1.0, ro=1.0, fps=1.0):
    table = RouteEffectivenessTable(
        q_ratio=(0.0, 1.0),
        spill=(spill, spill),
        turb=(turb, turb),
        RO=(ro, ro),
        FPS=(fps, fps),
    )
    return build_lookups(table)


def test_equal_effectiveness_follows_flow():
    res = distribute(_make_day(), _make_allocation(), _make_lookups())
    assert res.F_spill == pytest.approx(300.0)
    assert res.F_turb == pytest.approx(500.0)
    assert res.F_RO == pytest.approx(100.0)
    assert res.F_FPS == pytest.approx(100.0)
    assert res.F_NoPass == pytest.approx(200.0)
    assert not res.undefined


def test_effectiveness_weighting():
    alloc = _make_allocation(spill=50.0, turb=50.0, ro=0.0, fps=0.0)
    res = distribute(_make_day(post=900.0), alloc, _make_lookups(spill=0.5))
    # adj_total = 0.5 * 0.5 + 1.0 * 0.5
    assert res.F_spill == pytest.approx(300.0)
    assert res.F_turb == pytest.approx(600.0)
    assert res.F_RO == 0.0
    assert res.F_FPS == 0.0


def test_cohort_conservation():
    day = _make_day(approaching=0.05, post=0.04)
    lookups = _make_lookups(spill=0.9, turb=0.3, ro=0.6, fps=1.4)
    for alloc in (_make_allocation(), _make_allocation(spill=0.0, fps=70.0), _make_allocation(ro=55.5)):
        res = distribute(day, alloc, lookups)
        assert res.F_passed == pytest.approx(day.approaching_daily_postDPE)
        assert res.F_passed + res.F_NoPass == pytest.approx(day.approaching_daily)


def test_nets_spill_not_normally_used():
    res = distribute(_make_day(), _make_allocation(), _make_lookups(), nets=True, spill_normally_used=False)
    assert res.F_spill == pytest.approx(300.0)
    assert res.F_FPS == pytest.approx(700.0)
    assert res.F_turb == 0.0
    assert res.F_RO == 0.0
    assert res.F_passed + res.F_NoPass == pytest.approx(1200.0)


def test_nets_spill_normally_used():
    res = distribute(_make_day(), _make_allocation(), _make_lookups(), nets=True, spill_normally_used=True)
    assert res.F_spill == 0.0
    assert res.F_turb == 0.0
    assert res.F_RO == 0.0
    assert res.F_FPS == 1000.0


def test_zero_flow_propagates_undefined():
    alloc = _make_allocation(spill=0.0, turb=0.0, ro=0.0, fps=0.0)
    res = distribute(_make_day(), alloc, _make_lookups())
    assert res.undefined
    assert np.isnan(res.F_spill)
    assert np.isnan(res.F_FPS)
    assert res.F_NoPass == pytest.approx(200.0)


def test_zero_flow_as_no_passage():
    alloc = _make_allocation(spill=0.0, turb=0.0, ro=0.0, fps=0.0)
    res = distribute(_make_day(), alloc, _make_lookups(), zero_flow="zero")
    assert res.undefined
    assert (res.F_spill, res.F_turb, res.F_RO, res.F_FPS) == (0.0, 0.0, 0.0, 0.0)
    assert res.F_NoPass == pytest.approx(200.0)


def test_zero_effectiveness_is_undefined():
    res = distribute(_make_day(), _make_allocation(), _make_lookups(0.0, 0.0, 0.0, 0.0))
    assert res.undefined


def test_unknown_zero_flow_policy():
    with pytest.raises(ValueError, match="zero_flow"):
        distribute(_make_day(), _make_allocation(), _make_lookups(), zero_flow="skip")


def test_verbose_result():
    fps = FPSFlow(flow=12.5, adequate_elev=1)
    res = distribute(_make_day(), _make_allocation(), _make_lookups(spill=0.5), verbose=True, fps=fps)
    assert isinstance(res, VerboseDistributionResult)
    assert res.FPS_flow == 12.5
    assert res.adequate_elev == 1
    assert res.Q_tot == 100.0
    assert res.pB_spill == pytest.approx(0.3)
    assert res.RE_spill == pytest.approx(0.5)
    assert res.adj_total == pytest.approx(0.85)
    assert "B_turb" in res.as_dict()
