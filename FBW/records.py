# -*- coding: utf-8 -*-
"""
Created on Tue Oct 13 10:02:47 2026

Record types passed between the FPS flow calculator, the fish-bearing flow
allocator and the distribution engine.

All records are frozen: a day's allocation and distribution are computed fresh
from a DailyRecord and never mutated afterwards.
"""

from dataclasses import dataclass, fields
from typing import Optional

import numpy as np
import pandas as pd

# columns every daily hydrology frame must carry
DAILY_COLUMNS = ['Date',
                 'elev',
                 'outflow_flow',
                 'spill_flow',
                 'turb_flow',
                 'RO_flow',
                 'approaching_daily',
                 'approaching_daily_postDPE']

OUTLETS = ('spill', 'turb', 'RO', 'FPS')


@dataclass(frozen=True)
class DailyRecord:
    '''One simulated day of hydrology and fish approaching the dam.'''
    date: pd.Timestamp
    elev: float
    outflow_flow: float
    spill_flow: float
    turb_flow: float
    RO_flow: float
    approaching_daily: float
    approaching_daily_postDPE: float

    @classmethod
    def from_row(cls, row):
        """
        Builds a DailyRecord from a row (Series or mapping) of a daily
        hydrology DataFrame using the column names in DAILY_COLUMNS.
        """
        return cls(date = pd.Timestamp(row['Date']),
                   elev = float(row['elev']),
                   outflow_flow = float(row['outflow_flow']),
                   spill_flow = float(row['spill_flow']),
                   turb_flow = float(row['turb_flow']),
                   RO_flow = float(row['RO_flow']),
                   approaching_daily = float(row['approaching_daily']),
                   approaching_daily_postDPE = float(row['approaching_daily_postDPE']))


@dataclass(frozen=True)
class FPSFlow:
    '''Flow captured by the fish passage structure and the gates that
    produced it.  Gates that a structure type does not evaluate are None.'''
    flow: float
    adequate_elev: Optional[int] = None
    weir_active: Optional[int] = None
    temp_split: Optional[float] = None


@dataclass(frozen=True)
class OutletFlowAllocation:
    """
    Fish-bearing flow through each outlet for one day.

    spill_flow, turb_flow and RO_flow are the outlet flows after any real
    diversion to the fish passage structure (FSO and fish weir); for the other
    structure types they equal the raw daily flows.
    """
    B_spill: float
    B_turb: float
    B_RO: float
    B_FPS: float
    Q_tot: float
    spill_flow: float
    turb_flow: float
    RO_flow: float

    @property
    def total(self):
        return self.B_spill + self.B_turb + self.B_RO + self.B_FPS


@dataclass(frozen=True)
class DistributionResult:
    '''Proportion of the annual cohort passing each route on one day.'''
    date: pd.Timestamp
    FPS_flow: float
    F_spill: float
    F_turb: float
    F_RO: float
    F_FPS: float
    F_NoPass: float
    undefined: bool = False

    @property
    def F_passed(self):
        return self.F_spill + self.F_turb + self.F_RO + self.F_FPS

    def as_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class VerboseDistributionResult(DistributionResult):
    '''DistributionResult plus the intermediate flows, flow shares and route
    effectiveness values that produced it.'''
    Q_tot: float = np.nan
    B_spill: float = np.nan
    B_turb: float = np.nan
    B_RO: float = np.nan
    B_FPS: float = np.nan
    pB_spill: float = np.nan
    pB_turb: float = np.nan
    pB_RO: float = np.nan
    pB_FPS: float = np.nan
    RE_spill: float = np.nan
    RE_turb: float = np.nan
    RE_RO: float = np.nan
    RE_FPS: float = np.nan
    adj_total: float = np.nan
    adequate_elev: Optional[int] = None
    weir_active: Optional[int] = None
    temp_split: Optional[float] = None
