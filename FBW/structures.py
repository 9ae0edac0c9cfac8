# -*- coding: utf-8 -*-
"""
Created on Tue Oct 13 11:26:04 2026

Fish passage structure (FPS) definitions and the daily FPS flow calculation.

Five structure types are modeled:
    NONE      - no fish passage structure, zero flow
    FSC       - fixed collector, draws recirculated attraction water at full
                capacity whenever pool elevation is within its operating window
    FSS       - floating surface structure, screens water from the upper part
                of the forebay that would otherwise go through the turbines and
                regulating outlet.  When temperature control is active only the
                part of outflow not withdrawn for temperature is available.
    FSO       - fixed orifice, draws on total outflow
    FISH_WEIR - seasonal weir on the spillway, active between two month-days

Every type except NONE only operates when the pool is strictly between the
structure's bottom and top elevation.  Unset bounds are unbounded.
"""

import enum
import logging
from dataclasses import dataclass, field
from datetime import date as _date, datetime
from typing import Optional

import numpy as np
import pandas as pd

from .exceptions import ConfigurationError, consistency_warning
from .records import FPSFlow
from .temperature import TemperatureSplit

logger = logging.getLogger(__name__)

WEIR_DATE_FORMAT = '%d-%m'
WEIR_DATES_MISSING = 'Weir start date and/or end date are missing, assuming weir active all year.'


class StructureType(enum.Enum):
    NONE = 'NONE'
    FSC = 'FSC'
    FSS = 'FSS'
    FSO = 'FSO'
    FISH_WEIR = 'FISH WEIR'

    @classmethod
    def parse(cls, tag):
        '''Structure type from a workbook tag such as "FSS" or "FISH WEIR".'''
        if isinstance(tag, cls):
            return tag
        if tag is None or (isinstance(tag, float) and np.isnan(tag)):
            return cls.NONE
        key = str(tag).strip().upper().replace('_', ' ')
        for member in cls:
            if member.value == key:
                return member
        raise ConfigurationError(
            f'FPS must be one of: "NONE", "FSC", "FSS", "FSO", or "FISH WEIR", got {tag!r}')


def is_missing(value):
    '''True for None, NaN and blank or "NA" strings'''
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().upper() in ('', 'NA', 'NAN', 'NONE')
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_month_day(value):
    """
    Parses a weir date into a (month, day) tuple.

    Accepts "dd-mm" strings (e.g. "25-05" for the 25th of May) and date-like
    objects, whose year is ignored.  29-02 is valid.
    """
    if isinstance(value, (datetime, _date, pd.Timestamp)):
        return (value.month, value.day)
    try:
        # 2020 is a leap year, so 29-02 parses
        parsed = datetime.strptime(f'{str(value).strip()}-2020', f'{WEIR_DATE_FORMAT}-%Y')
    except ValueError:
        raise ConfigurationError(
            f'Weir date must be a date in %d-%m format (e.g., 25-05 for the 25th of May), got {value!r}')
    return (parsed.month, parsed.day)


@dataclass(frozen=True)
class MonthDayWindow:
    """
    Inclusive window of month-days.  If start falls after end in the calendar
    the window wraps the new year, e.g. 01-11 to 28-02 runs from November 1
    through February 28.
    """
    start: tuple
    end: tuple

    @classmethod
    def parse(cls, start, end):
        return cls(parse_month_day(start), parse_month_day(end))

    @property
    def wraps(self):
        return self.start > self.end

    def __contains__(self, day):
        md = (day.month, day.day)
        if self.wraps:
            return md >= self.start or md <= self.end
        return self.start <= md <= self.end


def _bound(value, default):
    if is_missing(value):
        return default
    return float(value)


@dataclass(frozen=True)
class StructureConfig:
    """
    Immutable configuration of the fish passage structure.

    Parameters:
    - structure_type (StructureType or str): one of NONE, FSC, FSS, FSO,
      FISH WEIR.
    - bottom_elev, top_elev (float, optional): operating window of pool
      elevation, exclusive at both ends.  None means unbounded.
    - max_flow (float, optional): structure capacity, None means unbounded.
    - weir_start, weir_end (str, optional): fish weir active window in %d-%m
      format.  If either is missing the weir is treated as always active.
    - use_temp_split (bool): FSS only, whether temperature control reduces the
      flow available to the structure.
    - temp_split (TemperatureSplit, optional): source of daily split fractions
      when use_temp_split is set.
    """
    structure_type: StructureType = StructureType.NONE
    bottom_elev: Optional[float] = None
    top_elev: Optional[float] = None
    max_flow: Optional[float] = None
    weir_start: Optional[str] = None
    weir_end: Optional[str] = None
    use_temp_split: bool = False
    temp_split: Optional[TemperatureSplit] = None
    weir_window: Optional[MonthDayWindow] = field(init = False, default = None)

    def __post_init__(self):
        object.__setattr__(self, 'structure_type', StructureType.parse(self.structure_type))
        object.__setattr__(self, 'bottom_elev', _bound(self.bottom_elev, -np.inf))
        object.__setattr__(self, 'top_elev', _bound(self.top_elev, np.inf))
        object.__setattr__(self, 'max_flow', _bound(self.max_flow, np.inf))

        if self.structure_type is StructureType.FSC and np.isinf(self.max_flow):
            raise ConfigurationError('An FSC draws its full capacity, a finite maximum flow is required')

        if self.structure_type is StructureType.FISH_WEIR:
            if is_missing(self.weir_start) or is_missing(self.weir_end):
                consistency_warning(WEIR_DATES_MISSING, stacklevel = 3)
            else:
                object.__setattr__(self, 'weir_window',
                                   MonthDayWindow.parse(self.weir_start, self.weir_end))

        if self.structure_type is StructureType.FSS and self.use_temp_split and self.temp_split is None:
            logger.debug('FSS temperature split active without a split source, callers must pass the daily split')

    @property
    def weir_always_active(self):
        return self.structure_type is StructureType.FISH_WEIR and self.weir_window is None

    def adequate_elev(self, elev):
        '''1 if the pool is strictly inside the operating window, else 0'''
        return 1 if self.bottom_elev < elev < self.top_elev else 0

    def weir_active(self, day):
        if self.weir_window is None:
            return 1
        return 1 if day in self.weir_window else 0

    def daily_temp_split(self, day):
        if self.temp_split is None:
            raise ConfigurationError(
                'FSS temperature split is active but no temperature split source or daily split was provided')
        return self.temp_split.split(day)


def _none_flow(day, cfg, temp_split):
    return FPSFlow(flow = 0.)


def _fsc_flow(day, cfg, temp_split):
    # recirculated water, independent of the other outlets
    adequate = cfg.adequate_elev(day.elev)
    return FPSFlow(flow = cfg.max_flow * adequate, adequate_elev = adequate)


def _fss_flow(day, cfg, temp_split):
    adequate = cfg.adequate_elev(day.elev)
    if cfg.use_temp_split:
        if temp_split is None:
            temp_split = cfg.daily_temp_split(day.date)
        available = day.outflow_flow * (1. - temp_split)
    else:
        temp_split = None
        available = day.turb_flow + day.RO_flow
    return FPSFlow(flow = adequate * min(cfg.max_flow, available),
                   adequate_elev = adequate,
                   temp_split = temp_split)


def _fso_flow(day, cfg, temp_split):
    adequate = cfg.adequate_elev(day.elev)
    return FPSFlow(flow = adequate * min(cfg.max_flow, day.outflow_flow),
                   adequate_elev = adequate)


def _weir_flow(day, cfg, temp_split):
    adequate = cfg.adequate_elev(day.elev)
    active = cfg.weir_active(day.date)
    return FPSFlow(flow = min(cfg.max_flow, day.spill_flow) * active * adequate,
                   adequate_elev = adequate,
                   weir_active = active)


FPS_FLOW_HANDLERS = {StructureType.NONE: _none_flow,
                     StructureType.FSC: _fsc_flow,
                     StructureType.FSS: _fss_flow,
                     StructureType.FSO: _fso_flow,
                     StructureType.FISH_WEIR: _weir_flow}


def fps_flow_detail(day, cfg, temp_split = None):
    """
    Calculates the flow through the fish passage structure for one day along
    with the elevation, weir and temperature gates that produced it.

    Parameters:
    - day (DailyRecord): the day's hydrology.
    - cfg (StructureConfig): structure configuration.
    - temp_split (float, optional): the day's temperature split, used by an
      FSS with temperature control.  Looked up from cfg.temp_split if omitted.

    Returns:
    - FPSFlow
    """
    return FPS_FLOW_HANDLERS[cfg.structure_type](day, cfg, temp_split)


def compute_fps_flow(day, cfg, temp_split = None):
    '''Flow through the fish passage structure for one day, always >= 0'''
    return fps_flow_detail(day, cfg, temp_split).flow
