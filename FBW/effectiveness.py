# -*- coding: utf-8 -*-
"""
Created on Wed Oct 14 10:05:51 2026

Route effectiveness tables and lookups.

Route effectiveness relates the share of total flow an outlet carries to the
share of fish it passes.  Each outlet has a column of effectiveness values
against a shared, strictly increasing column of flow ratios.  Lookups are
linear between table points and hold the end values outside the table, they
never extrapolate.
"""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy.interpolate import interp1d

from .exceptions import ConfigurationError
from .records import OUTLETS

logger = logging.getLogger(__name__)

# outlet key -> route effectiveness column
RE_COLUMNS = {'spill': 'Spill',
              'turb': 'Turb',
              'RO': 'RO',
              'FPS': 'FPS'}


class RouteLookup():
    ''' Piecewise linear route effectiveness for one outlet, clamped to the
    first and last table values'''

    def __init__(self, q_ratio, effectiveness):
        self.q_ratio = np.asarray(q_ratio, dtype = float)
        self.effectiveness = np.asarray(effectiveness, dtype = float)
        self._f = interp1d(self.q_ratio,
                           self.effectiveness,
                           kind = 'linear',
                           bounds_error = False,
                           fill_value = (self.effectiveness[0], self.effectiveness[-1]),
                           assume_sorted = True)

    def __call__(self, ratio):
        ratio = np.asarray(ratio, dtype = float)
        out = np.where(np.isnan(ratio), np.nan, self._f(ratio))
        if out.ndim == 0:
            return float(out)
        return out


class ZeroLookup():
    ''' Route effectiveness for a fish passage structure without effectiveness
    data: the route is treated as ineffective'''

    def __call__(self, ratio):
        ratio = np.asarray(ratio, dtype = float)
        if ratio.ndim == 0:
            return 0.
        return np.zeros_like(ratio)


@dataclass(frozen=True)
class RouteEffectivenessTable:
    """
    Flow ratio vs. route effectiveness for the spillway, turbines, regulating
    outlet and fish passage structure.

    Parameters:
    - q_ratio (tuple): strictly increasing flow ratios, usually 0 to 1.
    - spill, turb, RO (tuple): effectiveness for each flow ratio.
    - FPS (tuple, optional): effectiveness of the fish passage structure, None
      or all NaN when there is no data.
    """
    q_ratio: tuple
    spill: tuple
    turb: tuple
    RO: tuple
    FPS: tuple = None

    def __post_init__(self):
        q = np.asarray(self.q_ratio, dtype = float)
        if q.ndim != 1 or len(q) < 2:
            raise ConfigurationError('Route effectiveness needs at least two flow ratios')
        if np.any(np.isnan(q)) or np.any(np.diff(q) <= 0):
            raise ConfigurationError('Route effectiveness flow ratios must be strictly increasing')
        for outlet in OUTLETS:
            values = getattr(self, outlet)
            if values is None:
                if outlet != 'FPS':
                    raise ConfigurationError(f'Route effectiveness for {outlet} is required')
                continue
            values = tuple(float(v) for v in values)
            if len(values) != len(q):
                raise ConfigurationError(
                    f'Route effectiveness for {outlet} has {len(values)} values for {len(q)} flow ratios')
            object.__setattr__(self, outlet, values)
        object.__setattr__(self, 'q_ratio', tuple(q))

    @classmethod
    def from_frame(cls, route_eff):
        """
        Builds the table from a DataFrame with columns q_ratio, Spill, FPS,
        RO and Turb.  The FPS column may be absent.
        """
        if 'q_ratio' not in route_eff.columns:
            raise ConfigurationError("Route effectiveness table must have a 'q_ratio' column")
        route_eff = route_eff.dropna(subset = ['q_ratio'])
        kwargs = {}
        for outlet, col in RE_COLUMNS.items():
            if col in route_eff.columns:
                kwargs[outlet] = tuple(pd.to_numeric(route_eff[col], errors = 'coerce'))
            elif outlet != 'FPS':
                raise ConfigurationError(f"Route effectiveness table is missing the '{col}' column")
        return cls(q_ratio = tuple(route_eff['q_ratio']), **kwargs)

    def to_frame(self):
        data = {'q_ratio': self.q_ratio}
        for outlet, col in RE_COLUMNS.items():
            values = getattr(self, outlet)
            data[col] = values if values is not None else [np.nan] * len(self.q_ratio)
        return pd.DataFrame(data)

    @property
    def has_fps(self):
        return self.FPS is not None and not np.all(np.isnan(self.FPS))


def build_lookup(table, outlet):
    """
    Creates the route effectiveness lookup function for one outlet.

    Table rows with a missing effectiveness value are skipped.  A fish passage
    structure with no effectiveness values gets a lookup that is 0 everywhere.

    Parameters:
    - table (RouteEffectivenessTable)
    - outlet (str): one of 'spill', 'turb', 'RO', 'FPS'.

    Returns:
    - callable mapping a flow ratio (float or array) to route effectiveness.
    """
    if outlet not in RE_COLUMNS:
        raise ConfigurationError(f'Unknown outlet {outlet!r}, expected one of {list(RE_COLUMNS)}')
    if outlet == 'FPS' and not table.has_fps:
        logger.debug('no FPS route effectiveness, FPS lookup is zero')
        return ZeroLookup()

    q = np.asarray(table.q_ratio, dtype = float)
    values = np.asarray(getattr(table, outlet), dtype = float)
    keep = ~np.isnan(values)
    if keep.sum() < 2:
        raise ConfigurationError(
            f'Route effectiveness for {outlet} needs at least two values to interpolate')
    return RouteLookup(q[keep], values[keep])


def build_lookups(table):
    '''Route effectiveness lookups for every outlet, keyed by outlet'''
    return {outlet: build_lookup(table, outlet) for outlet in OUTLETS}
