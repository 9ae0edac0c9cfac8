# -*- coding: utf-8 -*-
"""
Created on Thu Oct 15 09:12:44 2026

Builds the engine configuration from a parameter list.

The parameter list is the dictionary produced by the workbook loader:

    alt_desc          dict - collector, fps_max_elev, nets, use_temp_dist,
                             weir_start_date, weir_end_date, scenario_name
    route_specs       DataFrame indexed by RO, Turb, Spill, FPS with columns
                             max_flow, bottom_elev, normally_used
    route_eff         DataFrame - q_ratio, Spill, FPS, RO, Turb
    temp_dist         DataFrame - Date plus one column per water year type
    water_year_types  DataFrame - year, type

The workbook repeats several of these values on more than one sheet.  When a
second parameter list from another source is given as a cross check, any
disagreement is reported with a ConsistencyWarning and the values of the
primary list are used.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from .effectiveness import RouteEffectivenessTable
from .exceptions import ConfigurationError, consistency_warning
from .structures import StructureConfig, StructureType, is_missing
from .temperature import TemperatureSplit

logger = logging.getLogger(__name__)

TRUE_FLAGS = ('y', 'yes', 'true', 't', '1')
FALSE_FLAGS = ('n', 'no', 'false', 'f', '0')


def to_dataframe(data, numeric_cols=None, index_col=None):
    """Converts data (list/dict or DataFrame) to DataFrame and optionally converts columns."""
    df = data.copy() if isinstance(data, pd.DataFrame) else pd.DataFrame(data)
    if numeric_cols:
        for col in numeric_cols:
            if col in df.columns:
                df[col] = pd.to_numeric(df[col], errors='coerce')
    if index_col and index_col in df.columns:
        df = df.set_index(index_col, drop=False)
    return df


def parse_flag(value, default = False):
    '''Workbook y/n flag to bool.  Missing values give the default.'''
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if is_missing(value):
        return default
    flag = str(value).strip().lower()
    if flag in TRUE_FLAGS:
        return True
    if flag in FALSE_FLAGS:
        return False
    raise ConfigurationError(f'Expected a y/n flag, got {value!r}')


def _optional_float(value):
    if is_missing(value):
        return None
    return float(value)


def _route_spec(specs, route, col):
    if specs is None or route not in specs.index or col not in specs.columns:
        return None
    return specs.at[route, col]


def _route_specs(param_list):
    specs = param_list.get('route_specs')
    if specs is None:
        return None
    specs = to_dataframe(specs, numeric_cols = ['max_flow', 'bottom_elev'])
    if 'route' in specs.columns:
        specs = specs.set_index('route')
    return specs


@dataclass(frozen=True)
class Parameters:
    """
    Immutable configuration for distributing fish among outlets.

    Parameters:
    - structure (StructureConfig): the fish passage structure.
    - route_eff (RouteEffectivenessTable): route effectiveness by flow ratio.
    - nets (bool): nets exclude fish from turbines and RO.
    - spill_normally_used (bool): whether the spillway is normally used.
    - scenario_name (str, optional): label carried into log messages.
    """
    structure: StructureConfig
    route_eff: RouteEffectivenessTable
    nets: bool = False
    spill_normally_used: bool = True
    scenario_name: Optional[str] = None

    @property
    def structure_type(self):
        return self.structure.structure_type


def _cross_check(param_list, cross_check, collector):
    ''' Compares redundant values between two parameter lists, warns about
    every mismatch'''
    alt = param_list.get('alt_desc', {})
    other_alt = cross_check.get('alt_desc')
    if other_alt is not None:
        mismatched = []
        for key in ('collector', 'nets', 'use_temp_dist', 'weir_start_date', 'weir_end_date'):
            if key not in other_alt:
                continue
            a, b = alt.get(key), other_alt.get(key)
            if is_missing(a) and is_missing(b):
                continue
            if str(a).strip().lower() != str(b).strip().lower():
                mismatched.append(key)
        if mismatched:
            consistency_warning('Route specifications are mismatched between parameter sources (%s)! '
                                'Using values defined in the primary parameter list.' % ', '.join(mismatched),
                                collector = collector)

    other_eff = cross_check.get('route_eff')
    if other_eff is not None and param_list.get('route_eff') is not None:
        ours = RouteEffectivenessTable.from_frame(to_dataframe(param_list['route_eff'])).to_frame()
        theirs = RouteEffectivenessTable.from_frame(to_dataframe(other_eff)).to_frame()
        if not ours.equals(theirs):
            consistency_warning('Route effectiveness mismatches between parameter sources! '
                                'Using values defined in the primary parameter list.',
                                collector = collector)

    other_specs = _route_specs(cross_check)
    if other_specs is not None and 'normally_used' in other_specs.columns:
        specs = _route_specs(param_list)
        for route in other_specs.index:
            ours = parse_flag(_route_spec(specs, route, 'normally_used'), default = True)
            theirs = parse_flag(_route_spec(other_specs, route, 'normally_used'), default = True)
            if ours != theirs:
                consistency_warning("'Normally used' specifications are mismatched between parameter sources! "
                                    "Using values defined in the primary parameter list.",
                                    collector = collector)
                break


def load_parameters(param_list, cross_check = None, collector = None):
    """
    Creates engine Parameters from a parameter list.

    Parameters:
    - param_list (dict): see module docstring.
    - cross_check (dict, optional): a parameter list from a redundant source,
      compared against param_list.
    - collector (list, optional): receives the text of any warning raised.

    Returns:
    - Parameters
    """
    if 'alt_desc' not in param_list or 'route_eff' not in param_list:
        raise ConfigurationError("Parameter list must contain 'alt_desc' and 'route_eff'")

    if cross_check is not None:
        _cross_check(param_list, cross_check, collector)

    alt = param_list['alt_desc']
    specs = _route_specs(param_list)
    structure_type = StructureType.parse(alt.get('collector'))
    use_temp_split = parse_flag(alt.get('use_temp_dist'), default = False)

    temp_split = None
    if structure_type is StructureType.FSS and use_temp_split:
        logger.info('FSS with temperature split, building temperature split schedule')
        temp_dist = param_list.get('temp_dist')
        if temp_dist is None:
            raise ConfigurationError('An FSS with temperature control requires a temperature split table (temp_dist)')
        temp_split = TemperatureSplit(to_dataframe(temp_dist), param_list.get('water_year_types'))

    structure = StructureConfig(structure_type = structure_type,
                                bottom_elev = _optional_float(_route_spec(specs, 'FPS', 'bottom_elev')),
                                top_elev = _optional_float(alt.get('fps_max_elev')),
                                max_flow = _optional_float(_route_spec(specs, 'FPS', 'max_flow')),
                                weir_start = alt.get('weir_start_date'),
                                weir_end = alt.get('weir_end_date'),
                                use_temp_split = use_temp_split,
                                temp_split = temp_split)

    route_eff = RouteEffectivenessTable.from_frame(to_dataframe(param_list['route_eff'],
                                                                numeric_cols = ['q_ratio']))

    params = Parameters(structure = structure,
                        route_eff = route_eff,
                        nets = parse_flag(alt.get('nets'), default = False),
                        spill_normally_used = parse_flag(_route_spec(specs, 'Spill', 'normally_used'),
                                                         default = True),
                        scenario_name = alt.get('scenario_name'))
    logger.info('loaded parameters: structure %s, nets %s, spill normally used %s',
                structure_type.value, params.nets, params.spill_normally_used)
    return params
