# -*- coding: utf-8 -*-
"""
Created on Thu Oct 15 14:30:27 2026

FBW: distribution of downstream migrating fish among dam outlets.

For each day of a hydrology record, the model
    1. calculates the flow captured by the fish passage structure (FPS),
    2. redistributes outlet flow into fish-bearing flow through the spillway,
       turbines, regulating outlet (RO) and FPS,
    3. looks up route effectiveness for each outlet's share of flow, and
    4. divides the fish passing the dam that day among the outlets.

Days are independent of each other.  The input is a daily DataFrame with
columns Date, elev, outflow_flow, spill_flow, turb_flow, RO_flow,
approaching_daily and approaching_daily_postDPE, as produced upstream after
dam passage efficiency has been applied.  The output keeps the input rows and
order and adds FPS_flow and the proportion of fish through each outlet
(F_spill, F_turb, F_RO, F_FPS) plus the fish that do not pass (F_NoPass).
"""

import logging

import pandas as pd

from .allocation import NEGATIVE_WEIR_SPILL, allocate
from .distribution import ZERO_FLOW_POLICIES, ZERO_FLOW_PROPAGATE, distribute
from .effectiveness import build_lookups
from .exceptions import ConfigurationError, consistency_warning
from .parameters import Parameters, load_parameters
from .records import DAILY_COLUMNS, DailyRecord
from .structures import WEIR_DATES_MISSING, StructureType, fps_flow_detail

logger = logging.getLogger(__name__)

# structure types whose diversion really reduces the outlet flows
DIVERTING_STRUCTURES = (StructureType.FSO, StructureType.FISH_WEIR)

FLOW_COLUMNS = ['outflow_flow', 'spill_flow', 'turb_flow', 'RO_flow']


class fish_distribution():
    ''' Python class object that holds the parameters for a dam and distributes
    daily fish passage among its outlets'''

    def __init__(self, params, zero_flow = ZERO_FLOW_PROPAGATE, cross_check = None):
        """
        Parameters:
        - params (Parameters or dict): engine parameters, or a parameter list
          to be loaded with load_parameters.
        - zero_flow (str): 'propagate' or 'zero', how days without an
          effectiveness weighted flow are reported.
        - cross_check (dict, optional): a redundant parameter list compared
          against params when params is a parameter list.
        """
        if zero_flow not in ZERO_FLOW_POLICIES:
            raise ValueError(f'zero_flow must be one of {ZERO_FLOW_POLICIES}, got {zero_flow!r}')
        self.warnings = []
        if not isinstance(params, Parameters):
            params = load_parameters(params, cross_check = cross_check, collector = self.warnings)
        self.params = params
        self.zero_flow = zero_flow
        self.lookups = build_lookups(params.route_eff)
        self.results = []
        self.undefined_days = []

        if params.structure.weir_always_active:
            self.warnings.append(WEIR_DATES_MISSING)

    @property
    def structure(self):
        return self.params.structure

    def _validate(self, fish_postDPE):
        missing = [c for c in DAILY_COLUMNS if c not in fish_postDPE.columns]
        if missing:
            raise ConfigurationError(f'Daily hydrology is missing required columns: {missing}')

        flows = fish_postDPE[FLOW_COLUMNS].apply(pd.to_numeric, errors = 'coerce')
        bad = (flows.isna() | (flows < 0)).any()
        if bad.any():
            raise ConfigurationError('Daily flows must be non-negative numbers, check columns: %s'
                                     % list(bad[bad].index))

        approaching = pd.to_numeric(fish_postDPE['approaching_daily'], errors = 'coerce')
        passing = pd.to_numeric(fish_postDPE['approaching_daily_postDPE'], errors = 'coerce')
        excess = passing > approaching
        if excess.any():
            raise ConfigurationError('approaching_daily_postDPE exceeds approaching_daily on %s days, first on %s'
                                     % (int(excess.sum()), fish_postDPE.loc[excess, 'Date'].iloc[0]))

    def _simulate(self, fish_postDPE, verbose):
        self._validate(fish_postDPE)
        cfg = self.structure
        logger.info('distributing fish for %s days, structure %s%s',
                    len(fish_postDPE),
                    cfg.structure_type.value,
                    '' if self.params.scenario_name is None else ', scenario %s' % self.params.scenario_name)

        results = []
        allocations = []
        undefined_days = []
        negative_spill = False
        for _, row in fish_postDPE.iterrows():
            day = DailyRecord.from_row(row)
            fps = fps_flow_detail(day, cfg)
            allocation = allocate(day, fps.flow, cfg.structure_type, warn = False)
            if cfg.structure_type is StructureType.FISH_WEIR and allocation.B_spill < 0:
                negative_spill = True
            result = distribute(day,
                                allocation,
                                self.lookups,
                                nets = self.params.nets,
                                spill_normally_used = self.params.spill_normally_used,
                                verbose = verbose,
                                fps = fps,
                                zero_flow = self.zero_flow)
            if result.undefined:
                undefined_days.append(day.date)
            results.append(result)
            allocations.append(allocation)

        # a final check, spill flow lower than weir flow
        if negative_spill:
            consistency_warning(NEGATIVE_WEIR_SPILL, collector = self.warnings)
        if undefined_days:
            logger.info('%s days with no effectiveness weighted flow, fish distribution undefined (%s)',
                        len(undefined_days), self.zero_flow)

        self.results = results
        self.undefined_days = undefined_days
        logger.info('distributed fish for %s days', len(results))
        return results, allocations

    def daily(self, fish_postDPE, verbose = False):
        """
        Distributes fish for every day of fish_postDPE.

        Returns:
        - list of DistributionResult (VerboseDistributionResult if verbose),
          one per input row in input order.
        """
        results, _ = self._simulate(fish_postDPE, verbose)
        return results

    def run(self, fish_postDPE, verbose = False):
        """
        Distributes fish for every day of fish_postDPE and returns the input
        data with the distribution appended.

        Parameters:
        - fish_postDPE (DataFrame): daily hydrology and fish approaching.
        - verbose (bool): also return fish-bearing flow (B_*), flow shares
          (pB_*), route effectiveness (RE_*), Q_tot, adj_total and the FPS
          gates (adequate_elev, weir_active, temp_split).

        Returns:
        - DataFrame
        """
        results, allocations = self._simulate(fish_postDPE, verbose)
        out = fish_postDPE.copy()

        # FSO and fish weir flow is taken out of the outlets themselves
        if self.structure.structure_type in DIVERTING_STRUCTURES:
            for col in ('spill_flow', 'turb_flow', 'RO_flow'):
                out[col] = [getattr(a, col) for a in allocations]

        dist = pd.DataFrame([r.as_dict() for r in results], index = fish_postDPE.index)
        if dist.empty:
            return out
        dist = dist.drop(columns = 'date')
        # results from an earlier run are replaced, not duplicated
        out = out.drop(columns = dist.columns.intersection(out.columns))
        return pd.concat([out, dist], axis = 1)


def distribute_fish_outlets(fish_postDPE, param_list, verbose = False, cross_check = None,
                            zero_flow = ZERO_FLOW_PROPAGATE):
    """
    Calculates the distribution of fish through the outlets of a dam.

    First distributes fish-bearing flow through the available outlets,
    including the fish passage structure, then distributes the fish passing
    the dam according to route effectiveness and fish-bearing flow.

    Parameters:
    - fish_postDPE (DataFrame): daily hydrology and fish approaching.
    - param_list (dict or Parameters): see FBW.parameters.
    - verbose (bool): include intermediate columns.
    - cross_check (dict, optional): redundant parameter list to compare.
    - zero_flow (str): 'propagate' or 'zero'.

    Returns:
    - DataFrame
    """
    dist = fish_distribution(param_list, zero_flow = zero_flow, cross_check = cross_check)
    return dist.run(fish_postDPE, verbose = verbose)
