# -*- coding: utf-8 -*-
"""
Created on Wed Oct 14 13:40:08 2026

Distribution of fish approaching the dam among its outlets.

Each outlet's share of the fish that pass the dam on a day is proportional to
its share of fish-bearing flow weighted by its route effectiveness:

    pB_X = B_X / Q_tot
    RE_X = lookup_X(pB_X)
    F_X  = approaching_daily_postDPE * RE_X * pB_X / sum(RE * pB)

so F_spill + F_turb + F_RO + F_FPS equals the fish passing the dam.  Fish that
approach but are not counted as passing (dam passage efficiency) are F_NoPass.

Nets exclude fish from the turbines and regulating outlet.  If the spillway is
not normally used it keeps its effectiveness weighted share and the fish
passage structure takes the rest; otherwise every passing fish goes through
the fish passage structure.
"""

import logging

import numpy as np

from .records import DistributionResult, FPSFlow, OUTLETS, VerboseDistributionResult

logger = logging.getLogger(__name__)

# zero flow day policies
ZERO_FLOW_PROPAGATE = 'propagate'
ZERO_FLOW_ZERO = 'zero'
ZERO_FLOW_POLICIES = (ZERO_FLOW_PROPAGATE, ZERO_FLOW_ZERO)


def flow_shares(allocation):
    '''Share of total outlet flow carried as fish-bearing flow by each outlet,
    NaN for every outlet when there is no flow'''
    Q_tot = allocation.Q_tot
    shares = {}
    for outlet in OUTLETS:
        B = getattr(allocation, f'B_{outlet}')
        shares[outlet] = B / Q_tot if Q_tot > 0 else np.nan
    return shares


def distribute(day,
               allocation,
               lookups,
               nets = False,
               spill_normally_used = True,
               verbose = False,
               fps = None,
               zero_flow = ZERO_FLOW_PROPAGATE):
    """
    Calculates the proportion of the cohort passing through each outlet.

    Parameters:
    - day (DailyRecord): the day's hydrology and fish approaching.
    - allocation (OutletFlowAllocation): fish-bearing flow by outlet.
    - lookups (dict): route effectiveness lookup for each outlet key.
    - nets (bool): nets exclude fish from the turbines and RO.
    - spill_normally_used (bool): whether the spillway is normally used; only
      relevant with nets.
    - verbose (bool): return a VerboseDistributionResult with intermediate
      flows, flow shares and route effectiveness.
    - fps (FPSFlow or float, optional): the day's FPS flow as calculated,
      reported as FPS_flow.  Defaults to the fish-bearing FPS flow.
    - zero_flow (str): 'propagate' leaves route proportions NaN on days where
      the effectiveness weighted total is zero or undefined, 'zero' sets them
      to 0.  Such days are flagged undefined either way.

    Returns:
    - DistributionResult or VerboseDistributionResult
    """
    if zero_flow not in ZERO_FLOW_POLICIES:
        raise ValueError(f'zero_flow must be one of {ZERO_FLOW_POLICIES}, got {zero_flow!r}')
    if fps is None:
        fps = FPSFlow(flow = allocation.B_FPS)
    elif not isinstance(fps, FPSFlow):
        fps = FPSFlow(flow = float(fps))

    post = day.approaching_daily_postDPE
    pB = flow_shares(allocation)
    RE = {outlet: lookups[outlet](pB[outlet]) for outlet in OUTLETS}
    adj_total = sum(RE[outlet] * pB[outlet] for outlet in OUTLETS)

    undefined = not np.isfinite(adj_total) or adj_total == 0
    if undefined:
        F = {outlet: np.nan for outlet in OUTLETS}
    else:
        F = {outlet: post * RE[outlet] * pB[outlet] / adj_total for outlet in OUTLETS}

    if nets:
        F['turb'] = 0.
        F['RO'] = 0.
        if spill_normally_used:
            F['spill'] = 0.
            F['FPS'] = post
            undefined = False
        else:
            F['FPS'] = post - F['spill']

    if undefined:
        logger.debug('undefined distribution on %s, Q_tot = %s, adj_total = %s',
                     day.date, allocation.Q_tot, adj_total)
        if zero_flow == ZERO_FLOW_ZERO:
            F = {outlet: 0. for outlet in OUTLETS}

    common = dict(date = day.date,
                  FPS_flow = fps.flow,
                  F_spill = F['spill'],
                  F_turb = F['turb'],
                  F_RO = F['RO'],
                  F_FPS = F['FPS'],
                  F_NoPass = day.approaching_daily - post,
                  undefined = undefined)
    if not verbose:
        return DistributionResult(**common)

    return VerboseDistributionResult(Q_tot = allocation.Q_tot,
                                     B_spill = allocation.B_spill,
                                     B_turb = allocation.B_turb,
                                     B_RO = allocation.B_RO,
                                     B_FPS = allocation.B_FPS,
                                     pB_spill = pB['spill'],
                                     pB_turb = pB['turb'],
                                     pB_RO = pB['RO'],
                                     pB_FPS = pB['FPS'],
                                     RE_spill = RE['spill'],
                                     RE_turb = RE['turb'],
                                     RE_RO = RE['RO'],
                                     RE_FPS = RE['FPS'],
                                     adj_total = adj_total,
                                     adequate_elev = fps.adequate_elev,
                                     weir_active = fps.weir_active,
                                     temp_split = fps.temp_split,
                                     **common)
