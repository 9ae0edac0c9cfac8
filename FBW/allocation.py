# -*- coding: utf-8 -*-
"""
Created on Tue Oct 13 14:52:19 2026

Fish-bearing flow allocation among the dam outlets.

Fish-bearing flow is the part of each outlet's discharge credited with
carrying migrating fish.  Total outlet flow Q_tot is spill + turbine + RO; the
fish passage structure (FPS) flow is never added to it, it is either carved
out of the existing outlets or, for an FSC, diluted into them.
"""

import logging

from .exceptions import consistency_warning
from .records import OutletFlowAllocation
from .structures import StructureType

logger = logging.getLogger(__name__)

NEGATIVE_WEIR_SPILL = ("Some B_spill values are <0 (this can happen when you specify a 'FISH WEIR' "
                       "FPS and the spill flow is less than FPS_flow.")


def _no_structure(day, fps_flow, Q_tot):
    return OutletFlowAllocation(B_spill = day.spill_flow,
                                B_turb = day.turb_flow,
                                B_RO = day.RO_flow,
                                B_FPS = 0.,
                                Q_tot = Q_tot,
                                spill_flow = day.spill_flow,
                                turb_flow = day.turb_flow,
                                RO_flow = day.RO_flow)


def _fixed_collector(day, fps_flow, Q_tot):
    ''' The FSC recirculates attraction water on top of dam outflow.  Scaling
    every outlet and the FSC by Q_tot / (Q_tot + FPS_flow) keeps total
    fish-bearing flow equal to Q_tot, which later survival calculations need.'''
    denom = Q_tot + fps_flow
    multiplier = Q_tot / denom if denom > 0 else 0.
    return OutletFlowAllocation(B_spill = day.spill_flow * multiplier,
                                B_turb = day.turb_flow * multiplier,
                                B_RO = day.RO_flow * multiplier,
                                B_FPS = fps_flow * multiplier,
                                Q_tot = Q_tot,
                                spill_flow = day.spill_flow,
                                turb_flow = day.turb_flow,
                                RO_flow = day.RO_flow)


def _floating_surface(day, fps_flow, Q_tot):
    ''' The FSS draws from the turbines and RO in proportion to their split.
    Fish-bearing flow is clipped at zero when the FSS takes more than the
    turbines and RO carry.'''
    ph_ro = day.turb_flow + day.RO_flow
    pct_RO = day.RO_flow / ph_ro if ph_ro > 0 else 0.
    return OutletFlowAllocation(B_spill = day.spill_flow,
                                B_turb = max(0., day.turb_flow - fps_flow * (1. - pct_RO)),
                                B_RO = max(0., day.RO_flow - fps_flow * pct_RO),
                                B_FPS = fps_flow,
                                Q_tot = Q_tot,
                                spill_flow = day.spill_flow,
                                turb_flow = day.turb_flow,
                                RO_flow = day.RO_flow)


def _fixed_orifice(day, fps_flow, Q_tot):
    ''' The FSO takes its flow from spill first, then the RO, then the
    powerhouse.  The diversion is a real reduction of outlet flow so the outlet
    flows are replaced by the fish-bearing flows.'''
    spill_deficit = min(day.spill_flow - fps_flow, 0.)
    ro_deficit = min(day.RO_flow + spill_deficit, 0.)
    B_spill = max(day.spill_flow - fps_flow, 0.)
    B_RO = max(day.RO_flow + spill_deficit, 0.)
    B_turb = max(day.turb_flow + ro_deficit, 0.)
    return OutletFlowAllocation(B_spill = B_spill,
                                B_turb = B_turb,
                                B_RO = B_RO,
                                B_FPS = fps_flow,
                                Q_tot = Q_tot,
                                spill_flow = B_spill,
                                turb_flow = B_turb,
                                RO_flow = B_RO)


def _fish_weir(day, fps_flow, Q_tot):
    # weir flow comes off the spillway only, B_spill may go negative
    B_spill = day.spill_flow - fps_flow
    return OutletFlowAllocation(B_spill = B_spill,
                                B_turb = day.turb_flow,
                                B_RO = day.RO_flow,
                                B_FPS = fps_flow,
                                Q_tot = Q_tot,
                                spill_flow = B_spill,
                                turb_flow = day.turb_flow,
                                RO_flow = day.RO_flow)


ALLOCATION_HANDLERS = {StructureType.NONE: _no_structure,
                       StructureType.FSC: _fixed_collector,
                       StructureType.FSS: _floating_surface,
                       StructureType.FSO: _fixed_orifice,
                       StructureType.FISH_WEIR: _fish_weir}


def allocate(day, fps_flow, structure_type, warn = True):
    """
    Distributes the day's outlet flow into fish-bearing flow through the
    spillway, turbines, regulating outlet and fish passage structure.

    Parameters:
    - day (DailyRecord): the day's hydrology.
    - fps_flow (float): flow through the fish passage structure.
    - structure_type (StructureType or str): fish passage structure type.
    - warn (bool): raise a ConsistencyWarning when a fish weir leaves negative
      spill.  The run driver turns this off and warns once per run instead.

    Returns:
    - OutletFlowAllocation
    """
    structure_type = StructureType.parse(structure_type)
    Q_tot = day.turb_flow + day.spill_flow + day.RO_flow
    allocation = ALLOCATION_HANDLERS[structure_type](day, fps_flow, Q_tot)

    if structure_type is StructureType.FISH_WEIR and allocation.B_spill < 0:
        logger.debug('negative fish weir spill %s on %s', allocation.B_spill, day.date)
        if warn:
            consistency_warning(NEGATIVE_WEIR_SPILL)
    return allocation
