# -*- coding: utf-8 -*-
"""
Created on Thu Oct 15 16:02:11 2026

FBW: daily distribution of downstream migrating fish among the outlets of a
hydroelectric dam.
"""

from .allocation import allocate
from .distribution import distribute
from .effectiveness import RouteEffectivenessTable, build_lookup, build_lookups
from .exceptions import ConfigurationError, ConsistencyWarning
from .fbw import distribute_fish_outlets, fish_distribution
from .parameters import Parameters, load_parameters
from .records import (DailyRecord, DistributionResult, OutletFlowAllocation,
                      VerboseDistributionResult)
from .structures import StructureConfig, StructureType, compute_fps_flow
from .temperature import TemperatureSplit
