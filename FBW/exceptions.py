# -*- coding: utf-8 -*-
"""
Created on Tue Oct 13 09:41:22 2026

Error and warning classes raised by the outlet distribution engine.

ConfigurationError aborts a run; malformed parameters cannot be partially
trusted.  ConsistencyWarning is informational, it is logged and collected but
daily computation continues.
"""

import logging
import warnings

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    '''Raised when structure, weir, effectiveness or input configuration is
    invalid.'''


class ConsistencyWarning(UserWarning):
    '''Non-fatal warning for inconsistent but usable inputs.'''


def consistency_warning(message, collector = None, stacklevel = 2):
    """
    Logs and raises a ConsistencyWarning without interrupting the caller.

    Parameters:
    - message (str): warning text.
    - collector (list, optional): if given, the message is appended so a run
      can surface every warning it produced.
    - stacklevel (int): passed on to warnings.warn, relative to the caller.
    """
    logger.warning(message)
    warnings.warn(message, ConsistencyWarning, stacklevel = stacklevel + 1)
    if collector is not None:
        collector.append(message)
