# -*- coding: utf-8 -*-
"""
Created on Wed Oct 14 08:17:35 2026

Daily temperature split lookup for floating surface structures (FSS).

When temperature control is active, part of the outflow is withdrawn from
deeper in the forebay and is not available to the FSS.  The fraction withdrawn
for temperature control on a given day depends on the water year type of that
calendar year (e.g. ABUNDANT, ADEQUATE, DEFICIT, INSUFFICIENT).

The split table lists fractions by date for each water year type.  Only the
month and day of each table date are used; a simulated day takes the fraction
of the latest table row on or before its month-day, and days before the first
row take the last row of the table (the schedule repeats every year).
"""

import logging

import numpy as np
import pandas as pd

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _month_day(date):
    return date.month * 100 + date.day


class TemperatureSplit():
    ''' Python class object that holds the temperature split schedule and the
    water year type of each simulated year'''

    def __init__(self, temp_dist, water_year_types):
        """
        Parameters:
        - temp_dist (DataFrame): column 'Date' plus one column of split
          fractions per water year type.
        - water_year_types (DataFrame or dict): columns 'year' and 'type', or a
          mapping of year to type.
        """
        if temp_dist is None or 'Date' not in temp_dist.columns:
            raise ConfigurationError("Temperature split table must have a 'Date' column")

        dist = temp_dist.copy()
        dist.columns = [c if c == 'Date' else str(c).strip().upper() for c in dist.columns]
        type_cols = [c for c in dist.columns if c != 'Date']

        # remove rows with no date or no fractions at all
        dist = dist.dropna(subset = ['Date'])
        dist = dist.dropna(how = 'all', subset = type_cols)
        if dist.empty:
            raise ConfigurationError("Temperature split table has no usable rows")

        # insufficient years are halfway between adequate and deficit
        if 'INSUFFICIENT' not in dist.columns and {'ADEQUATE', 'DEFICIT'} <= set(dist.columns):
            dist['INSUFFICIENT'] = (dist['ADEQUATE'] + dist['DEFICIT']) / 2.

        dates = pd.to_datetime(dist['Date'])
        dist['month_day'] = [_month_day(d) for d in dates]
        dist = dist.drop(columns = 'Date')
        dist = dist.drop_duplicates(subset = 'month_day', keep = 'last')
        dist = dist.sort_values(by = 'month_day').reset_index(drop = True)

        self.temp_dist = dist
        self._month_days = dist['month_day'].to_numpy()
        self.water_year_types = self._year_types(water_year_types)
        logger.debug('temperature split table with %s rows and types %s',
                     len(dist), [c for c in dist.columns if c != 'month_day'])

    @staticmethod
    def _year_types(water_year_types):
        if water_year_types is None:
            raise ConfigurationError("Water year types are required for the temperature split")
        if isinstance(water_year_types, pd.DataFrame):
            pairs = zip(water_year_types['year'], water_year_types['type'])
        else:
            pairs = dict(water_year_types).items()
        return {int(float(year)): str(wy_type).strip().upper() for year, wy_type in pairs}

    def water_year_type(self, date):
        '''Water year type of the calendar year containing date'''
        try:
            return self.water_year_types[date.year]
        except KeyError:
            raise ConfigurationError(f"No water year type given for year {date.year}")

    def split(self, date):
        """
        Fraction of outflow withdrawn for temperature control on date.

        Parameters:
        - date (Timestamp): simulated day.

        Returns:
        - float: the split fraction for the day's water year type.
        """
        date = pd.Timestamp(date)
        wy_type = self.water_year_type(date)
        if wy_type not in self.temp_dist.columns:
            raise ConfigurationError(f"No temperature split column for water year type {wy_type}")

        idx = np.searchsorted(self._month_days, _month_day(date), side = 'right') - 1
        if idx < 0:
            # before the first row of the schedule, carry the end of the year over
            idx = len(self._month_days) - 1
        value = self.temp_dist.at[idx, wy_type]
        if pd.isna(value):
            raise ConfigurationError(f"Temperature split for {wy_type} on {date.date()} is missing")
        return float(value)
