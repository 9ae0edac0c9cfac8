# -*- coding: utf-8 -*-
"""
Created on Thu Oct 15 16:10:53 2026
"""

# setup.py
from setuptools import setup, find_packages

setup(
    name='FBW',
    version='0.1.0',
    packages=find_packages(exclude=['tests']),
    install_requires=[
        'numpy',
        'pandas',
        'scipy',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
