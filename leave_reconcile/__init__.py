#Turn this directory into a package by adding an __init__.py file
#Docstring for the package
"""
DRMIS / Oracle Leave Reconciliation

This package contains the core modules for:

- Loading DRMIS and Oracle Excel exports as raw grids
- Detecting headers and normalizing dates, hours and leave codes
- Reconciling leave day by day
- Building CATs correction entries and prefilling work entries

Subpackages:
- core
- cleaning
- engines
- visualization
- outputs

"""

#Import modules to be exposed at the package level
from . import core, cleaning, engines, visualization, outputs
__all__ = [
    "core",
    "cleaning",
    "engines",
    "visualization",
    "outputs",
]
