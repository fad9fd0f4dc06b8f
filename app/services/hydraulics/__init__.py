# app/services/hydraulics/__init__.py

"""
Hydraulics module for line sizing, pump head and tube-bundle geometry.

This module includes:
- Pipe geometry and roughness lookup
- Flow properties, friction factor and pressure drop
- Service criteria checks for gas, liquid and mixed-phase lines
- Extensions for pump sizing and shell-and-tube bundles
"""

from .engine import LineSizingEngine, calculate_line_sizing
from .friction import friction_factor, friction_factor_curve
from .reference_data import DEFAULT_TABLES, ReferenceTables

__version__ = "1.0.0"
