# app/services/hydraulics/extensions/__init__.py

"""
This module contains extensions to the core hydraulics functionality.
Extensions include:
- Pump total dynamic head, NPSH available and power
- Shell-and-tube bundle geometry (tube count, bundle and shell diameter)
"""

from .pump import (
    calculate_pump,
    total_dynamic_head,
    npsh_available,
    acceleration_head,
    hi_viscosity_correction,
)
from .tube_bundle import (
    tube_count,
    bundle_diameter,
    shell_diameter,
    tema_tube_count,
    recommended_pitch,
    recommended_baffle_spacing,
    number_of_baffles,
)
