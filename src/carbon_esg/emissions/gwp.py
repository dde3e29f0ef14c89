# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Global Warming Potential constants (100-year horizon).

CH4 and N2O use the values applied by the CBAM default-factor tables
(IPCC AR4).  Refrigerant blends follow the Base Carbone figures.
"""

from __future__ import annotations

from typing import Mapping, Optional

from carbon_esg.data.models import Gas

# ---------------------------------------------------------------------------
# GWP-100 values (kg CO2e per kg of gas)
# ---------------------------------------------------------------------------
GWP_CO2 = 1.0
GWP_CH4 = 25.0
GWP_N2O = 298.0
GWP_SF6 = 22800.0

DEFAULT_GWP: dict[Gas, float] = {
    Gas.CO2: GWP_CO2,
    Gas.CH4: GWP_CH4,
    Gas.N2O: GWP_N2O,
    Gas.SF6: GWP_SF6,
    # HFCs
    Gas.R134A: 1430.0,
    Gas.R404A: 3922.0,
    Gas.R410A: 2088.0,
    Gas.R407C: 1774.0,
    Gas.R32: 675.0,
    # HCFC / CFCs
    Gas.R22: 1810.0,
    Gas.R11: 4750.0,
    Gas.R12: 10900.0,
}


def gwp_for(gas: Gas, table: Optional[Mapping[Gas, float]] = None) -> float:
    """Return the GWP multiplier for *gas*.

    *table* entries override the defaults; gases missing from both raise
    ``KeyError`` since every :class:`Gas` member has a default.
    """
    if table is not None and gas in table:
        return table[gas]
    return DEFAULT_GWP[gas]


def to_co2e(
    mass: float, gas: Gas, table: Optional[Mapping[Gas, float]] = None
) -> float:
    """Convert a mass of *gas* into CO2-equivalent mass."""
    return mass * gwp_for(gas, table)
