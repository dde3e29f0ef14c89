"""Scoring weight constants for the ESG composite.

The three pillar weights must sum to 1.0.  Indicator weights inside a
pillar are relative and are normalised by the pillar scorer.
"""

# ---------------------------------------------------------------------------
# Pillar display names (single source of truth for all modules)
# ---------------------------------------------------------------------------
PILLAR_NAMES = {
    "E": "Environment",
    "S": "Social",
    "G": "Governance",
}

# ---------------------------------------------------------------------------
# Pillar weights in the composite score
# ---------------------------------------------------------------------------
E_WEIGHT = 0.40  # Environment
S_WEIGHT = 0.30  # Social
G_WEIGHT = 0.30  # Governance

PILLAR_WEIGHTS = {"E": E_WEIGHT, "S": S_WEIGHT, "G": G_WEIGHT}

# Allowed drift of the weight sum from 1.0
WEIGHT_SUM_TOLERANCE = 1e-6

# ---------------------------------------------------------------------------
# Sector multipliers for water- and waste-intensive industries
# ---------------------------------------------------------------------------
_WATER_WASTE_HEAVY = {
    "E4": 1.5,   # Water consumption
    "E5": 1.5,   # Water recycling
    "E9": 1.5,   # Waste production
    "E10": 1.5,  # Waste valorisation
}

SECTOR_WEIGHT_MULTIPLIERS: dict[str, dict[str, float]] = {
    "textile": dict(_WATER_WASTE_HEAVY),
    "food_processing": dict(_WATER_WASTE_HEAVY),
}
