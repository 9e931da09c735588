"""Mock form data fixtures for testing.

One complete, valid form per template plus a few partial/invalid variants.
"""

from typing import Any, Dict


# =============================================================================
# DECK REFRESH - 20 x 12 ft, good condition, semi-transparent stain
# =============================================================================

DECK_REFRESH_FORM: Dict[str, Any] = {
    "deckLength": 20,
    "deckWidth": 12,
    "deckCondition": "good",
    "stainType": "semi-transparent",
    "railingRefresh": False,
    "pressureWashing": False,
    "images": [],
    "notes": "Back deck facing the garden",
}

DECK_REFRESH_WITH_ADDONS_FORM: Dict[str, Any] = {
    **DECK_REFRESH_FORM,
    "railingRefresh": True,
    "railingLength": 40,
    "pressureWashing": True,
}


# =============================================================================
# FIREPIT - stone ring, 12 ft seating, stone benches, landscaping, wood
# =============================================================================

FIREPIT_FORM: Dict[str, Any] = {
    "firepitType": "stone-ring",
    "seatingArea": 12,
    "seatingType": "stone-benches",
    "landscaping": True,
    "lighting": False,
    "fuelType": "wood",
}

FIREPIT_GAS_FORM: Dict[str, Any] = {
    "firepitType": "metal-insert",
    "firepitSize": "5ft",
    "seatingArea": 10,
    "seatingType": "paver-patio",
    "landscaping": False,
    "lighting": True,
    "fuelType": "gas",
}


# =============================================================================
# LAWN MOWING - 50 x 30 ft, medium grass, slight slope
# =============================================================================

LAWN_MOWING_FORM: Dict[str, Any] = {
    "lawnLength": 50,
    "lawnWidth": 30,
    "grassHeight": "medium",
    "terrain": "slight-slope",
    "obstacles": ["trees", "fence"],
    "bagClippings": True,
}


# =============================================================================
# GARDEN BED - 12 x 4 ft raised cedar bed
# =============================================================================

GARDEN_BED_FORM: Dict[str, Any] = {
    "bedLength": 12,
    "bedWidth": 4,
    "bedStyle": "raised-wood",
    "soilPrep": "amended",
    "plantDensity": "standard",
    "siteCondition": "grass",
    "mulch": True,
    "edging": True,
    "edgingLength": 32,
    "irrigation": False,
}


# =============================================================================
# PRESSURE WASHING - 40 x 20 ft driveway, heavy dirt, moderate access
# =============================================================================

PRESSURE_WASHING_FORM: Dict[str, Any] = {
    "surfaceType": "driveway",
    "surfaceLength": 40,
    "surfaceWidth": 20,
    "dirtLevel": "heavy",
    "accessDifficulty": "moderate",
    "specialServices": ["oil-stain-removal", "sealing"],
}


FORMS_BY_TEMPLATE: Dict[str, Dict[str, Any]] = {
    "deck-refresh": DECK_REFRESH_FORM,
    "firepit": FIREPIT_FORM,
    "lawn-mowing": LAWN_MOWING_FORM,
    "garden-bed": GARDEN_BED_FORM,
    "pressure-washing": PRESSURE_WASHING_FORM,
}
