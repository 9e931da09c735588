"""
Project template catalog for RenoQuote.

Static, declarative data: the form schema and pricing model of every
project template offered to customers. Prices are USD.

Each template's `pricing` block is read only by that template's own
calculation handler in services/estimate_calculator.py, so its shape differs
per template. `pricedFields` lists the select/radio/checkbox-group fields
whose option values index into a pricing table; the catalog tests check that
every option has an entry.
"""

from typing import Any, Dict, List

from models.template import Template


# =============================================================================
# Shared field definitions
# =============================================================================


def _photos_field(label: str = "Upload Photos") -> Dict[str, Any]:
    return {
        "id": "images",
        "label": label,
        "type": "file",
        "accept": "image/*",
        "multiple": True,
        "required": False,
        "maxFiles": 5,
    }


def _notes_field(field_id: str = "notes", label: str = "Additional Notes",
                 placeholder: str = "Any specific requirements or concerns...") -> Dict[str, Any]:
    return {
        "id": field_id,
        "label": label,
        "type": "textarea",
        "placeholder": placeholder,
        "required": False,
    }


# =============================================================================
# Deck Refresh (area-based)
# =============================================================================

DECK_REFRESH: Dict[str, Any] = {
    "id": "deck-refresh",
    "title": "Deck Refresh",
    "description": "Revitalize your existing deck with new stain, repairs, and upgrades",
    "category": "exterior",
    "estimatedTime": "1-2 days",
    "complexity": "medium",
    "icon": "🏠",
    "fields": [
        {"id": "deckLength", "label": "Deck Length", "type": "number", "unit": "feet",
         "required": True, "min": 8, "max": 50, "step": 1, "placeholder": "20"},
        {"id": "deckWidth", "label": "Deck Width", "type": "number", "unit": "feet",
         "required": True, "min": 6, "max": 30, "step": 1, "placeholder": "12"},
        {"id": "deckCondition", "label": "Current Deck Condition", "type": "select", "required": True,
         "options": [
             {"value": "excellent", "label": "Excellent - Just needs cleaning/staining"},
             {"value": "good", "label": "Good - Minor repairs needed"},
             {"value": "fair", "label": "Fair - Several boards need replacement"},
             {"value": "poor", "label": "Poor - Major structural repairs needed"},
         ]},
        {"id": "stainType", "label": "Stain/Finish Type", "type": "select", "required": True,
         "options": [
             {"value": "transparent", "label": "Transparent Stain"},
             {"value": "semi-transparent", "label": "Semi-Transparent Stain"},
             {"value": "solid", "label": "Solid Stain"},
             {"value": "paint", "label": "Exterior Paint"},
         ]},
        {"id": "railingRefresh", "label": "Include Railing Refresh", "type": "checkbox", "required": False},
        {"id": "railingLength", "label": "Total Railing Length", "type": "number", "unit": "linear feet",
         "required": False, "min": 0, "max": 200, "step": 1, "placeholder": "40",
         "dependsOn": "railingRefresh"},
        {"id": "pressureWashing", "label": "Include Pressure Washing", "type": "checkbox", "required": False},
        _photos_field(),
        _notes_field(),
    ],
    "pricing": {
        "labor_hours": {
            "base": 8,           # standard deck
            "per_sq_ft": 0.15,
            "conditions": {
                "excellent": 1.0,
                "good": 1.2,
                "fair": 1.5,
                "poor": 2.0,
            },
        },
        "materials": {
            "stain": {
                "transparent": {"price_per_sq_ft": 3, "description": "Transparent wood stain"},
                "semi-transparent": {"price_per_sq_ft": 4, "description": "Semi-transparent wood stain"},
                "solid": {"price_per_sq_ft": 5, "description": "Solid color wood stain"},
                "paint": {"price_per_sq_ft": 6, "description": "Exterior deck paint"},
            },
            "supplies": {
                "brushes": {"price": 45, "description": "Professional brushes and rollers"},
                "sandpaper": {"price_per_sq_ft": 0.5, "description": "Sandpaper and prep materials"},
                "cleaner": {"price": 25, "description": "Deck cleaner and prep solution"},
            },
        },
        "additional_services": {
            "railing_refresh": {"labor_hours": 1, "material_cost_per_ft": 3},
            "pressure_washing": {"labor_hours": 2, "material_cost": 50},
        },
        "transportation": 50,
        "disposal": 75,
    },
    "pricedFields": {
        "deckCondition": "labor_hours.conditions",
        "stainType": "materials.stain",
    },
}


# =============================================================================
# Outdoor Firepit (count/size-based)
# =============================================================================

FIREPIT: Dict[str, Any] = {
    "id": "firepit",
    "title": "Outdoor Firepit",
    "description": "Build a cozy firepit area with seating and basic landscaping",
    "category": "exterior",
    "estimatedTime": "2-3 days",
    "complexity": "medium",
    "icon": "🔥",
    "fields": [
        {"id": "firepitType", "label": "Firepit Type", "type": "select", "required": True,
         "options": [
             {"value": "stone-ring", "label": "Natural Stone Ring"},
             {"value": "brick-circle", "label": "Brick Circle"},
             {"value": "metal-insert", "label": "Metal Insert with Stone Surround"},
             {"value": "custom-built", "label": "Custom Built-in"},
         ]},
        {"id": "firepitSize", "label": "Firepit Diameter", "type": "select", "required": True,
         "options": [
             {"value": "3ft", "label": "3 feet - Intimate (4-6 people)"},
             {"value": "4ft", "label": "4 feet - Standard (6-8 people)"},
             {"value": "5ft", "label": "5 feet - Large (8-10 people)"},
             {"value": "6ft", "label": "6+ feet - Extra Large (10+ people)"},
         ]},
        {"id": "seatingArea", "label": "Seating Area Size", "type": "number", "unit": "diameter in feet",
         "required": True, "min": 8, "max": 20, "step": 1, "placeholder": "12"},
        {"id": "seatingType", "label": "Seating Type", "type": "select", "required": True,
         "options": [
             {"value": "gravel-pad", "label": "Gravel Pad (bring your own chairs)"},
             {"value": "stone-benches", "label": "Built-in Stone Benches"},
             {"value": "log-benches", "label": "Natural Log Benches"},
             {"value": "paver-patio", "label": "Paver Patio Base"},
         ]},
        {"id": "landscaping", "label": "Basic Landscaping", "type": "checkbox", "required": False,
         "description": "Includes decorative plants around the firepit area"},
        {"id": "lighting", "label": "Add Pathway Lighting", "type": "checkbox", "required": False,
         "description": "Solar or low-voltage LED pathway lights"},
        {"id": "fuelType", "label": "Fuel Type", "type": "select", "required": True,
         "options": [
             {"value": "wood", "label": "Wood Burning (traditional)"},
             {"value": "gas", "label": "Natural Gas (requires gas line)"},
             {"value": "propane", "label": "Propane (portable tank)"},
         ]},
        _photos_field("Upload Inspiration Photos"),
        _notes_field("location", "Preferred Location in Yard", "Describe where you want the firepit..."),
    ],
    "pricing": {
        "labor_hours": {
            "base": 16,
            "seating_prep": 2,   # hours per 10 sq ft of seating area
            "landscaping": 4,
            "lighting": 3,
        },
        "materials": {
            "firepit": {
                "stone-ring": {"price": 800, "description": "Natural stone firepit ring"},
                "brick-circle": {"price": 600, "description": "Brick circular firepit"},
                "metal-insert": {"price": 1000, "description": "Metal insert with stone surround"},
                "custom-built": {"price": 1500, "description": "Custom built-in firepit"},
            },
            "seating": {
                "gravel-pad": {"price": 150, "description": "Gravel and landscape fabric"},
                "stone-benches": {"price": 400, "description": "Natural stone benches"},
                "log-benches": {"price": 300, "description": "Natural log benches"},
                "paver-patio": {"price": 600, "description": "Paver patio materials"},
            },
            "addons": {
                "landscaping": {"price": 300, "description": "Plants and landscaping materials"},
                "lighting": {"price": 250, "description": "Pathway lighting kit"},
            },
            "fuel": {
                "wood": {"price": 0, "labor_hours": 0, "description": "Wood burning (no setup)"},
                "gas": {"price": 400, "labor_hours": 4, "description": "Gas line installation materials"},
                "propane": {"price": 200, "labor_hours": 0, "description": "Propane setup kit"},
            },
        },
        # Unselected size prices at the 3ft baseline
        "size_multipliers": {
            "3ft": 1.0,
            "4ft": 1.15,
            "5ft": 1.3,
            "6ft": 1.5,
        },
        "transportation": 75,   # heavy materials
        "disposal": 150,
    },
    "pricedFields": {
        "firepitType": "materials.firepit",
        "firepitSize": "size_multipliers",
        "seatingType": "materials.seating",
        "fuelType": "materials.fuel",
    },
}


# =============================================================================
# Lawn Mowing (rate-based)
# =============================================================================

LAWN_MOWING: Dict[str, Any] = {
    "id": "lawn-mowing",
    "title": "Lawn Mowing Service",
    "description": "Professional lawn care with customizable scheduling",
    "category": "maintenance",
    "estimatedTime": "2-4 hours",
    "complexity": "low",
    "icon": "🌱",
    "fields": [
        {"id": "lawnLength", "label": "Lawn Length", "type": "number", "unit": "feet",
         "required": True, "min": 10, "max": 500, "step": 1, "placeholder": "50"},
        {"id": "lawnWidth", "label": "Lawn Width", "type": "number", "unit": "feet",
         "required": True, "min": 10, "max": 500, "step": 1, "placeholder": "30"},
        {"id": "grassHeight", "label": "Current Grass Height", "type": "select", "required": True,
         "options": [
             {"value": "short", "label": "Short - Regular maintenance"},
             {"value": "medium", "label": "Medium - A few weeks of growth"},
             {"value": "tall", "label": "Tall - Overgrown"},
         ]},
        {"id": "terrain", "label": "Terrain", "type": "radio", "required": True,
         "options": [
             {"value": "flat", "label": "Flat"},
             {"value": "slight-slope", "label": "Slight Slope"},
             {"value": "steep", "label": "Steep"},
         ]},
        {"id": "obstacles", "label": "Obstacles to Mow Around", "type": "checkbox-group", "required": False,
         "options": [
             {"value": "trees", "label": "Trees"},
             {"value": "flower-beds", "label": "Flower Beds"},
             {"value": "fence", "label": "Fence Line"},
             {"value": "decorations", "label": "Lawn Decorations"},
         ]},
        {"id": "bagClippings", "label": "Bag and Remove Clippings", "type": "checkbox", "required": False},
        _photos_field(),
        _notes_field(),
    ],
    "pricing": {
        "labor_hours": {
            "base": 0,
            "per_sq_ft": 0.002,   # 500 sq ft per hour
            "grass_height_multiplier": {
                "short": 1.0,
                "medium": 1.3,
                "tall": 1.6,
            },
            "terrain_multiplier": {
                "flat": 1.0,
                "slight-slope": 1.2,
                "steep": 1.5,
            },
            "obstacles": {        # additional hours
                "trees": 0.5,
                "flower-beds": 0.75,
                "fence": 1.0,
                "decorations": 0.25,
            },
        },
        "materials": {
            "fuel": {"price": 15, "description": "Fuel and equipment costs"},
        },
        "clipping_disposal": 20,   # per service
        "transportation": 50,
        "disposal": 0,
    },
    "pricedFields": {
        "grassHeight": "labor_hours.grass_height_multiplier",
        "terrain": "labor_hours.terrain_multiplier",
        "obstacles": "labor_hours.obstacles",
    },
}


# =============================================================================
# Garden Bed (area-based)
# =============================================================================

GARDEN_BED: Dict[str, Any] = {
    "id": "garden-bed",
    "title": "Garden Bed",
    "description": "Create beautiful garden beds with plants and flowers",
    "category": "landscaping",
    "estimatedTime": "1 day",
    "complexity": "low",
    "icon": "🌸",
    "fields": [
        {"id": "bedLength", "label": "Bed Length", "type": "number", "unit": "feet",
         "required": True, "min": 4, "max": 50, "step": 1, "placeholder": "12"},
        {"id": "bedWidth", "label": "Bed Width", "type": "number", "unit": "feet",
         "required": True, "min": 2, "max": 20, "step": 1, "placeholder": "4"},
        {"id": "bedStyle", "label": "Bed Style", "type": "select", "required": True,
         "options": [
             {"value": "in-ground", "label": "In-Ground Bed"},
             {"value": "raised-wood", "label": "Raised Cedar Bed"},
             {"value": "raised-stone", "label": "Raised Stone Bed"},
         ]},
        {"id": "soilPrep", "label": "Soil Preparation", "type": "select", "required": True,
         "options": [
             {"value": "basic", "label": "Basic - Till and level existing soil"},
             {"value": "amended", "label": "Amended - Add compost"},
             {"value": "premium", "label": "Premium - Replace with organic blend"},
         ]},
        {"id": "plantDensity", "label": "Planting Density", "type": "select", "required": True,
         "options": [
             {"value": "sparse", "label": "Sparse"},
             {"value": "standard", "label": "Standard"},
             {"value": "dense", "label": "Dense"},
         ]},
        {"id": "siteCondition", "label": "Current Site Condition", "type": "select", "required": True,
         "options": [
             {"value": "clear", "label": "Clear soil"},
             {"value": "grass", "label": "Grass to remove"},
             {"value": "overgrown", "label": "Overgrown with weeds/roots"},
         ]},
        {"id": "mulch", "label": "Add Mulch Layer", "type": "checkbox", "required": False},
        {"id": "edging", "label": "Add Bed Edging", "type": "checkbox", "required": False},
        {"id": "edgingLength", "label": "Edging Length", "type": "number", "unit": "linear feet",
         "required": False, "min": 0, "max": 200, "step": 1, "placeholder": "32",
         "dependsOn": "edging"},
        {"id": "irrigation", "label": "Install Drip Irrigation", "type": "checkbox", "required": False},
        _photos_field(),
        _notes_field(),
    ],
    "pricing": {
        "labor_hours": {
            "base": 4,
            "per_sq_ft": 0.1,
            "site_condition": {
                "clear": 1.0,
                "grass": 1.3,
                "overgrown": 1.7,
            },
            "irrigation": 2,
            "edging_per_ft": 0.05,
        },
        "materials": {
            "bed_style": {
                "in-ground": {"price_per_sq_ft": 1, "description": "Landscape fabric and bed prep"},
                "raised-wood": {"price_per_sq_ft": 6, "description": "Cedar raised bed lumber"},
                "raised-stone": {"price_per_sq_ft": 10, "description": "Stone block raised bed"},
            },
            "soil": {
                "basic": {"price_per_sq_ft": 2, "description": "Garden soil top-up"},
                "amended": {"price_per_sq_ft": 3.5, "description": "Soil with compost amendment"},
                "premium": {"price_per_sq_ft": 5, "description": "Premium organic soil blend"},
            },
            "plants": {
                "sparse": {"price_per_sq_ft": 3, "description": "Plants and flowers (sparse)"},
                "standard": {"price_per_sq_ft": 5, "description": "Plants and flowers (standard)"},
                "dense": {"price_per_sq_ft": 8, "description": "Plants and flowers (dense)"},
            },
            "supplies": {
                "fertilizer": {"price": 35, "description": "Starter fertilizer"},
            },
            "addons": {
                "mulch": {"price_per_sq_ft": 1, "description": "Hardwood mulch"},
                "edging": {"price_per_ft": 4, "description": "Bed edging"},
                "irrigation": {"price": 120, "description": "Drip irrigation kit"},
            },
        },
        "transportation": 60,
        "disposal": 50,
    },
    "pricedFields": {
        "bedStyle": "materials.bed_style",
        "soilPrep": "materials.soil",
        "plantDensity": "materials.plants",
        "siteCondition": "labor_hours.site_condition",
    },
}


# =============================================================================
# Pressure Washing (rate-based)
# =============================================================================

PRESSURE_WASHING: Dict[str, Any] = {
    "id": "pressure-washing",
    "title": "Pressure Washing",
    "description": "Deep clean driveways, decks, and exterior surfaces",
    "category": "maintenance",
    "estimatedTime": "3-6 hours",
    "complexity": "low",
    "icon": "💧",
    "fields": [
        {"id": "surfaceType", "label": "Surface Type", "type": "select", "required": True,
         "options": [
             {"value": "driveway", "label": "Driveway"},
             {"value": "deck", "label": "Deck"},
             {"value": "siding", "label": "House Siding"},
             {"value": "patio", "label": "Patio"},
             {"value": "fence", "label": "Fence"},
         ]},
        {"id": "surfaceLength", "label": "Surface Length", "type": "number", "unit": "feet",
         "required": True, "min": 5, "max": 200, "step": 1, "placeholder": "40"},
        {"id": "surfaceWidth", "label": "Surface Width", "type": "number", "unit": "feet",
         "required": True, "min": 5, "max": 100, "step": 1, "placeholder": "20"},
        {"id": "dirtLevel", "label": "Dirt Level", "type": "select", "required": True,
         "options": [
             {"value": "light", "label": "Light - Dust and pollen"},
             {"value": "moderate", "label": "Moderate - Visible grime"},
             {"value": "heavy", "label": "Heavy - Moss, mildew, deep stains"},
         ]},
        {"id": "accessDifficulty", "label": "Access Difficulty", "type": "radio", "required": True,
         "options": [
             {"value": "easy", "label": "Easy - Ground level, open access"},
             {"value": "moderate", "label": "Moderate - Some obstacles"},
             {"value": "difficult", "label": "Difficult - Ladders or tight spaces"},
         ]},
        {"id": "specialServices", "label": "Special Services", "type": "checkbox-group", "required": False,
         "options": [
             {"value": "mold-treatment", "label": "Mold & Mildew Treatment"},
             {"value": "oil-stain-removal", "label": "Oil Stain Removal"},
             {"value": "sealing", "label": "Protective Sealing"},
             {"value": "gutter-flush", "label": "Gutter Flush"},
         ]},
        _photos_field(),
        _notes_field(),
    ],
    "pricing": {
        "labor_hours": {
            "base": 1,
            "per_sq_ft": 0.004,   # 250 sq ft per hour
        },
        "multipliers": {
            "dirt_level": {
                "light": 1.0,
                "moderate": 1.25,
                "heavy": 1.6,
            },
            "access": {
                "easy": 1.0,
                "moderate": 1.15,
                "difficult": 1.4,
            },
        },
        "materials": {
            "surface": {
                "driveway": {"price_per_sq_ft": 0.15, "description": "Concrete cleaner and degreaser"},
                "deck": {"price_per_sq_ft": 0.2, "description": "Wood-safe cleaning solution"},
                "siding": {"price_per_sq_ft": 0.18, "description": "Siding wash detergent"},
                "patio": {"price_per_sq_ft": 0.15, "description": "Patio cleaning solution"},
                "fence": {"price_per_sq_ft": 0.22, "description": "Fence cleaning solution"},
            },
            "equipment": {"price": 40, "description": "Pressure washer fuel and equipment"},
            "special_services": {
                "mold-treatment": {"price": 75, "description": "Mold and mildew treatment"},
                "oil-stain-removal": {"price": 60, "description": "Oil stain remover"},
                "sealing": {"price": 150, "description": "Protective sealant"},
                "gutter-flush": {"price": 90, "description": "Gutter flush supplies"},
            },
        },
        "transportation": 50,
        "disposal": 25,   # wastewater handling
    },
    "pricedFields": {
        "surfaceType": "materials.surface",
        "dirtLevel": "multipliers.dirt_level",
        "accessDifficulty": "multipliers.access",
        "specialServices": "materials.special_services",
    },
}


TEMPLATE_DATA: List[Dict[str, Any]] = [
    DECK_REFRESH,
    FIREPIT,
    LAWN_MOWING,
    GARDEN_BED,
    PRESSURE_WASHING,
]


def build_catalog() -> Dict[str, Template]:
    """Parse the raw template data into Template models keyed by id."""
    return {data["id"]: Template.model_validate(data) for data in TEMPLATE_DATA}
