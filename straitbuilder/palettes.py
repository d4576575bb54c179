"""Fixed color tables for every structure family.

Palettes are picked per structure through the seeded PRNG; day/night
only swaps between ``glass_day`` and ``glass_night`` (see
:mod:`straitbuilder.voxels`).
"""

from functools import lru_cache

from .models import Palette
from .prng import seeded_choice


@lru_cache(maxsize=None)
def hex_to_rgb(color: str) -> tuple:
    """Convert '#rrggbb' to an (r, g, b) tuple of ints."""
    value = color.lstrip('#')
    if len(value) != 6:
        raise ValueError(f"Invalid hex color: {color!r}")
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


def pick_palette(seed: int, table) -> Palette:
    return seeded_choice(seed, table)


# ── Ground cover ───────────────────────────────────────────────────────
GROUND = {
    'rock': '#334155',
    'asphalt': '#475569',
    'promenade': '#cbd5e1',
    'plaza': '#e2e8f0',
    'grass': '#65a30d',
    'grass_dark': '#4d7c0f',
    'quay_wall': '#334155',
}

FLORA = {
    'trunk': '#451a03',
    'leaf_europe': '#15803d',
    'leaf_asia': '#166534',
    'leaf_light': '#4d7c0f',
}

WARM_LIGHT = '#fbbf24'
PALE_LIGHT = '#fef08a'
DARK_GLASS = '#1e293b'

# ── Waterfront mansions ────────────────────────────────────────────────
YALI_A_PALETTES = (
    Palette('Hekimbasi Red', wall='#7f1d1d', trim='#fef2f2', roof='#451a03', accent='#991b1b'),
    Palette('Koprulu Wood', wall='#9a3412', trim='#fff7ed', roof='#431407', accent='#c2410c'),
    Palette('Bosphorus White', wall='#f1f5f9', trim='#ffffff', roof='#334155', accent='#e2e8f0'),
    Palette('Pasha Pink', wall='#be185d', trim='#fff1f2', roof='#881337', accent='#9d174d'),
)

YALI_B_PALETTES = (
    Palette('Palace White', wall='#f1f5f9', trim='#ffffff', roof='#94a3b8', accent='#f8fafc'),
    Palette('Sultan Ochre', wall='#fde68a', trim='#fffbeb', roof='#78716c', accent='#fef3c7'),
    Palette('Pale Rose', wall='#fecdd3', trim='#fff1f2', roof='#64748b', accent='#ffe4e6'),
)

YALI_C_PALETTES = (
    Palette('Ornate Cream', wall='#f8fafc', trim='#e2e8f0', roof='#9f1239', accent='#f1f5f9'),
    Palette('Mint Pavilion', wall='#d1fae5', trim='#ecfdf5', roof='#065f46', accent='#a7f3d0'),
    Palette('Sand Konak', wall='#fef3c7', trim='#fffbeb', roof='#7c2d12', accent='#fde68a'),
)

QUAY_STONE = '#e2e8f0'
MARBLE_QUAY = '#f8fafc'
DOOR_WOOD = '#451a03'
FINIAL_GOLD = '#d97706'

# ── Apartments ─────────────────────────────────────────────────────────
APARTMENT_PALETTES = (
    Palette('Cream', wall='#fef3c7', trim='#fffbeb', roof='#b91c1c', glass_day='#1f2937'),
    Palette('Light Orange', wall='#ffedd5', trim='#fff7ed', roof='#991b1b', glass_day='#1f2937'),
    Palette('White', wall='#e5e5e5', trim='#f5f5f5', roof='#ef4444', glass_day='#1f2937'),
    Palette('Stone Grey', wall='#d6d3d1', trim='#e7e5e4', roof='#7f1d1d', glass_day='#1f2937'),
    Palette('Rose', wall='#fca5a5', trim='#fecaca', roof='#881337', glass_day='#1f2937'),
    Palette('Pale Lime', wall='#d9f99d', trim='#ecfccb', roof='#9f1239', glass_day='#1f2937'),
)

APARTMENT_STONE = '#57534e'
RAILING_DARK = '#171717'
CHIMNEY = '#78350f'
AWNINGS = ('#dc2626', '#2563eb', '#16a34a', '#f59e0b')
PLANTER_GREEN = '#22c55e'

# ── Bridge and traffic ─────────────────────────────────────────────────
BRIDGE = {
    'steel': '#64748b',
    'dark_steel': '#475569',
    'road': '#334155',
    'line': '#f8fafc',
    'lane': '#facc15',
    'cable': '#1e293b',
    'beacon_day': '#7f1d1d',
    'beacon_night': '#ef4444',
}

CAR_BODIES = ('#dc2626', '#f8fafc', '#1d4ed8', '#facc15', '#0f172a', '#15803d')
HEADLIGHT_DAY = '#e5e7eb'
HEADLIGHT_NIGHT = '#fefce8'
TAILLIGHT_DAY = '#7f1d1d'
TAILLIGHT_NIGHT = '#ef4444'

# ── Landmarks ──────────────────────────────────────────────────────────
MOSQUE = {
    'wall': '#f1f5f9',
    'marble': '#f8fafc',
    'trim': '#cbd5e1',
    'dome': '#94a3b8',
    'lead': '#64748b',
    'glass_day': '#1e293b',
    'glass_night': '#fbbf24',
    'crescent': '#d97706',
}

TOWER = {
    'rock': '#57534e',
    'rock_dark': '#44403c',
    'platform': '#d6d3d1',
    'wall': '#e7e5e4',
    'stone': '#f5f5f4',
    'roof': '#9a3412',
    'dome': '#64748b',
    'pole': '#a8a29e',
    'glass_day': '#334155',
    'glass_night': PALE_LIGHT,
    'flag_red': '#e30a17',
    'flag_white': '#ffffff',
}

# ── Watercraft ─────────────────────────────────────────────────────────
FERRY = {
    'hull': '#166534',
    'hull_white': '#f8fafc',
    'deck': '#cbd5e1',
    'cabin': '#ffffff',
    'trim': '#facc15',
    'lifebuoy': '#ea580c',
    'funnel_top': '#0f172a',
    'logo': '#dc2626',
    'pole': '#94a3b8',
    'glass_day': DARK_GLASS,
    'glass_night': PALE_LIGHT,
}

TANKER = {
    'waterline': '#9f1239',
    'hull': '#0f172a',
    'deck': '#78350f',
    'pipe': '#94a3b8',
    'bridge': '#f1f5f9',
    'funnel': '#9f1239',
    'crane': '#fbbf24',
    'glass_day': DARK_GLASS,
    'glass_night': '#facc15',
}

FISHING_BOAT = {
    'hull': '#f8fafc',
    'waterline': '#dc2626',
    'deck': '#d97706',
    'cabin': '#f1f5f9',
    'roof': '#dc2626',
    'net': '#064e3b',
    'crate': '#ea580c',
    'mast': '#f59e0b',
    'pole': '#94a3b8',
    'glass_day': DARK_GLASS,
    'glass_night': '#facc15',
}

FLAG_RED = '#e30a17'
FLAG_WHITE = '#ffffff'

MAST_LIGHT_DAY = '#e5e7eb'
MAST_LIGHT_NIGHT = '#fef08a'

# ── Wildlife ───────────────────────────────────────────────────────────
DOLPHIN = {
    'back': '#334155',
    'side': '#64748b',
    'belly': '#f1f5f9',
    'beak': '#475569',
}

SEAGULL = {
    'body': '#f8fafc',
    'wing': '#e2e8f0',
    'wing_tip': '#1e293b',
    'beak': '#f59e0b',
}

# ── Water surface ──────────────────────────────────────────────────────
WATER = {
    'crest': '#7dd3fc',
    'mid': '#0ea5e9',
    'trough': '#1e3a8a',
    'crest_night': '#1e40af',
    'mid_night': '#1e3a8a',
    'trough_night': '#172554',
}
