"""Configuration constants, scene layout, paths and logging setup."""

import os
import pathlib
import logging

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ── Voxel grid ──────────────────────────────────────────────────────────
# Every generated position is an integer multiple of this world size.
VOXEL_SCALE = 0.125

# ── Shoreline layout (voxel units) ──────────────────────────────────────
# Lateral distance ``u`` is measured from the strait centre line; land
# starts at SHORE_U and runs LAND_DEPTH voxels inland.  Along-shore
# indices run from -ALONG_RANGE to ALONG_RANGE - 1.
SHORE_U = 96
LAND_DEPTH = 144
ALONG_RANGE = 192

COAST_BAND = 24          # flat band in front of the hills
COAST_HEIGHT = 2         # voxel height of the quay / promenade
QUAY_WALL_DEPTH = 15     # vertical drop of the quay wall into the water

PROMENADE_LIMIT = 18     # lateral distance (from shore) where the road starts
ROAD_LIMIT = 30          # lateral distance where the urban hillside starts

# ── Bridge (world units) ───────────────────────────────────────────────
BRIDGE_Z = -5.0
BRIDGE_DECK_Y = 8.0
BRIDGE_TOWER_X = 12.0
BRIDGE_TOWER_HEIGHT = 22.0
BRIDGE_DECK_HALF_SPAN = 32.0
BRIDGE_DECK_HALF_WIDTH = 2.25
BRIDGE_BACKSPAN = 8.0

# ── Reserved zones (world units) ───────────────────────────────────────
BRIDGE_CORRIDOR_HALF_WIDTH = 3.0
MOSQUE_ANCHOR = 0                 # along-shore voxel index of the mosque
MOSQUE_PLAZA_U = (96, 132)        # lateral voxel range of the plaza
MOSQUE_PLAZA_ALONG = (-8, 32)     # along-shore voxel range of the plaza
TOWER_CENTER = (8.0, 8.0)
TOWER_RADIUS = 5.0

# ── Structure placement (voxel units) ──────────────────────────────────
MANSION_SLOT_START = -182
MANSION_SLOT_STEP = 40
MANSION_SLOT_COUNT = 10
MANSION_CLEARANCE = 0.25          # world units added around each footprint

APARTMENT_ALONG_START = -186
APARTMENT_ALONG_STEP = 38
APARTMENT_COLUMNS = 10
APARTMENT_ROWS = (48, 86)         # lateral distance from the shore
APARTMENT_JITTER = 16
APARTMENT_CLEARANCE = 0.25

TREE_LATTICE = 8
TREE_CLEARANCE = 0.25

# ── Scene defaults ─────────────────────────────────────────────────────
DEFAULT_SCENE_SEED = int(os.getenv("STRAITBUILDER_SEED", "1453"))
TRAFFIC_CARS_PER_LANE = 3
SEAGULL_COUNT = 12

# Configure base paths
BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
OUTPUT_DIR = pathlib.Path(os.getenv("STRAITBUILDER_OUTPUT_DIR", BASE_DIR / "output"))
CACHE_DIR = BASE_DIR / "cache"
USE_CACHE = os.getenv("STRAITBUILDER_NO_CACHE", "").lower() not in ("1", "true", "yes")

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)
