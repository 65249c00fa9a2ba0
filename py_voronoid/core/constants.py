"""Numeric constants shared by the layout engine."""

import math

# Canvas
PAD = 40  # padding around the chart area
GAP = 10  # visual gap between adjacent cells
EDGE_MARGIN = 20  # seeds stay this far inside the bounds

LANDSCAPE_WIDTH = 1200
LANDSCAPE_HEIGHT = 850
PORTRAIT_WIDTH = 850
PORTRAIT_HEIGHT = 1200

# Optimization loop
MAX_ITERATIONS = 350
DRAG_ITERATIONS = 150
MIN_ITERATIONS = 50  # never stop on an early low reading
ERROR_THRESHOLD = 0.005  # 0.5% of the total area
WEIGHT_GAIN = 0.5
RELAX_EVERY = 4

# Lloyd relaxation
LLOYD_STEP_RATIO = 0.3
CATEGORY_CLUSTER_STRENGTH = 0.08

# Seed placement
GOLDEN_ANGLE = 2.4  # radians, approximation
CATEGORY_SPREAD = 0.3  # max category radius as a share of min(width, height)
SEED_RADIUS_MIN = 30
SEED_RADIUS_MAX = 90
FULL_TURN = 2 * math.pi

# Geometry tolerances
COINCIDENT_DISTANCE = 1e-3
DEGENERATE_AREA = 1e-10
MIN_EDGE_LENGTH = 1e-3
PARALLEL_EPSILON = 1e-4
MIN_INSET_AREA = 1.0

# Size tiers (share of total area)
LARGE_CELL_THRESHOLD = 0.05
MEDIUM_CELL_THRESHOLD = 0.02
SMALL_CELL_THRESHOLD = 0.005
