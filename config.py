# config.py — Central configuration for the trail map georeferencer

# Source raster and pair files
MAP_IMAGE_PATH = "./map.png"
PAIRS_FILE = "pairs.json"
EXPORT_FILE = "trailmapper-pairs.json"

# Metres per source-image pixel, used when the pairs file does not carry one
METERS_PER_PIXEL = 1.0

# Solver parameters
MIN_COMPLETE_PAIRS = 3
PIVOT_TOLERANCE = 1e-12  # pivots smaller than this mean a degenerate system

# Visualization
DISPLAY_RESULT = True    # draw the pairs on the source map
PLOT_RESIDUALS = True    # bar chart of per-pair residuals
