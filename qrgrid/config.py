"""Default configuration values."""

DEFAULT_ERROR_CORRECTION = "M"
DEFAULT_PROFILE = "compat"  # "compat" or "standard"
DEFAULT_MASK_PATTERN = 0  # standard profile only; no mask scoring is done
DEFAULT_MARGIN = 4  # quiet-zone width in modules
DEFAULT_SCALE = 4  # pixels per module
DEFAULT_COLOR_FG = (0, 0, 0)  # dark modules (RGB)
DEFAULT_COLOR_BG = (255, 255, 255)  # light modules and quiet zone (RGB)
SVG_COLOR_FG = "#000000"
SVG_COLOR_BG = "#ffffff"
MIN_VERSION = 1
MAX_VERSION = 10
