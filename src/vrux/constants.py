"""Constants for vrux."""

# History bounds
DEFAULT_MAX_VERSIONS = 100

# Version numbering: patch and minor roll over at this value
VERSION_ROLLOVER = 100
INITIAL_VERSION = "1.0.0"

# Rough estimate of characters per model token
CHARS_PER_TOKEN = 4

# Storage
VRUX_DIR_NAME = ".vrux"
DEFAULT_STORAGE_DIR = "versions"
DEFAULT_KEY_PREFIX = "vrux_versions_"
