"""Version information for sabaccui-cli package"""

__version__ = "1.4.0"
__version_info__ = (1, 4, 0)
__author__ = "Coders Cantina"
__email__ = "hello@sabaccui.com"
__license__ = "MIT"
__copyright__ = "Copyright 2025 Coders Cantina"

# Version details
VERSION_MAJOR = 1
VERSION_MINOR = 4
VERSION_PATCH = 0
VERSION_SUFFIX = ""  # For pre-release versions like "alpha", "beta", "rc1"

# Full version string
if VERSION_SUFFIX:
    VERSION_STRING = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}-{VERSION_SUFFIX}"
else:
    VERSION_STRING = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

assert __version__ == VERSION_STRING, "Version mismatch between __version__ and VERSION_STRING"
