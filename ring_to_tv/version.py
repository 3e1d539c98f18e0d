"""
Version information for ring_to_tv.
"""

VERSION = "0.1.0"
BUILD_NUMBER = "0"

# Full version string including build number
FULL_VERSION = f"{VERSION}+{BUILD_NUMBER}"

__version__ = VERSION
__version_full__ = FULL_VERSION

