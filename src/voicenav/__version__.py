"""Version information for voicenav.

Single source of truth for version number.
Follows PEP 440 and semantic versioning principles.
"""

__version__ = "1.2.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))

# Version history:
# 1.2.0 - Single resolver with pluggable intent source, proxy service
# 1.1.0 - Remote interpreter through /api/voice proxy
# 1.0.0 - Local keyword scorer
