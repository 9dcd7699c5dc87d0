"""Version information for stagelist."""

# Semantic versioning: MAJOR.MINOR.PATCH

__version__ = "0.3.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 0.3.0 - Optimistic concurrency on every aggregate write
#         - version field on stored setlists, ConflictError on stale writes
#         - Services re-read and re-apply the transform on conflict
# 0.2.0 - Flexible cards and request cards on the shared queue
#         - Slot editor with owner/elevated authorization
#         - Per-slot statistics
# 0.1.0 - Initial release
#         - Song queue with drag reordering and completion archive
