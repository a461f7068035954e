"""Runtime switches that can be flipped without a code change."""
import os

SHOW_SERVICE_MAINTENANCE_BANNER = os.environ.get("SHOW_SERVICE_MAINTENANCE_BANNER", "").lower() == "true"
