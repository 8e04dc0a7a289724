# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - programs.py: Public program catalog
# - contributions.py: Program submissions (+ legacy admin shortcuts)
# - admin.py: Moderation, dashboard stats, program management
# - users.py: User profile endpoints
# - resume.py: Resume upload/visibility and threaded feedback
# - testimonials.py: Video testimonials
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import programs
from . import contributions
from . import admin
from . import users
from . import resume
from . import testimonials

__all__ = [
    "health",
    "programs",
    "contributions",
    "admin",
    "users",
    "resume",
    "testimonials",
]
