"""Application-wide constants for the CoachPlanner platform."""

from __future__ import annotations

BRAND_NAME = "CoachPlanner"
API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Class scheduling, bookings and credit packages for gyms and studios."
API_VERSION = "1.0.0"

# Password policy
MIN_PASSWORD_LENGTH = 6

# Organization configuration bounds
MIN_SLOT_DURATION_MINUTES = 15
MAX_CANCELLATION_WINDOW_HOURS = 72

# Slug generation
SLUG_SUFFIX_MAX = 999
SLUG_MAX_ATTEMPTS = 5

# A clone-week copies this many days starting at the source week start
DAYS_PER_WEEK = 7
