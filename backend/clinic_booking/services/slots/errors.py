# backend/clinic_booking/services/slots/errors.py
"""
User-facing error messages of the availability engine.

Engine operations never raise for these; they return them inside a
result object together with the error kind so the caller can map them.
"""

from enum import Enum


class ErrorKind(str, Enum):
    INPUT = "input"          # malformed date/time, missing id
    POLICY = "policy"        # cutoff, horizon, closure, inactive service/staff
    CONFLICT = "conflict"    # overlapping bookings at capacity


INVALID_DATE = "invalid date"
INVALID_DATETIME = "invalid date/time"
INVALID_INTERVAL = "invalid interval"
BEYOND_HORIZON = "beyond booking horizon"
WINDOW_CLOSED = "booking window closed for this date"
PAST_TIME = "cannot book a time in the past"
INVALID_SERVICE = "invalid service"
INVALID_STAFF = "invalid staff"
OUTSIDE_HOURS = "outside opening hours"
OFF_GRID = "start time is not a bookable slot"
ALREADY_BOOKED = "slot already booked"

HOLIDAY_REASON = "holiday"
TEMPORARY_CLOSURE_REASON = "temporary closure"
WEEKLY_CLOSED_REASON = "closed"
