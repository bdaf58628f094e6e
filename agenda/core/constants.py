"""Fixed scheduling constants."""

# Slot enumeration step inside a working interval
SLOT_INTERVAL_MINUTES = 30

# How far ahead of its start an appointment becomes an active reminder
REMINDER_LEAD_MINUTES = 30

# Active reminders older than this (relative to their start) are swept
REMINDER_RETENTION_HOURS = 2

# Service duration used for the coarse "any availability on this date" check
AVAILABILITY_REFERENCE_DURATION_MINUTES = 30
