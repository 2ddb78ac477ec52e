"""
Clinic Availability API

Structure:
    api/
    ├── __init__.py              # This file
    ├── availability_api.py      # Whitelisted endpoints (slots, periods, checks)
    └── validators.py            # Input format validators

Usage:
    frappe.call("clinic_availability.api.availability_api.get_available_slots", ...)
"""
