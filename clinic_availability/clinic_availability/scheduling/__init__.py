"""
Scheduling Services Module

Core availability engine (pure, no Frappe imports):
- Configuration shape, defaults and editing helpers (config.py)
- Availability resolution per date and room (availability.py)
- Slot and non-bookable period generation (slots.py)
- Appointment range check (booking.py)
- Schedule validation rules (rules.py)

Frappe-bound services:
- Settings store (settings.py)
- Fail-open validation service and doc events (validation.py)
"""
