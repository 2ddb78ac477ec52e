"""
Shared helpers for availability tests.
"""

import copy
import importlib.util
from typing import Dict, Any, Optional

# 2026-01-19 es lunes
MONDAY = "2026-01-19"
TUESDAY = "2026-01-20"
FRIDAY = "2026-01-23"
SATURDAY = "2026-01-24"
SUNDAY = "2026-01-25"


def make_schedule(**days) -> Dict[str, Any]:
	"""DaySchedule with the given days as [(start, end), ...] and optional exceptions."""
	schedule = {day: [] for day in ("mon", "tue", "wed", "thu", "fri", "sat", "sun")}
	schedule["exceptions"] = copy.deepcopy(days.pop("exceptions", []))

	for day, ranges in days.items():
		schedule[day] = [{"start": start, "end": end} for start, end in ranges]

	return schedule


def make_config(
	clinic: Optional[Dict[str, Any]] = None,
	rooms: Optional[Dict[str, Any]] = None,
	timezone: str = "America/Bogota",
	slot_minutes: int = 30
) -> Dict[str, Any]:
	return {
		"timezone": timezone,
		"slot_minutes": slot_minutes,
		"clinic": clinic if clinic is not None else make_schedule(mon=[("09:00", "17:00")]),
		"rooms": rooms or {},
	}


def frappe_site_connected() -> bool:
	"""True when running under bench with an initialized site."""
	if importlib.util.find_spec("frappe") is None:
		return False

	import frappe
	return bool(getattr(frappe.local, "site", None))
