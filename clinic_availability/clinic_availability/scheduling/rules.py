"""
Schedule Rules

Validation run before an availability configuration is saved. The
resolver tolerates bad data; these rules are what keep it out of the
settings in the first place.
"""

from datetime import datetime
from typing import List, Dict, Optional, Any
import pytz

from .availability import parse_time_string
from .config import WEEKDAY_KEYS, SLOT_DURATION_CHOICES, find_duplicate_exception_dates

DAY_LABELS = {
	"mon": "Monday",
	"tue": "Tuesday",
	"wed": "Wednesday",
	"thu": "Thursday",
	"fri": "Friday",
	"sat": "Saturday",
	"sun": "Sunday",
}


def time_to_minutes(value: str) -> int:
	"""
	Convierte "HH:MM" (o "HH:MM:SS") a minutos desde medianoche.

	Usa el mismo parser que el resolver: lo que aquí es válido también
	lo es al calcular la disponibilidad.

	Raises:
		ValueError: si el string no es una hora válida
	"""
	parsed = parse_time_string(str(value))
	return parsed.hour * 60 + parsed.minute


def validate_time_ranges(ranges: List[Dict[str, str]]) -> bool:
	"""
	Verifica que los rangos de un día no se solapen.

	Dos rangos que solo se tocan (09:00-12:00 y 12:00-17:00) no se solapan.
	"""
	for i in range(len(ranges)):
		for j in range(i + 1, len(ranges)):
			a_start = parse_time_string(str(ranges[i]["start"]))
			a_end = parse_time_string(str(ranges[i]["end"]))
			b_start = parse_time_string(str(ranges[j]["start"]))
			b_end = parse_time_string(str(ranges[j]["end"]))

			if a_start < b_end and a_end > b_start:
				return False

	return True


def validate_room_hours(
	clinic_ranges: List[Dict[str, str]],
	room_ranges: List[Dict[str, str]]
) -> Dict[str, Any]:
	"""
	Advierte sobre rangos del room que se salen del horario de la clínica.

	Returns:
		dict: {
			"valid": bool,
			"warnings": ["Room hours 08:00-10:00 extend outside clinic hours", ...]
		}
	"""
	warnings = []

	for room_range in room_ranges:
		room_start = parse_time_string(str(room_range["start"]))
		room_end = parse_time_string(str(room_range["end"]))

		inside_clinic = any(
			room_start >= parse_time_string(str(clinic_range["start"]))
			and room_end <= parse_time_string(str(clinic_range["end"]))
			for clinic_range in clinic_ranges
		)

		if not inside_clinic:
			warnings.append(
				f"Room hours {room_range['start']}-{room_range['end']} extend outside clinic hours"
			)

	return {
		"valid": not warnings,
		"warnings": warnings
	}


def _range_errors(time_range: Any, label: str) -> List[str]:
	if not isinstance(time_range, dict) or "start" not in time_range or "end" not in time_range:
		return [f"{label}: each range needs a start and an end"]

	try:
		start = parse_time_string(str(time_range["start"]))
		end = parse_time_string(str(time_range["end"]))
	except ValueError:
		return [f"{label}: invalid time range {time_range['start']}-{time_range['end']} (use HH:MM or HH:MM:SS)"]

	if start >= end:
		return [f"{label}: start {time_range['start']} must be before end {time_range['end']}"]

	return []


def _ranges_errors(ranges: Any, label: str) -> List[str]:
	if not isinstance(ranges, list):
		return [f"{label}: ranges must be a list"]

	errors = []
	for time_range in ranges:
		errors.extend(_range_errors(time_range, label))

	if not errors and not validate_time_ranges(ranges):
		errors.append(f"{label}: time ranges overlap")

	return errors


def _schedule_errors(schedule: Optional[Dict[str, Any]], owner: str) -> List[str]:
	if not schedule:
		return []

	errors = []

	for day in WEEKDAY_KEYS:
		errors.extend(_ranges_errors(schedule.get(day) or [], f"{owner} {DAY_LABELS[day]}"))

	for exc in schedule.get("exceptions") or []:
		if not isinstance(exc, dict):
			errors.append(f"{owner}: invalid exception entry")
			continue

		exc_date = str(exc.get("date") or "")
		try:
			datetime.strptime(exc_date, "%Y-%m-%d")
		except ValueError:
			errors.append(f"{owner}: invalid exception date '{exc_date}' (use YYYY-MM-DD)")
			continue

		if not exc.get("closed") and exc.get("overrides") is not None:
			errors.extend(_ranges_errors(exc["overrides"], f"{owner} {exc_date}"))

	return errors


def validate_availability_config(config: Dict[str, Any]) -> List[str]:
	"""
	Valida una configuración completa antes de guardarla.

	Returns:
		list[str]: mensajes de error; vacío si la configuración es válida
	"""
	errors = []

	timezone = config.get("timezone")
	if timezone not in pytz.all_timezones_set:
		errors.append(f"Unknown timezone '{timezone}'")

	try:
		slot_minutes = int(config.get("slot_minutes"))
	except (TypeError, ValueError):
		slot_minutes = 0
	if slot_minutes <= 0:
		errors.append("Slot minutes must be a positive number")

	errors.extend(_schedule_errors(config.get("clinic"), "Clinic"))

	for room_id, schedule in (config.get("rooms") or {}).items():
		errors.extend(_schedule_errors(schedule, f"Room {room_id}"))

	return errors


def collect_room_warnings(config: Dict[str, Any]) -> List[str]:
	"""Advertencias de rooms con horas fuera del horario de la clínica, por día."""
	clinic = config.get("clinic") or {}
	warnings = []

	for room_id, schedule in (config.get("rooms") or {}).items():
		for day in WEEKDAY_KEYS:
			result = validate_room_hours(clinic.get(day) or [], (schedule or {}).get(day) or [])
			for warning in result["warnings"]:
				warnings.append(f"{room_id} ({DAY_LABELS[day]}): {warning}")

	return warnings


def collect_slot_warnings(config: Dict[str, Any]) -> List[str]:
	"""Duración de slot válida pero fuera de las opciones del editor."""
	try:
		slot_minutes = int(config.get("slot_minutes"))
	except (TypeError, ValueError):
		return []

	if slot_minutes <= 0 or slot_minutes in SLOT_DURATION_CHOICES:
		return []

	choices = ", ".join(str(choice) for choice in SLOT_DURATION_CHOICES)
	return [f"Slot minutes {slot_minutes} is not one of the usual durations ({choices})"]


def collect_duplicate_exception_warnings(config: Dict[str, Any]) -> List[str]:
	"""Fechas con más de una excepción; solo la primera tiene efecto."""
	warnings = []

	for exc_date in find_duplicate_exception_dates(config.get("clinic")):
		warnings.append(f"Clinic has more than one exception for {exc_date}; only the first one applies")

	for room_id, schedule in (config.get("rooms") or {}).items():
		for exc_date in find_duplicate_exception_dates(schedule):
			warnings.append(f"Room {room_id} has more than one exception for {exc_date}; only the first one applies")

	return warnings
