"""
Availability Configuration

Shape, defaults and editing helpers for the per-clinic availability
configuration stored in Clinic Availability Settings:

	{
		"timezone": "Africa/Cairo",
		"slot_minutes": 15,
		"clinic": {"mon": [{"start": "09:00", "end": "17:00"}], ..., "exceptions": []},
		"rooms": {"ROOM-0001": {...same shape as clinic...}}
	}

Every helper returns a new dict; inputs are never mutated.
"""

import copy
import json
from datetime import date
from typing import Any, Dict, List, Optional, Union

# Indexado como date.isoweekday() % 7 (domingo = 0)
WEEKDAY_KEYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

DEFAULT_TIMEZONE = "Africa/Cairo"
DEFAULT_SLOT_MINUTES = 15

# Duraciones que ofrece el editor; otras se aceptan con advertencia
SLOT_DURATION_CHOICES = (5, 10, 15, 20, 30)


def create_empty_schedule() -> Dict[str, List[Dict[str, Any]]]:
	"""Horario semanal sin rangos ni excepciones (todo cerrado)."""
	schedule = {day: [] for day in WEEKDAY_KEYS}
	schedule["exceptions"] = []
	return schedule


def create_default_availability() -> Dict[str, Any]:
	"""
	Configuración usada cuando una clínica aún no tiene settings guardados.

	Lunes a jueves 09:00-17:00, sábado 10:00-14:00, viernes y domingo
	cerrados, slots de 15 minutos.

	Returns:
		dict: configuración nueva (se puede modificar sin afectar otras llamadas)
	"""
	week_hours = [{"start": "09:00", "end": "17:00"}]

	clinic = create_empty_schedule()
	for day in ("mon", "tue", "wed", "thu"):
		clinic[day] = copy.deepcopy(week_hours)
	clinic["sat"] = [{"start": "10:00", "end": "14:00"}]

	return {
		"timezone": DEFAULT_TIMEZONE,
		"slot_minutes": DEFAULT_SLOT_MINUTES,
		"clinic": clinic,
		"rooms": {},
	}


def normalize_schedule(schedule: Optional[Dict[str, Any]]) -> Dict[str, Any]:
	"""
	Completa un DaySchedule con las claves que falten.

	Args:
		schedule: horario posiblemente incompleto (o None)

	Returns:
		dict: copia con los 7 días y "exceptions"
	"""
	normalized = create_empty_schedule()
	if not schedule:
		return normalized

	for day in WEEKDAY_KEYS:
		normalized[day] = copy.deepcopy(schedule.get(day) or [])
	normalized["exceptions"] = copy.deepcopy(schedule.get("exceptions") or [])

	return normalized


def parse_availability_config(
	value: Union[str, Dict[str, Any], None],
	defaults: Optional[Dict[str, Any]] = None
) -> Optional[Dict[str, Any]]:
	"""
	Convierte el valor del campo JSON de settings en una configuración normalizada.

	Args:
		value: dict, string JSON, o vacío
		defaults: {"timezone", "slot_minutes"} a usar cuando el valor guardado no los trae
			(por ejemplo los campos del documento de settings)

	Returns:
		dict normalizado, o None si no hay configuración

	Raises:
		ValueError: si el JSON es inválido o no representa un objeto
	"""
	if value is None:
		return None

	if isinstance(value, str):
		if not value.strip():
			return None
		try:
			value = json.loads(value)
		except json.JSONDecodeError as e:
			raise ValueError(f"Invalid availability JSON: {e}") from e

	if not isinstance(value, dict):
		raise ValueError(f"Availability config must be an object, got {type(value).__name__}")

	if not value:
		return None

	rooms = value.get("rooms") or {}
	if not isinstance(rooms, dict):
		raise ValueError("Availability 'rooms' must be an object keyed by room id")

	defaults = defaults or {}

	return {
		"timezone": value.get("timezone") or defaults.get("timezone") or DEFAULT_TIMEZONE,
		"slot_minutes": get_slot_minutes(value if value.get("slot_minutes") else defaults),
		"clinic": normalize_schedule(value.get("clinic")),
		"rooms": {room_id: normalize_schedule(schedule) for room_id, schedule in rooms.items()},
	}


def get_slot_minutes(config: Optional[Dict[str, Any]]) -> int:
	"""Duración de slot configurada, o la default si falta o no es válida."""
	if not config:
		return DEFAULT_SLOT_MINUTES

	try:
		minutes = int(config.get("slot_minutes") or 0)
	except (TypeError, ValueError):
		return DEFAULT_SLOT_MINUTES

	return minutes if minutes > 0 else DEFAULT_SLOT_MINUTES


def copy_clinic_to_room(config: Dict[str, Any], room_id: str) -> Dict[str, Any]:
	"""Asigna al room una copia del horario de la clínica (incluye excepciones)."""
	updated = copy.deepcopy(config)
	updated.setdefault("rooms", {})[room_id] = normalize_schedule(config.get("clinic"))
	return updated


def clear_room_schedule(config: Dict[str, Any], room_id: str) -> Dict[str, Any]:
	"""
	Deja el room con un horario vacío.

	Un horario vacío no equivale a "sin horario": el room queda cerrado
	en lugar de heredar las horas de la clínica.
	"""
	updated = copy.deepcopy(config)
	updated.setdefault("rooms", {})[room_id] = create_empty_schedule()
	return updated


def _exception_date_key(value: Any) -> str:
	if isinstance(value, date):
		return value.isoformat()
	return str(value or "").strip()


def set_exception(schedule: Dict[str, Any], exception: Dict[str, Any]) -> Dict[str, Any]:
	"""
	Agrega o reemplaza la excepción de una fecha.

	Cualquier excepción existente para la misma fecha se elimina, así el
	horario nunca acumula duplicados desde el editor.

	Args:
		schedule: DaySchedule
		exception: {"date": "YYYY-MM-DD", "closed": bool, "overrides": [...]}

	Returns:
		dict: DaySchedule nuevo
	"""
	date_key = _exception_date_key(exception.get("date"))

	new_exception = {"date": date_key, "closed": bool(exception.get("closed"))}
	overrides = exception.get("overrides")
	if not new_exception["closed"] and overrides:
		new_exception["overrides"] = sorted(
			copy.deepcopy(overrides), key=lambda r: str(r.get("start", ""))
		)

	updated = normalize_schedule(schedule)
	updated["exceptions"] = [
		exc for exc in updated["exceptions"]
		if _exception_date_key(exc.get("date")) != date_key
	]
	updated["exceptions"].append(new_exception)
	updated["exceptions"].sort(key=lambda exc: _exception_date_key(exc.get("date")))

	return updated


def remove_exception(schedule: Dict[str, Any], exception_date: Union[date, str]) -> Dict[str, Any]:
	"""Elimina todas las excepciones de la fecha indicada."""
	date_key = _exception_date_key(exception_date)

	updated = normalize_schedule(schedule)
	updated["exceptions"] = [
		exc for exc in updated["exceptions"]
		if _exception_date_key(exc.get("date")) != date_key
	]
	return updated


def find_duplicate_exception_dates(schedule: Optional[Dict[str, Any]]) -> List[str]:
	"""Fechas que tienen más de una excepción (solo la primera se aplica)."""
	if not schedule:
		return []

	seen = set()
	duplicates = []
	for exc in schedule.get("exceptions") or []:
		if not isinstance(exc, dict):
			continue
		date_key = _exception_date_key(exc.get("date"))
		if date_key in seen and date_key not in duplicates:
			duplicates.append(date_key)
		seen.add(date_key)

	return duplicates
