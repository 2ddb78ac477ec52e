"""
Availability Service

Calculates effective availability for a clinic and, optionally, one of
its rooms, considering:
- Weekly clinic hours and per-room hours (intersected)
- Date exceptions (closures and override hours), room first, clinic last
- Timezones

Everything here is pure: the configuration is passed in explicitly and
never modified.
"""

from datetime import datetime, time, timedelta, date
from functools import lru_cache
from typing import List, Dict, Union, Optional, Any
import pytz

from .config import WEEKDAY_KEYS


@lru_cache(maxsize=512)
def parse_time_string(value: str) -> time:
	"""
	Parsea "HH:MM" o "HH:MM:SS". El string completo debe coincidir.

	Raises:
		ValueError: si no es una hora válida
	"""
	value = value.strip()
	for fmt in ("%H:%M", "%H:%M:%S"):
		try:
			return datetime.strptime(value, fmt).time()
		except ValueError:
			continue
	raise ValueError(f"Invalid time string: {value!r}")


def _to_time(time_value: Union[time, timedelta, str]) -> time:
	"""
	Convierte diferentes formatos de tiempo a datetime.time.

	Args:
		time_value: puede ser time, timedelta (desde medianoche), o string "HH:MM"

	Returns:
		datetime.time object
	"""
	if isinstance(time_value, time):
		return time_value
	elif isinstance(time_value, timedelta):
		# timedelta representa tiempo desde medianoche
		return (datetime.min + time_value).time()
	elif isinstance(time_value, str):
		return parse_time_string(time_value)
	else:
		raise ValueError(f"Cannot convert {type(time_value)} to time")


def get_timezone(config: Optional[Dict[str, Any]]) -> pytz.tzinfo.BaseTzInfo:
	"""Timezone de la configuración; UTC si falta o no existe."""
	tz_name = (config or {}).get("timezone") or "UTC"
	try:
		return pytz.timezone(tz_name)
	except pytz.UnknownTimeZoneError:
		return pytz.UTC


def localize_datetime(value: datetime, tz: pytz.tzinfo.BaseTzInfo) -> datetime:
	"""
	Lleva un datetime al timezone de la clínica.

	Un datetime naive se interpreta como hora local (wall-clock) de la
	clínica; uno con tzinfo se convierte.
	"""
	if value.tzinfo is None:
		return tz.localize(value)
	return value.astimezone(tz)


def _to_date(target_date: Union[date, datetime, str], tz: pytz.tzinfo.BaseTzInfo) -> Optional[date]:
	if isinstance(target_date, datetime):
		return localize_datetime(target_date, tz).date()
	if isinstance(target_date, date):
		return target_date
	if isinstance(target_date, str):
		try:
			return datetime.strptime(target_date.strip()[:10], "%Y-%m-%d").date()
		except ValueError:
			return None
	return None


def get_weekday_key(target_date: date) -> str:
	"""Clave del día ("sun" ... "sat") para la fecha."""
	return WEEKDAY_KEYS[target_date.isoweekday() % 7]


def _anchor(target_date: date, time_value: time, tz: pytz.tzinfo.BaseTzInfo) -> datetime:
	return tz.localize(datetime.combine(target_date, time_value))


def _time_ranges_to_intervals(
	ranges: Optional[List[Dict[str, Any]]],
	target_date: date,
	tz: pytz.tzinfo.BaseTzInfo
) -> List[Dict[str, datetime]]:
	"""
	Convierte TimeRanges ("HH:MM") en intervalos datetime para una fecha.

	Los rangos malformados o con start >= end se descartan.
	"""
	intervals = []

	for time_range in ranges or []:
		try:
			start_time = _to_time(time_range["start"])
			end_time = _to_time(time_range["end"])
		except (KeyError, TypeError, ValueError):
			continue

		if start_time >= end_time:
			continue

		intervals.append({
			"start": _anchor(target_date, start_time, tz),
			"end": _anchor(target_date, end_time, tz)
		})

	return intervals


def intersect_ranges(
	ranges_a: List[Dict[str, datetime]],
	ranges_b: List[Dict[str, datetime]]
) -> List[Dict[str, datetime]]:
	"""
	Intersección de dos listas de intervalos.

	Args:
		ranges_a: intervalos {"start": datetime, "end": datetime}
		ranges_b: intervalos {"start": datetime, "end": datetime}

	Returns:
		list: porciones solapadas, ordenadas y merged (vacío si alguno está vacío)
	"""
	intersections = []

	for range_a in ranges_a:
		for range_b in ranges_b:
			start = max(range_a["start"], range_b["start"])
			end = min(range_a["end"], range_b["end"])

			if start < end:
				intersections.append({"start": start, "end": end})

	return _merge_intervals(intersections)


def find_exception(
	exceptions: Optional[List[Dict[str, Any]]],
	target_date: date
) -> Optional[Dict[str, Any]]:
	"""
	Busca la excepción de una fecha.

	Si hay varias para la misma fecha gana la primera.
	"""
	date_string = target_date.isoformat()

	for exc in exceptions or []:
		if not isinstance(exc, dict):
			continue

		exc_date = exc.get("date")
		if isinstance(exc_date, date):
			exc_date = exc_date.isoformat()

		if str(exc_date or "").strip() == date_string:
			return exc

	return None


def apply_exceptions(
	intervals: List[Dict[str, datetime]],
	exceptions: Optional[List[Dict[str, Any]]],
	target_date: date,
	tz: pytz.tzinfo.BaseTzInfo
) -> List[Dict[str, datetime]]:
	"""
	Aplica la excepción de la fecha (Closed / Overrides) a los intervalos.

	Args:
		intervals: intervalos calculados hasta ahora
		exceptions: lista de DateException del horario
		target_date: fecha objetivo
		tz: timezone object

	Returns:
		list: [] si está cerrado, los overrides si existen (reemplazan todo),
		o los intervalos sin cambios
	"""
	exc = find_exception(exceptions, target_date)

	if exc is None:
		return intervals

	if exc.get("closed"):
		return []

	# Una lista de overrides (incluso vacía) reemplaza el horario del día
	if exc.get("overrides") is not None:
		return _merge_intervals(_time_ranges_to_intervals(exc["overrides"], target_date, tz))

	return intervals


def resolve_availability(
	config: Dict[str, Any],
	target_date: Union[date, datetime, str],
	room_id: Optional[str] = None
) -> List[Dict[str, datetime]]:
	"""
	Obtiene los intervalos disponibles de un día para la clínica o un room.

	Args:
		config: AvailabilityConfig
		target_date: fecha (date, datetime o string YYYY-MM-DD)
		room_id: room opcional; si no tiene horario propio hereda el de la clínica

	Returns:
		list[dict]: [
			{"start": datetime, "end": datetime},
			...
		]

	Algoritmo:
		1. Obtener weekday de la fecha
		2. Rangos de la clínica y del room (o los de la clínica si el room no tiene horario)
		3. Convertir a datetime anclado a la medianoche local de la fecha
		4. Intersectar clínica y room
		5. Aplicar excepción del room (override ignora la intersección)
		6. Aplicar excepción de la clínica (siempre la última palabra)
		7. Merge y ordenar
	"""
	tz = get_timezone(config)
	target_date = _to_date(target_date, tz)

	if target_date is None:
		return []

	day_key = get_weekday_key(target_date)

	clinic = config.get("clinic") or {}
	rooms = config.get("rooms") or {}
	room_schedule = rooms.get(room_id) if room_id else None
	if not isinstance(room_schedule, dict):
		room_schedule = None

	clinic_ranges = clinic.get(day_key) or []
	if room_schedule is not None:
		room_ranges = room_schedule.get(day_key) or []
	else:
		room_ranges = clinic_ranges

	intervals = intersect_ranges(
		_time_ranges_to_intervals(clinic_ranges, target_date, tz),
		_time_ranges_to_intervals(room_ranges, target_date, tz)
	)

	if room_schedule is not None:
		intervals = apply_exceptions(intervals, room_schedule.get("exceptions"), target_date, tz)

	intervals = apply_exceptions(intervals, clinic.get("exceptions"), target_date, tz)

	return _merge_intervals(intervals)


def resolve_availability_range(
	config: Dict[str, Any],
	start_date: Union[date, str],
	end_date: Union[date, str],
	room_id: Optional[str] = None
) -> Dict[str, List[Dict[str, datetime]]]:
	"""
	Obtiene disponibilidad efectiva para un rango de fechas (inclusive).

	Returns:
		dict: {
			"2026-01-19": [{"start": datetime, "end": datetime}, ...],
			...
		}
		Los días sin disponibilidad no aparecen.
	"""
	tz = get_timezone(config)
	start_date = _to_date(start_date, tz)
	end_date = _to_date(end_date, tz)

	if start_date is None or end_date is None:
		return {}

	result = {}
	current_date = start_date

	while current_date <= end_date:
		intervals = resolve_availability(config, current_date, room_id)
		if intervals:
			result[current_date.isoformat()] = intervals
		current_date += timedelta(days=1)

	return result


def _merge_intervals(intervals: List[Dict[str, datetime]]) -> List[Dict[str, datetime]]:
	"""
	Une intervalos adyacentes o overlapping.

	Args:
		intervals: lista de intervalos {"start": datetime, "end": datetime}

	Returns:
		list: intervalos merged, ordenados por start (la entrada no se modifica)
	"""
	if not intervals:
		return []

	ordered = sorted(intervals, key=lambda x: x["start"])

	merged = [dict(ordered[0])]

	for current in ordered[1:]:
		last_merged = merged[-1]

		# Si current se solapa o es adyacente a last_merged, merge
		if current["start"] <= last_merged["end"]:
			if current["end"] > last_merged["end"]:
				last_merged["end"] = current["end"]
		else:
			merged.append(dict(current))

	return merged
