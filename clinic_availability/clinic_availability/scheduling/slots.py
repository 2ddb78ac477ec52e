"""
Slot Generation Service

Generates discrete time slots and non-bookable periods for calendar UI,
from the effective availability of a clinic or room.
"""

from datetime import datetime, time, timedelta, date
from typing import List, Dict, Union, Optional, Any

from .availability import get_timezone, resolve_availability, _to_date
from .config import get_slot_minutes


def _add_minutes(value: datetime, minutes: int) -> datetime:
	result = value + timedelta(minutes=minutes)
	# pytz necesita normalize() para corregir el offset al cruzar un cambio DST
	if result.tzinfo is not None and hasattr(result.tzinfo, "normalize"):
		result = result.tzinfo.normalize(result)
	return result


def generate_slots(
	ranges: List[Dict[str, datetime]],
	slot_minutes: int
) -> List[Dict[str, datetime]]:
	"""
	Divide intervalos disponibles en slots de duración fija.

	Args:
		ranges: intervalos ordenados y sin solapamiento
		slot_minutes: duración de cada slot en minutos

	Returns:
		list[dict]: [{"start": datetime, "end": datetime}, ...]

	Algoritmo:
		1. Para cada intervalo avanzar cada slot_minutes desde su inicio
		2. Emitir el slot solo si termina antes o justo en el fin del intervalo
		3. El sobrante final más corto que slot_minutes se descarta
	"""
	if not slot_minutes or slot_minutes <= 0:
		return []

	slots = []

	for interval in ranges:
		current_slot_start = interval["start"]
		current_slot_end = _add_minutes(current_slot_start, slot_minutes)

		while current_slot_end <= interval["end"]:
			slots.append({"start": current_slot_start, "end": current_slot_end})

			current_slot_start = current_slot_end
			current_slot_end = _add_minutes(current_slot_start, slot_minutes)

	return slots


def get_available_slots(
	config: Optional[Dict[str, Any]],
	target_date: Union[date, datetime, str],
	room_id: Optional[str] = None
) -> List[Dict[str, Any]]:
	"""
	Slots reservables de un día para la clínica o un room.

	Returns:
		list[dict]: [
			{"start": datetime, "end": datetime, "room_id": "ROOM-0001" | None},
			...
		]
		Lista vacía si no hay configuración.
	"""
	if not config:
		return []

	ranges = resolve_availability(config, target_date, room_id)
	slots = generate_slots(ranges, get_slot_minutes(config))

	return [
		{"start": slot["start"], "end": slot["end"], "room_id": room_id}
		for slot in slots
	]


def get_non_bookable_periods(
	config: Optional[Dict[str, Any]],
	target_date: Union[date, datetime, str],
	room_id: Optional[str] = None
) -> List[Dict[str, datetime]]:
	"""
	Periodos no reservables del día, para atenuar el calendario.

	Son los huecos entre el inicio del día y el primer intervalo, entre
	intervalos consecutivos, y entre el último intervalo y el fin del día.
	Un día sin disponibilidad devuelve un solo periodo que cubre todo el día.
	Sin configuración no se atenúa nada.

	Returns:
		list[dict]: [{"start": datetime, "end": datetime}, ...]
	"""
	if not config:
		return []

	tz = get_timezone(config)
	day = _to_date(target_date, tz)
	if day is None:
		return []

	day_start = tz.localize(datetime.combine(day, time.min))
	day_end = tz.localize(datetime.combine(day, time.max))

	available_ranges = resolve_availability(config, day, room_id)

	if not available_ranges:
		return [{"start": day_start, "end": day_end}]

	periods = []
	cursor = day_start

	for interval in available_ranges:
		if interval["start"] > cursor:
			periods.append({"start": cursor, "end": interval["start"]})
		if interval["end"] > cursor:
			cursor = interval["end"]

	if cursor < day_end:
		periods.append({"start": cursor, "end": day_end})

	return periods
