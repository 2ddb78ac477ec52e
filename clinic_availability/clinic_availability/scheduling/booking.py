"""
Booking Check

Validates an ad-hoc appointment range against the effective availability.
"""

from datetime import datetime
from typing import Dict, Optional, Any

from .availability import get_timezone, localize_datetime, resolve_availability


def is_time_slot_available(
	config: Optional[Dict[str, Any]],
	start_time: datetime,
	end_time: datetime,
	room_id: Optional[str] = None
) -> bool:
	"""
	Verifica si [start_time, end_time] cae completamente dentro de un intervalo disponible.

	Args:
		config: AvailabilityConfig, o None si la clínica no tiene configuración
		start_time: inicio de la cita (naive = hora local de la clínica)
		end_time: fin de la cita
		room_id: room opcional

	Returns:
		bool: True si está contenido en un intervalo (solapar parcialmente no alcanza).
		Sin configuración siempre True: la falta de settings nunca bloquea reservas.
	"""
	if not config:
		return True

	tz = get_timezone(config)
	start = localize_datetime(start_time, tz)
	end = localize_datetime(end_time, tz)

	if start >= end:
		return False

	# Se asume que la cita no cruza la medianoche: se usa el día del inicio
	available_ranges = resolve_availability(config, start, room_id)

	for interval in available_ranges:
		if interval["start"] <= start and end <= interval["end"]:
			return True

	return False


def describe_unavailable_slot(start_time: datetime, end_time: datetime) -> str:
	"""Mensaje para el usuario cuando el horario está fuera del horario de atención."""
	time_str = f"{start_time.strftime('%b %d, %H:%M')} - {end_time.strftime('%H:%M')}"
	return f"{time_str} is outside clinic operating hours"
