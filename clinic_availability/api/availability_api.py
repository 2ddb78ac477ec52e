"""
Availability API Endpoints

Whitelisted functions used by the calendar and the appointment form.
Datetimes are returned as "YYYY-MM-DD HH:MM:SS" in the clinic timezone.
"""

import frappe
from frappe import _
from datetime import datetime
from typing import Dict, List, Any, Optional

from clinic_availability.clinic_availability.scheduling import validation
from clinic_availability.clinic_availability.scheduling.availability import resolve_availability_range
from clinic_availability.clinic_availability.scheduling.booking import describe_unavailable_slot
from clinic_availability.clinic_availability.scheduling.settings import get_clinic_availability

from clinic_availability.api.validators import (
	parse_date_arg,
	parse_datetime_arg,
	validate_name_arg
)

MAX_RANGE_DAYS = 62

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _serialize_interval(interval: Dict[str, Any]) -> Dict[str, Any]:
	serialized = {
		"start": interval["start"].strftime(DATETIME_FORMAT),
		"end": interval["end"].strftime(DATETIME_FORMAT)
	}
	if "room_id" in interval:
		serialized["room"] = interval["room_id"]
	return serialized


def _optional_room(room: Optional[str]) -> Optional[str]:
	return validate_name_arg(room, "room") if room else None


@frappe.whitelist(methods=['GET'])
def get_availability_settings(clinic: str) -> Optional[Dict[str, Any]]:
	"""
	Obtiene la configuración de disponibilidad de una clínica.

	Returns:
		dict: AvailabilityConfig (la configuración por defecto si la clínica no tiene
		settings), o None si los settings existen pero no tienen availability
	"""
	clinic = validate_name_arg(clinic, "clinic")
	return get_clinic_availability(clinic)


@frappe.whitelist(methods=['GET'])
def get_available_slots(clinic: str, date: str, room: Optional[str] = None) -> List[Dict[str, Any]]:
	"""
	Obtiene slots reservables de un día.

	Args:
		clinic: nombre de la clínica
		date: fecha (YYYY-MM-DD)
		room: room opcional

	Returns:
		list[dict]: [
			{
				"start": "2026-01-19 09:00:00",
				"end": "2026-01-19 09:15:00",
				"room": "ROOM-0001"
			},
			...
		]

	Example:
		```javascript
		frappe.call({
			method: "clinic_availability.api.availability_api.get_available_slots",
			args: {clinic: "Main Clinic", date: "2026-01-19", room: "ROOM-0001"},
			callback: function(r) {
				console.log(r.message);
			}
		});
		```
	"""
	clinic = validate_name_arg(clinic, "clinic")
	target_date = parse_date_arg(date, "date")
	room = _optional_room(room)

	slots = validation.get_available_slots(clinic, target_date, room)
	return [_serialize_interval(slot) for slot in slots]


@frappe.whitelist(methods=['GET'])
def get_non_bookable_periods(clinic: str, date: str, room: Optional[str] = None) -> List[Dict[str, Any]]:
	"""
	Obtiene los periodos no reservables de un día (para atenuar el calendario).

	Returns:
		list[dict]: [{"start": "2026-01-19 00:00:00", "end": "2026-01-19 09:00:00"}, ...]
	"""
	clinic = validate_name_arg(clinic, "clinic")
	target_date = parse_date_arg(date, "date")
	room = _optional_room(room)

	periods = validation.get_non_bookable_periods(clinic, target_date, room)
	return [_serialize_interval(period) for period in periods]


@frappe.whitelist(methods=['GET'])
def get_effective_availability(
	clinic: str,
	from_date: str,
	to_date: str,
	room: Optional[str] = None
) -> Dict[str, List[Dict[str, Any]]]:
	"""
	Obtiene los intervalos disponibles para un rango de fechas.

	Returns:
		dict: {
			"2026-01-19": [{"start": "2026-01-19 09:00:00", "end": "2026-01-19 17:00:00"}],
			...
		}
		Los días cerrados no aparecen.
	"""
	clinic = validate_name_arg(clinic, "clinic")
	start_date = parse_date_arg(from_date, "from_date")
	end_date = parse_date_arg(to_date, "to_date")
	room = _optional_room(room)

	if start_date > end_date:
		frappe.throw(_("from_date debe ser menor o igual que to_date"))

	if (end_date - start_date).days >= MAX_RANGE_DAYS:
		frappe.throw(_(f"El rango no puede superar {MAX_RANGE_DAYS} días"))

	try:
		availability = get_clinic_availability(clinic)
		if not availability:
			return {}
		result = resolve_availability_range(availability, start_date, end_date, room)
	except Exception as e:
		frappe.log_error(
			title="API Error",
			message=f"Error in get_effective_availability for {clinic}: {str(e)}"
		)
		return {}

	return {
		day: [_serialize_interval(interval) for interval in intervals]
		for day, intervals in result.items()
	}


@frappe.whitelist(methods=['GET', 'POST'])
def check_time_slot(
	clinic: str,
	start_datetime: str,
	end_datetime: str,
	room: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Valida un horario de cita ANTES de guardarla.

	Args:
		clinic: nombre de la clínica
		start_datetime: inicio (YYYY-MM-DD HH:MM:SS, hora local de la clínica)
		end_datetime: fin (YYYY-MM-DD HH:MM:SS)
		room: room opcional

	Returns:
		dict: {
			"available": bool,
			"message": str | None
		}
	"""
	clinic = validate_name_arg(clinic, "clinic")
	start: datetime = parse_datetime_arg(start_datetime, "start_datetime")
	end: datetime = parse_datetime_arg(end_datetime, "end_datetime")
	room = _optional_room(room)

	if start >= end:
		frappe.throw(_("start_datetime debe ser menor que end_datetime"))

	available = validation.is_time_slot_available(clinic, start, end, room)

	return {
		"available": available,
		"message": None if available else describe_unavailable_slot(start, end)
	}
