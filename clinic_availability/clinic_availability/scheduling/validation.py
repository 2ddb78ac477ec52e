"""
Availability Validation Service

Clinic-bound entry points used by the appointment form, the calendar and
the Clinic Appointment doc events.

Any failure while loading settings or computing availability is logged
and never blocks the caller: validation paths treat it as available,
slot paths return an empty list.
"""

import frappe
from frappe import _
from frappe.utils import get_datetime
from datetime import datetime, date
from typing import List, Dict, Union, Optional, Any

from . import booking, slots
from .settings import get_clinic_availability


def is_time_slot_available(
	clinic: str,
	start_time: datetime,
	end_time: datetime,
	room: Optional[str] = None
) -> bool:
	"""
	Verifica si un horario de cita está dentro de la disponibilidad de la clínica/room.

	Returns:
		bool: True si está disponible, si no hay configuración, o si hubo un error
	"""
	try:
		availability = get_clinic_availability(clinic)
		return booking.is_time_slot_available(availability, start_time, end_time, room)
	except Exception as e:
		frappe.log_error(
			title="Availability Validation Error",
			message=f"Error validating availability for {clinic} ({start_time} - {end_time}, room {room}): {str(e)}"
		)
		return True


def get_available_slots(
	clinic: str,
	target_date: Union[date, str],
	room: Optional[str] = None
) -> List[Dict[str, Any]]:
	"""
	Slots reservables del día para el calendario.

	Returns:
		list[dict]: [{"start": datetime, "end": datetime, "room_id": str | None}, ...]
		Lista vacía si no hay configuración o si hubo un error.
	"""
	try:
		availability = get_clinic_availability(clinic)
		return slots.get_available_slots(availability, target_date, room)
	except Exception as e:
		frappe.log_error(
			title="Availability Slots Error",
			message=f"Error generating available slots for {clinic} on {target_date} (room {room}): {str(e)}"
		)
		return []


def get_non_bookable_periods(
	clinic: str,
	target_date: Union[date, str],
	room: Optional[str] = None
) -> List[Dict[str, datetime]]:
	"""
	Periodos no reservables del día (solo para atenuar el calendario).

	Returns:
		list[dict]: [{"start": datetime, "end": datetime}, ...]
	"""
	try:
		availability = get_clinic_availability(clinic)
		return slots.get_non_bookable_periods(availability, target_date, room)
	except Exception as e:
		frappe.log_error(
			title="Availability Slots Error",
			message=f"Error computing non-bookable periods for {clinic} on {target_date} (room {room}): {str(e)}"
		)
		return []


def validate_and_notify(
	clinic: str,
	start_time: datetime,
	end_time: datetime,
	room: Optional[str] = None
) -> bool:
	"""
	Valida el horario y avisa al usuario si no está disponible.

	Returns:
		bool: resultado de is_time_slot_available
	"""
	is_valid = is_time_slot_available(clinic, start_time, end_time, room)

	if not is_valid:
		frappe.msgprint(
			booking.describe_unavailable_slot(start_time, end_time),
			title=_("Time slot not available"),
			indicator="red",
			alert=True
		)

	return is_valid


def validate_appointment_availability(doc: Any, method: Optional[str] = None) -> None:
	"""
	doc_events hook: bloquea citas fuera del horario de la clínica/room.

	Citas sin clínica o sin horario se ignoran; su validación es
	responsabilidad del propio DocType.
	"""
	if not doc.get("clinic") or not doc.get("start_datetime") or not doc.get("end_datetime"):
		return

	start = get_datetime(doc.start_datetime)
	end = get_datetime(doc.end_datetime)

	if not is_time_slot_available(doc.clinic, start, end, doc.get("room")):
		frappe.throw(
			booking.describe_unavailable_slot(start, end),
			title=_("Time slot not available")
		)
