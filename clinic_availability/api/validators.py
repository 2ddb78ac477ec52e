"""
API Argument Parsing

Turns raw request arguments of the availability endpoints into dates,
datetimes and names. Anything that does not parse is a
frappe.ValidationError, never a server error.
"""

from datetime import date, datetime
from typing import Any

import frappe
from frappe import _

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M")

# Límite de longitud de un name en Frappe
MAX_NAME_LENGTH = 140


def _required(value: Any, field_name: str) -> str:
	if value is None or not str(value).strip():
		frappe.throw(_("{0} is required").format(field_name), frappe.ValidationError)
	return str(value).strip()


def parse_date_arg(value: Any, field_name: str = "date") -> date:
	"""
	Parsea una fecha YYYY-MM-DD que además exista en el calendario.

	"2026-02-30" o "2026-13-45" se rechazan igual que un formato incorrecto.

	Raises:
		frappe.ValidationError: si falta o no es una fecha válida
	"""
	if isinstance(value, date) and not isinstance(value, datetime):
		return value

	value = _required(value, field_name)

	try:
		return datetime.strptime(value, DATE_FORMAT).date()
	except ValueError:
		frappe.throw(
			_("Invalid {0} '{1}'. Use a real date in YYYY-MM-DD format").format(field_name, value),
			frappe.ValidationError
		)


def parse_datetime_arg(value: Any, field_name: str = "datetime") -> datetime:
	"""
	Parsea "YYYY-MM-DD HH:MM:SS" o "YYYY-MM-DD HH:MM" (hora local de la clínica).

	Raises:
		frappe.ValidationError: si falta o no es un datetime válido
	"""
	if isinstance(value, datetime):
		return value

	value = _required(value, field_name)

	for fmt in DATETIME_FORMATS:
		try:
			return datetime.strptime(value, fmt)
		except ValueError:
			continue

	frappe.throw(
		_("Invalid {0} '{1}'. Use YYYY-MM-DD HH:MM:SS").format(field_name, value),
		frappe.ValidationError
	)


def validate_name_arg(value: Any, field_name: str = "name") -> str:
	"""
	Valida el nombre de una clínica o room.

	Los nombres solo se usan como filtro de frappe.db.get_value y como
	clave del JSON de rooms, así que basta con exigir texto de una línea
	dentro del largo de un name.

	Raises:
		frappe.ValidationError: si falta, es demasiado largo o tiene saltos de línea
	"""
	value = _required(value, field_name)

	if len(value) > MAX_NAME_LENGTH:
		frappe.throw(_("{0} is too long").format(field_name), frappe.ValidationError)

	if any(char in value for char in "\r\n\t"):
		frappe.throw(_("Invalid {0}").format(field_name), frappe.ValidationError)

	return value
