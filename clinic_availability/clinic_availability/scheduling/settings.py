"""
Settings Store

Loads the availability configuration of a clinic from
Clinic Availability Settings (one record per clinic).
"""

import frappe
from typing import Dict, Optional, Any

from .config import create_default_availability, parse_availability_config

SETTINGS_DOCTYPE = "Clinic Availability Settings"


def get_clinic_availability(clinic: str) -> Optional[Dict[str, Any]]:
	"""
	Obtiene la configuración de disponibilidad de una clínica.

	Args:
		clinic: nombre de la clínica

	Returns:
		dict: configuración normalizada
		- Si la clínica no tiene settings: configuración por defecto
		- Si tiene settings pero sin availability: None (no se bloquea nada)
	"""
	settings_name = frappe.db.get_value(SETTINGS_DOCTYPE, {"clinic": clinic}, "name")

	if not settings_name:
		frappe.logger("clinic_availability").info(
			f"Clinic {clinic} has no {SETTINGS_DOCTYPE}, using default availability"
		)
		return create_default_availability()

	settings = frappe.get_doc(SETTINGS_DOCTYPE, settings_name)
	# El JSON guardado manda; los campos del documento solo completan lo que falte
	return parse_availability_config(
		settings.availability,
		defaults={"timezone": settings.timezone, "slot_minutes": settings.slot_minutes}
	)
