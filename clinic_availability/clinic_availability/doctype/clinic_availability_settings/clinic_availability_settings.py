# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Clinic Availability Settings DocType

Configuración de disponibilidad por clínica:
- Horario semanal de la clínica y de cada room
- Excepciones por fecha (cerrado u horario de reemplazo)
- Timezone y duración de slot
"""

import frappe
from frappe import _
from frappe.model.document import Document
from typing import Dict, Any

from clinic_availability.clinic_availability.scheduling.config import (
	create_default_availability,
	parse_availability_config
)
from clinic_availability.clinic_availability.scheduling.rules import (
	validate_availability_config,
	collect_room_warnings,
	collect_slot_warnings,
	collect_duplicate_exception_warnings
)


class ClinicAvailabilitySettings(Document):
	"""
	Clinic Availability Settings with validation.

	Validations:
	- clinic required
	- availability must be valid JSON (empty means a fresh default config)
	- timezone / slot_minutes fields are the source of truth for the config header
	- every range HH:MM with start < end, no overlaps within a day
	- exception dates YYYY-MM-DD
	- Warn (no block) on room hours outside clinic hours
	- Warn (no block) on slot minutes outside the editor choices
	- Warn (no block) on duplicate exceptions for the same date
	"""

	def validate(self) -> None:
		"""
		Validación antes de guardar.
		"""
		self._validate_clinic()
		config = self._load_availability()
		self._sync_header_fields(config)
		self._validate_rules(config)
		self._warn_room_hours(config)
		self._warn_slot_minutes(config)
		self._warn_duplicate_exceptions(config)
		self.availability = frappe.as_json(config)

	def _validate_clinic(self) -> None:
		"""Valida que clinic esté presente."""
		if not self.clinic:
			frappe.throw(_("Clinic es requerido"))

	def _load_availability(self) -> Dict[str, Any]:
		"""Parsea el JSON guardado; si está vacío arranca desde la configuración por defecto."""
		try:
			config = parse_availability_config(self.availability)
		except ValueError as e:
			frappe.throw(_(f"Availability no es un JSON válido: {str(e)}"))

		if config is None:
			config = create_default_availability()

		return config

	def _sync_header_fields(self, config: Dict[str, Any]) -> None:
		"""
		Copia timezone y slot_minutes del documento al JSON.
		Si el documento no los tiene, los toma del JSON.
		"""
		if self.timezone:
			config["timezone"] = self.timezone
		else:
			self.timezone = config["timezone"]

		if self.slot_minutes:
			config["slot_minutes"] = self.slot_minutes
		else:
			self.slot_minutes = config["slot_minutes"]

	def _validate_rules(self, config: Dict[str, Any]) -> None:
		"""Bloquea el guardado si la configuración tiene errores."""
		errors = validate_availability_config(config)

		if errors:
			frappe.throw("<br>".join(errors), title=_("Invalid availability"))

	def _warn_room_hours(self, config: Dict[str, Any]) -> None:
		"""Advierte sobre rooms con horas fuera del horario de la clínica."""
		warnings = collect_room_warnings(config)

		if warnings:
			frappe.msgprint(
				"<br>".join(warnings),
				title=_("Room hours outside clinic hours"),
				indicator="orange",
				alert=True
			)

	def _warn_slot_minutes(self, config: Dict[str, Any]) -> None:
		"""Advierte si la duración de slot no es una de las que ofrece el editor."""
		for warning in collect_slot_warnings(config):
			frappe.msgprint(warning, indicator="orange", alert=True)

	def _warn_duplicate_exceptions(self, config: Dict[str, Any]) -> None:
		"""
		Advierte sobre excepciones duplicadas para la misma fecha.
		No bloquea: la primera excepción de la lista es la que se aplica.
		"""
		warnings = collect_duplicate_exception_warnings(config)

		if warnings:
			frappe.msgprint(
				"<br>".join(warnings),
				indicator="orange",
				alert=True
			)
