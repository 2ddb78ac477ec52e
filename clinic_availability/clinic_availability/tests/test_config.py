"""
Tests for scheduling/config.py

Tests default configuration, parsing and schedule editing helpers.
"""

import json
import unittest

from clinic_availability.clinic_availability.scheduling.availability import resolve_availability
from clinic_availability.clinic_availability.scheduling.config import (
	create_default_availability,
	create_empty_schedule,
	parse_availability_config,
	get_slot_minutes,
	copy_clinic_to_room,
	clear_room_schedule,
	set_exception,
	remove_exception,
	find_duplicate_exception_dates,
	WEEKDAY_KEYS
)
from clinic_availability.clinic_availability.tests.utils import make_config, make_schedule, MONDAY


class TestDefaultAvailability(unittest.TestCase):
	"""Tests for create_default_availability."""

	def test_default_hours(self):
		"""Mon-Thu 09:00-17:00, Sat 10:00-14:00, Fri and Sun closed."""
		config = create_default_availability()

		self.assertEqual(config["timezone"], "Africa/Cairo")
		self.assertEqual(config["slot_minutes"], 15)
		self.assertEqual(config["rooms"], {})
		self.assertEqual(config["clinic"]["exceptions"], [])
		for day in ("mon", "tue", "wed", "thu"):
			self.assertEqual(config["clinic"][day], [{"start": "09:00", "end": "17:00"}])
		self.assertEqual(config["clinic"]["sat"], [{"start": "10:00", "end": "14:00"}])
		self.assertEqual(config["clinic"]["fri"], [])
		self.assertEqual(config["clinic"]["sun"], [])

	def test_default_is_a_fresh_copy(self):
		"""Changing one default config does not leak into the next one."""
		config = create_default_availability()
		config["clinic"]["mon"].append({"start": "18:00", "end": "20:00"})
		config["clinic"]["tue"][0]["end"] = "12:00"

		fresh = create_default_availability()

		self.assertEqual(fresh["clinic"]["mon"], [{"start": "09:00", "end": "17:00"}])
		self.assertEqual(fresh["clinic"]["tue"], [{"start": "09:00", "end": "17:00"}])

	def test_empty_schedule(self):
		"""An empty schedule has every weekday closed."""
		schedule = create_empty_schedule()

		self.assertEqual(set(schedule), set(WEEKDAY_KEYS) | {"exceptions"})
		self.assertTrue(all(schedule[day] == [] for day in WEEKDAY_KEYS))


class TestParseAvailabilityConfig(unittest.TestCase):
	"""Tests for parse_availability_config."""

	def test_empty_values(self):
		"""Empty values mean there is no configuration."""
		self.assertIsNone(parse_availability_config(None))
		self.assertIsNone(parse_availability_config(""))
		self.assertIsNone(parse_availability_config("  "))
		self.assertIsNone(parse_availability_config({}))
		self.assertIsNone(parse_availability_config("{}"))

	def test_json_string_is_normalized(self):
		"""Missing days, exceptions and rooms are filled in."""
		raw = json.dumps({
			"timezone": "Asia/Dubai",
			"slot_minutes": 20,
			"clinic": {"mon": [{"start": "09:00", "end": "13:00"}]},
			"rooms": {"R1": {"sat": [{"start": "10:00", "end": "11:00"}]}}
		})

		config = parse_availability_config(raw)

		self.assertEqual(config["timezone"], "Asia/Dubai")
		self.assertEqual(config["slot_minutes"], 20)
		self.assertEqual(config["clinic"]["mon"], [{"start": "09:00", "end": "13:00"}])
		self.assertEqual(config["clinic"]["sun"], [])
		self.assertEqual(config["clinic"]["exceptions"], [])
		self.assertEqual(config["rooms"]["R1"]["sat"], [{"start": "10:00", "end": "11:00"}])
		self.assertEqual(config["rooms"]["R1"]["mon"], [])

	def test_missing_header_uses_defaults(self):
		"""Missing timezone and slot minutes take the defaults."""
		config = parse_availability_config({"clinic": {}})

		self.assertEqual(config["timezone"], "Africa/Cairo")
		self.assertEqual(config["slot_minutes"], 15)
		self.assertEqual(config["rooms"], {})

	def test_defaults_fill_missing_header(self):
		"""Defaults are used only for header values the stored config lacks."""
		defaults = {"timezone": "Asia/Riyadh", "slot_minutes": 20}

		config = parse_availability_config({"clinic": {}}, defaults=defaults)
		self.assertEqual(config["timezone"], "Asia/Riyadh")
		self.assertEqual(config["slot_minutes"], 20)

		config = parse_availability_config(
			json.dumps({"timezone": "America/Bogota", "slot_minutes": 30, "clinic": {}}),
			defaults=defaults
		)
		self.assertEqual(config["timezone"], "America/Bogota")
		self.assertEqual(config["slot_minutes"], 30)

		config = parse_availability_config({"clinic": {}}, defaults={"timezone": None, "slot_minutes": None})
		self.assertEqual(config["timezone"], "Africa/Cairo")
		self.assertEqual(config["slot_minutes"], 15)

	def test_dict_input_is_copied(self):
		"""Parsing a dict never returns the same nested objects."""
		raw = {"clinic": {"mon": [{"start": "09:00", "end": "17:00"}]}}

		config = parse_availability_config(raw)
		config["clinic"]["mon"][0]["end"] = "10:00"

		self.assertEqual(raw["clinic"]["mon"][0]["end"], "17:00")

	def test_invalid_json(self):
		"""Invalid JSON raises ValueError."""
		with self.assertRaises(ValueError):
			parse_availability_config("{not json")

	def test_non_object(self):
		"""A JSON list is not a configuration."""
		with self.assertRaises(ValueError):
			parse_availability_config("[1, 2]")
		with self.assertRaises(ValueError):
			parse_availability_config({"clinic": {}, "rooms": ["R1"]})

	def test_slot_minutes(self):
		"""Invalid slot minutes fall back to the default."""
		self.assertEqual(get_slot_minutes({"slot_minutes": "30"}), 30)
		self.assertEqual(get_slot_minutes({"slot_minutes": "abc"}), 15)
		self.assertEqual(get_slot_minutes({"slot_minutes": -5}), 15)
		self.assertEqual(get_slot_minutes(None), 15)


class TestScheduleEditing(unittest.TestCase):
	"""Tests for schedule editing helpers."""

	def test_copy_clinic_to_room(self):
		"""The room gets an independent copy of clinic hours."""
		config = make_config(make_schedule(mon=[("09:00", "17:00")]))

		updated = copy_clinic_to_room(config, "R1")
		updated["rooms"]["R1"]["mon"][0]["end"] = "12:00"

		self.assertEqual(config["rooms"], {})
		self.assertEqual(updated["clinic"]["mon"], [{"start": "09:00", "end": "17:00"}])

	def test_clear_room_schedule_closes_room(self):
		"""A cleared room is closed rather than inheriting clinic hours."""
		config = copy_clinic_to_room(make_config(), "R1")

		updated = clear_room_schedule(config, "R1")

		self.assertEqual(updated["rooms"]["R1"], create_empty_schedule())
		self.assertEqual(resolve_availability(updated, MONDAY, "R1"), [])
		self.assertEqual(len(resolve_availability(config, MONDAY, "R1")), 1)

	def test_set_exception_replaces_same_date(self):
		"""Saving an exception for a date replaces the previous one."""
		schedule = make_schedule(exceptions=[
			{"date": "2026-02-01", "closed": True},
			{"date": MONDAY, "closed": True}
		])

		updated = set_exception(schedule, {
			"date": MONDAY,
			"closed": False,
			"overrides": [{"start": "13:00", "end": "15:00"}, {"start": "09:00", "end": "10:00"}]
		})

		self.assertEqual(updated["exceptions"], [
			{
				"date": MONDAY,
				"closed": False,
				"overrides": [{"start": "09:00", "end": "10:00"}, {"start": "13:00", "end": "15:00"}]
			},
			{"date": "2026-02-01", "closed": True}
		])
		self.assertEqual(len(schedule["exceptions"]), 2)
		self.assertTrue(schedule["exceptions"][1]["closed"])

	def test_closed_exception_drops_overrides(self):
		"""A closed exception does not keep override ranges."""
		updated = set_exception(create_empty_schedule(), {
			"date": MONDAY,
			"closed": True,
			"overrides": [{"start": "09:00", "end": "10:00"}]
		})

		self.assertEqual(updated["exceptions"], [{"date": MONDAY, "closed": True}])

	def test_remove_exception(self):
		"""Removing an exception deletes every entry for that date."""
		schedule = make_schedule(exceptions=[
			{"date": MONDAY, "closed": True},
			{"date": MONDAY, "overrides": []},
			{"date": "2026-02-01", "closed": True}
		])

		updated = remove_exception(schedule, MONDAY)

		self.assertEqual(updated["exceptions"], [{"date": "2026-02-01", "closed": True}])

	def test_find_duplicate_exception_dates(self):
		"""Dates listed more than once are reported once."""
		schedule = make_schedule(exceptions=[
			{"date": MONDAY, "closed": True},
			{"date": "2026-02-01", "closed": True},
			{"date": MONDAY, "overrides": []},
			{"date": MONDAY, "closed": False}
		])

		self.assertEqual(find_duplicate_exception_dates(schedule), [MONDAY])
		self.assertEqual(find_duplicate_exception_dates(None), [])


def run_tests():
	"""Run all tests in this module."""
	unittest.main()
