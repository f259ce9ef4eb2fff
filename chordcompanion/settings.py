"""Settings snapshot and configuration loading.

``Settings`` is the single immutable bundle of musical parameters read by the
engine, the reactive trigger and the exporter. Because it is frozen, a
snapshot can be handed to an export running on another thread while the
live processor moves on to newer settings.

Values are validated on construction. Everything downstream of this module
assumes a valid snapshot and only clamps defensively.

Configuration files are YAML. Either a flat mapping of setting names or a
document with a ``settings:`` section is accepted::

	settings:
	  key: "A"
	  scale: natural_minor
	  preset: custom
	  custom_progression: "1-6-3-7"
	engine:
	  sample_rate: 48000
"""

import dataclasses
import logging
import os
import typing

import yaml

import chordcompanion.chords
import chordcompanion.constants.velocity
import chordcompanion.progressions
import chordcompanion.scales


logger = logging.getLogger(__name__)


# Inclusive (low, high) bounds for integer settings.
INT_RANGES: typing.Dict[str, typing.Tuple[int, int]] = {
	"key": (0, 11),
	"inversion": (0, 3),
	"velocity": (1, 127),
	"note_length_ms": (10, 4000),
	"humanize_ms": (0, 25),
	"humanize_velocity": (0, chordcompanion.constants.velocity.MAX_HUMANIZE_VELOCITY),
	"octave": (3, 6),
}

CHOICES: typing.Dict[str, typing.List[str]] = {
	"scale": chordcompanion.scales.SCALE_NAMES,
	"preset": chordcompanion.progressions.PRESET_NAMES,
	"quality": chordcompanion.chords.CHORD_QUALITIES,
}

BOOL_FIELDS: typing.Tuple[str, ...] = ("add7", "add9", "add11", "add13", "follow_host")


@dataclasses.dataclass(frozen=True)
class Settings:

	"""
	Musical parameters for building and playing a progression.
	"""

	key: int = 0
	scale: str = "major"
	preset: str = "I-V-vi-IV"
	custom_progression: str = "1-5-6-4"
	quality: str = "triad"
	add7: bool = False
	add9: bool = False
	add11: bool = False
	add13: bool = False
	inversion: int = 0
	velocity: int = chordcompanion.constants.velocity.DEFAULT_VELOCITY
	note_length_ms: int = 600
	humanize_ms: int = 0
	humanize_velocity: int = 0
	octave: int = 4
	follow_host: bool = True


	def __post_init__ (self) -> None:

		"""
		Reject values outside the documented ranges and choices.
		"""

		for name, (low, high) in INT_RANGES.items():

			value = getattr(self, name)

			if isinstance(value, bool) or not isinstance(value, int):
				raise ValueError(f"{name} must be an integer, got {value!r}")

			if not low <= value <= high:
				raise ValueError(f"{name} must be between {low} and {high}, got {value}")

		for name, options in CHOICES.items():

			value = getattr(self, name)

			if value not in options:
				raise ValueError(f"Unknown {name}: {value!r}. Available: {options}")

		for name in BOOL_FIELDS:

			if not isinstance(getattr(self, name), bool):
				raise ValueError(f"{name} must be a boolean, got {getattr(self, name)!r}")

		if not isinstance(self.custom_progression, str):
			raise ValueError(f"custom_progression must be a string, got {self.custom_progression!r}")


	@property
	def toggles (self) -> chordcompanion.chords.ExtensionToggles:

		"""
		The four extension switches as one value.
		"""

		return chordcompanion.chords.ExtensionToggles(
			add7 = self.add7,
			add9 = self.add9,
			add11 = self.add11,
			add13 = self.add13
		)


	def degrees (self) -> typing.List[int]:

		"""
		Resolve the preset (or custom string) to scale degrees.
		"""

		return chordcompanion.progressions.resolve(self.preset, self.custom_progression)


	def replace (self, **changes: typing.Any) -> "Settings":

		"""
		Return a validated copy with some fields changed.
		"""

		if isinstance(changes.get("key"), str):
			changes["key"] = chordcompanion.chords.key_name_to_pc(changes["key"])

		return dataclasses.replace(self, **changes)


	@classmethod
	def from_dict (cls, data: typing.Mapping[str, typing.Any]) -> "Settings":

		"""Build settings from a flat mapping such as a parsed YAML section.

		Missing fields keep their defaults. ``key`` may be a note name
		(``"F#"``) or a pitch class.

		Raises:
			ValueError: For unknown field names or invalid values.
		"""

		known = {field.name for field in dataclasses.fields(cls)}
		unknown = sorted(set(data) - known)

		if unknown:
			raise ValueError(f"Unknown settings: {unknown}. Available: {sorted(known)}")

		return cls().replace(**dict(data))


def load_config (config_path: str = "config.yaml") -> typing.Dict[str, typing.Any]:

	"""
	Load a YAML configuration file, or an empty config if it does not exist.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, "r") as f:
		data = yaml.safe_load(f)

	if data is None:
		return {}

	if not isinstance(data, dict):
		raise ValueError(f"Config file {config_path} must contain a mapping")

	return data


def settings_from_config (config: typing.Mapping[str, typing.Any]) -> Settings:

	"""
	Read the ``settings`` section of a config (or the whole flat mapping).
	"""

	if "settings" in config:
		return Settings.from_dict(config["settings"] or {})

	flat = {
		name: value
		for name, value in config.items()
		if name not in ("engine", "midi", "export")
	}

	return Settings.from_dict(flat)


def load_settings (config_path: str = "config.yaml") -> Settings:

	"""
	Load and validate settings from a YAML file (defaults if it is missing).
	"""

	return settings_from_config(load_config(config_path))
