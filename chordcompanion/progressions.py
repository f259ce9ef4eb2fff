import logging
import typing

import chordcompanion.constants


logger = logging.getLogger(__name__)


PRESET_DEGREES: typing.Dict[str, typing.Tuple[int, ...]] = {
	"I-V-vi-IV": (1, 5, 6, 4),
	"ii-V-I": (2, 5, 1),
	"I-vi-IV-V": (1, 6, 4, 5),
	"vi-IV-I-V": (6, 4, 1, 5),
}

CUSTOM_PRESET = "custom"

PRESET_NAMES: typing.List[str] = list(PRESET_DEGREES) + [CUSTOM_PRESET]

_ROMAN_UPPER = ["I", "II", "III", "IV", "V", "VI", "VII"]


def parse_progression (text: str) -> typing.List[int]:

	"""
	Parse a free-form degree string into scale degrees.

	Commas and spaces are treated like dashes. Tokens that are not plain
	decimal digits, or whose value is outside 1–7, are dropped without
	complaint, so the result may be empty.

	Parameters:
		text: A string such as ``"1-5-6-4"``, ``"1, 5, 6, 4"`` or ``"2 5 1"``.

	Returns:
		The degrees in the order they were written.

	Example:
		```python
		parse_progression("1-9-6")    # → [1, 6]
		parse_progression("I-V-vi")   # → []
		```
	"""

	cleaned = text.strip().replace(",", "-").replace(" ", "-")
	degrees: typing.List[int] = []

	for token in cleaned.split("-"):

		token = token.strip()

		# str.isdigit() also accepts superscripts and other Unicode digits.
		if not token or not (token.isascii() and token.isdigit()):
			continue

		degree = int(token)

		if 1 <= degree <= chordcompanion.constants.DEGREES_PER_OCTAVE:
			degrees.append(degree)

	return degrees


def resolve (preset: str, custom: str = "") -> typing.List[int]:

	"""
	Turn a preset name (or ``"custom"`` plus a degree string) into degrees.

	Whatever the mode, an empty result falls back to ``[1, 5, 6, 4]``.
	Unknown preset names also resolve to that default.

	Example:
		```python
		resolve("ii-V-I")              # → [2, 5, 1]
		resolve("custom", "1 5 6 4")   # → [1, 5, 6, 4]
		resolve("custom", "")          # → [1, 5, 6, 4]
		```
	"""

	if preset == CUSTOM_PRESET:
		degrees = parse_progression(custom)

	else:
		degrees = list(PRESET_DEGREES.get(preset, ()))

	if not degrees:
		logger.debug(f"Progression {preset!r} / {custom!r} resolved to nothing, using the default")
		degrees = list(chordcompanion.constants.DEFAULT_PROGRESSION)

	return degrees


def degrees_to_roman (degrees: typing.Iterable[int], minor: bool = False) -> str:

	"""
	Label degrees with roman numerals, e.g. ``[1, 5, 6, 4]`` → ``"I-V-VI-IV"``.

	Lower case is used when ``minor`` is set. Out-of-range degrees are skipped.
	"""

	labels = []

	for degree in degrees:
		if 1 <= degree <= chordcompanion.constants.DEGREES_PER_OCTAVE:
			numeral = _ROMAN_UPPER[degree - 1]
			labels.append(numeral.lower() if minor else numeral)

	return "-".join(labels)
