import typing

import chordcompanion.constants


SCALE_INTERVALS: typing.Dict[str, typing.Tuple[int, ...]] = {
	"major": (0, 2, 4, 5, 7, 9, 11),
	"natural_minor": (0, 2, 3, 5, 7, 8, 10),
	"harmonic_minor": (0, 2, 3, 5, 7, 8, 11),
	"dorian": (0, 2, 3, 5, 7, 9, 10),
	"mixolydian": (0, 2, 4, 5, 7, 9, 10),
}

SCALE_NAMES: typing.List[str] = list(SCALE_INTERVALS)

DEFAULT_SCALE = "major"

# Scales whose third degree is a minor third from the tonic.
MINOR_SCALES: typing.FrozenSet[str] = frozenset({"natural_minor", "harmonic_minor", "dorian"})


def intervals (scale: str) -> typing.Tuple[int, ...]:

	"""
	Return the seven semitone offsets from the tonic for a scale.

	Unknown scale names fall back to the major table, so this never fails.

	Parameters:
		scale: One of ``"major"``, ``"natural_minor"``, ``"harmonic_minor"``,
			``"dorian"``, ``"mixolydian"``.

	Returns:
		Tuple of 7 offsets indexed by degree - 1.

	Example:
		```python
		intervals("dorian")   # → (0, 2, 3, 5, 7, 9, 10)
		intervals("bebop")    # → (0, 2, 4, 5, 7, 9, 11)  (major fallback)
		```
	"""

	return SCALE_INTERVALS.get(scale, SCALE_INTERVALS[DEFAULT_SCALE])


def degree_to_semitone (scale_intervals: typing.Sequence[int], degree: int) -> int:

	"""
	Resolve a diatonic degree to semitones above the tonic.

	Degrees above 7 wrap into the next octave, so the 9th is the 2nd plus
	12, the 11th is the 4th plus 12 and the 13th is the 6th plus 12.

	Example:
		```python
		major = intervals("major")
		degree_to_semitone(major, 3)   # → 4
		degree_to_semitone(major, 9)   # → 14
		degree_to_semitone(major, 13)  # → 21
		```
	"""

	per_octave = chordcompanion.constants.DEGREES_PER_OCTAVE
	wraps, index = divmod(degree - 1, per_octave)

	return scale_intervals[index] + chordcompanion.constants.OCTAVE * wraps


def is_minor (scale: str) -> bool:

	"""
	Return True when the scale has a minor third above the tonic.
	"""

	return scale in MINOR_SCALES
