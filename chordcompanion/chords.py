"""Diatonic chord construction and pitch class utilities.

Chords are stacked in thirds (degrees 1, 3, 5, 7, 9, 11, 13) using the
scale's offsets measured from the chord root, not from the tonic. Every
degree of a progression therefore carries the shape of the scale's own tonic
chord: in C major, ii is D-F#-A and vi is A-C#-E, moving in parallel.

Module-level constants:
- `NOTE_NAME_TO_PC`: Maps note names (e.g., `"C"`, `"F#"`, `"Bb"`) to pitch classes (0-11)
- `PC_TO_NOTE_NAME`: Maps pitch classes to sharp note names
- `CHORD_QUALITIES`: Ordered quality levels, each implying the extensions of the ones before it

Module-level helpers:
- `key_name_to_pc(key_name)`: Validate a key name and return its pitch class (0–11).
- `degree_to_root(...)`: Scale degree to absolute MIDI root pitch.
- `build_chord(...)`: Stack, invert and range-fit a chord over a root.
"""

import dataclasses
import typing

import chordcompanion.constants
import chordcompanion.scales
import chordcompanion.voicings

if typing.TYPE_CHECKING:
	from chordcompanion.settings import Settings


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

PC_TO_NOTE_NAME: typing.List[str] = [
	"C",
	"C#",
	"D",
	"D#",
	"E",
	"F",
	"F#",
	"G",
	"G#",
	"A",
	"A#",
	"B",
]

CHORD_QUALITIES: typing.List[str] = [
	"triad",
	"seventh",
	"ninth",
	"eleventh",
	"thirteenth",
]

# Extension degree added by each quality level above the triad.
_EXTENSION_DEGREES: typing.List[typing.Tuple[str, int]] = [
	("seventh", 7),
	("ninth", 9),
	("eleventh", 11),
	("thirteenth", 13),
]


def key_name_to_pc (key_name: str) -> int:

	"""Validate a key name and return its pitch class (0–11).

	Raises:
		ValueError: If the key name is not recognised.

	Example:
		```python
		key_name_to_pc("F#")  # → 6
		key_name_to_pc("Bb")  # → 10
		```
	"""

	if key_name not in NOTE_NAME_TO_PC:
		raise ValueError(
			f"Unknown key name: {key_name!r}. Expected e.g. 'C', 'F#', 'Bb'."
		)

	return NOTE_NAME_TO_PC[key_name]


def quality_level (quality: str) -> int:

	"""
	Return the position of a quality in ``CHORD_QUALITIES`` (unknown = triad).
	"""

	if quality in CHORD_QUALITIES:
		return CHORD_QUALITIES.index(quality)

	return 0


@dataclasses.dataclass(frozen=True)
class ExtensionToggles:

	"""
	Independent switches that add chord extensions on top of the quality.
	"""

	add7: bool = False
	add9: bool = False
	add11: bool = False
	add13: bool = False


	def includes (self, degree: int) -> bool:

		"""
		Return True when the toggle for an extension degree is on.
		"""

		return {7: self.add7, 9: self.add9, 11: self.add11, 13: self.add13}.get(degree, False)


def stack_degrees (quality: str, toggles: ExtensionToggles) -> typing.List[int]:

	"""Return the diatonic degrees to stack for a quality plus toggles.

	Each extension is checked on its own: it is added when the quality
	reaches its level *or* its toggle is set. A triad with only ``add13``
	therefore stacks ``[1, 3, 5, 13]``, while a ninth with ``add13`` stacks
	``[1, 3, 5, 7, 9, 13]``.
	"""

	level = quality_level(quality)
	degrees = [1, 3, 5]

	for name, degree in _EXTENSION_DEGREES:
		if level >= CHORD_QUALITIES.index(name) or toggles.includes(degree):
			degrees.append(degree)

	return degrees


def degree_to_root (degree: int, key_pc: int, scale: str, octave: int) -> int:

	"""Return the MIDI root pitch of a scale degree.

	``degree`` is clamped into 1–7, so out-of-range input never fails.

	Parameters:
		degree: Scale degree (1 = tonic)
		key_pc: Tonic pitch class (0 = C … 11 = B)
		scale: Scale name (see :mod:`chordcompanion.scales`)
		octave: Octave multiplier; octave 4 puts C at MIDI 48

	Example:
		```python
		degree_to_root(5, 0, "major", 4)  # → 55 (G)
		degree_to_root(6, 9, "natural_minor", 4)  # → 65 (F)
		```
	"""

	scale_intervals = chordcompanion.scales.intervals(scale)
	clamped = max(1, min(chordcompanion.constants.DEGREES_PER_OCTAVE, degree))

	return octave * chordcompanion.constants.OCTAVE + key_pc + scale_intervals[clamped - 1]


def build_chord (
	root: int,
	scale: str,
	quality: str = "triad",
	inversion: int = 0,
	toggles: typing.Optional[ExtensionToggles] = None
) -> typing.List[int]:

	"""Build an ascending list of MIDI pitches for a diatonic chord.

	The chord is stacked in thirds from ``root`` using the scale's intervals,
	inverted by lifting the lowest note ``inversion`` times, then shifted by
	whole octaves into the 48–84 range.

	Parameters:
		root: MIDI pitch of the chord root (usually from :func:`degree_to_root`)
		scale: Scale name used to resolve the stacked degrees
		quality: One of ``CHORD_QUALITIES``
		inversion: Number of inversion passes (capped at note count - 1)
		toggles: Optional extension toggles unioned with the quality

	Returns:
		MIDI pitches in ascending order (never empty)

	Example:
		```python
		build_chord(48, "major")                      # [48, 52, 55]
		build_chord(48, "major", "seventh")           # [48, 52, 55, 59]
		build_chord(48, "major", inversion=1)         # [52, 55, 60]
		```
	"""

	if toggles is None:
		toggles = ExtensionToggles()

	scale_intervals = chordcompanion.scales.intervals(scale)

	notes = [
		root + chordcompanion.scales.degree_to_semitone(scale_intervals, degree)
		for degree in stack_degrees(quality, toggles)
	]

	notes = chordcompanion.voicings.raise_lowest(notes, inversion)
	notes = chordcompanion.voicings.fit_to_range(notes)

	return sorted(notes)


def build_degree_chord (degree: int, settings: "Settings") -> typing.List[int]:

	"""
	Build the chord for a scale degree using every musical field of ``settings``.
	"""

	root = degree_to_root(degree, settings.key, settings.scale, settings.octave)

	return build_chord(root, settings.scale, settings.quality, settings.inversion, settings.toggles)
