"""Note-name strings for display.

The processor refreshes two strings whenever it builds something, and a UI
polls them:

	last chord notes    C3 E3 G3
	sequence notes      [C3 E3 G3] | [G3 B3 D4] | [A3 C#4 E4] | [F3 A3 C4]

Octave numbers follow the convention where middle C (MIDI 60) is C4.
"""

import typing

import chordcompanion.chords
import chordcompanion.constants


def note_name (pitch: int) -> str:

	"""
	Return a sharp note name with octave, e.g. ``61`` → ``"C#4"``.
	"""

	octave, pc = divmod(pitch, chordcompanion.constants.OCTAVE)

	return f"{chordcompanion.chords.PC_TO_NOTE_NAME[pc]}{octave - 1}"


def notes_to_string (notes: typing.Iterable[int]) -> str:

	"""
	Space-separated note names, e.g. ``[60, 64, 67]`` → ``"C4 E4 G4"``.
	"""

	return " ".join(note_name(n) for n in notes)


def sequence_to_string (chords: typing.Iterable[typing.Iterable[int]]) -> str:

	"""
	Bracketed chord groups joined by ``" | "``.
	"""

	return " | ".join(f"[{notes_to_string(chord)}]" for chord in chords)
