"""Chord inversion and range fitting.

Both helpers work on absolute MIDI pitches and return new lists; neither
mutates its input.

The inversion here always raises whichever pitch is currently lowest, rather
than rotating through the original chord voices. On triads and sevenths with
``inversion`` below the note count this is the classic inversion; deeper
inversions on extended stacks can promote a note that was already raised,
which drifts the voicing upward.

Example:
	```python
	from chordcompanion.voicings import raise_lowest, fit_to_range

	raise_lowest([60, 64, 67], 1)        # [64, 67, 72]
	fit_to_range([36, 40, 43], 48, 84)   # [48, 52, 55]
	```
"""

import typing

import chordcompanion.constants


def raise_lowest (pitches: typing.Sequence[int], inversion: int) -> typing.List[int]:

	"""Invert a chord by repeatedly lifting its lowest pitch an octave.

	The number of passes is capped at one less than the note count, and
	negative values mean root position.

	Parameters:
		pitches: MIDI note numbers in any order
		inversion: Requested inversion (0 = root position)

	Returns:
		New pitch list in ascending order after the last pass (or the input
		order when no pass was made)

	Example:
		```python
		raise_lowest([60, 64, 67], 2)  # [67, 72, 76]
		```
	"""

	notes = list(pitches)
	passes = min(len(notes) - 1, inversion)

	for _ in range(passes):
		notes.sort()
		notes[0] += chordcompanion.constants.OCTAVE

	if passes > 0:
		notes.sort()

	return notes


def fit_to_range (
	pitches: typing.Sequence[int],
	low: int = chordcompanion.constants.CHORD_RANGE_LOW,
	high: int = chordcompanion.constants.CHORD_RANGE_HIGH,
	max_shifts: int = chordcompanion.constants.CHORD_RANGE_MAX_SHIFTS
) -> typing.List[int]:

	"""Shift a whole chord by octaves until it sits inside ``[low, high]``.

	A chord below ``low`` moves up first; otherwise a chord above ``high``
	moves down. At most ``max_shifts`` octave moves are made, so a chord wider
	than the range comes back outside it instead of looping forever.

	Parameters:
		pitches: MIDI note numbers
		low: Lowest acceptable pitch (default 48)
		high: Highest acceptable pitch (default 84)
		max_shifts: Iteration cap (default 8)

	Returns:
		New pitch list in the input order
	"""

	notes = list(pitches)

	if not notes:
		return notes

	octave = chordcompanion.constants.OCTAVE

	for _ in range(max_shifts):

		if min(notes) < low:
			notes = [n + octave for n in notes]
			continue

		if max(notes) > high:
			notes = [n - octave for n in notes]
			continue

		break

	return notes
