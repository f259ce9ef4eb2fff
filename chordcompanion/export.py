"""Deterministic rendering of a progression to a standard MIDI file.

Export never touches the live engine: it rebuilds the progression from a
settings snapshot, without humanization, straight into absolute ticks at
960 ticks per quarter note. Two exports of the same settings and tempo are
identical.

Example:
	```python
	import chordcompanion.export
	import chordcompanion.settings

	settings = chordcompanion.settings.Settings(key=9, scale="natural_minor")

	if not chordcompanion.export.write_midi_file(settings, "progression.mid", assumed_bpm=96):
		print("Could not write file")
	```
"""

import logging
import typing

import mido

import chordcompanion.chords
import chordcompanion.constants
import chordcompanion.settings


logger = logging.getLogger(__name__)


def chord_length_ticks (note_length_ms: float, assumed_bpm: float) -> int:

	"""
	Convert a chord length in milliseconds to ticks at a given tempo.
	"""

	quarter_note_ms = 60000.0 / max(1.0, assumed_bpm)

	return int(round(note_length_ms / quarter_note_ms * chordcompanion.constants.TICKS_PER_QUARTER_NOTE))


def export_sequence (
	settings: chordcompanion.settings.Settings,
	assumed_bpm: float = chordcompanion.constants.DEFAULT_EXPORT_BPM
) -> typing.List[typing.Tuple[int, mido.Message]]:

	"""Render the progression as ``(absolute_tick, message)`` pairs.

	Each chord's note-ons sit at the tick cursor and its note-offs one chord
	length later, which is also where the next chord's note-ons go. The list
	is therefore in time order as built, with each chord's releases ahead of
	the next chord's attacks.

	Parameters:
		settings: Settings snapshot to render.
		assumed_bpm: Tempo used to turn milliseconds into ticks (default 120).

	Returns:
		Note messages on channel 1 (``mido`` channel 0) at a fixed velocity.
	"""

	chord_ticks = chord_length_ticks(settings.note_length_ms, assumed_bpm)
	channel = chordcompanion.constants.EXPORT_CHANNEL

	events: typing.List[typing.Tuple[int, mido.Message]] = []
	tick_cursor = 0

	for degree in settings.degrees():

		chord = chordcompanion.chords.build_degree_chord(degree, settings)

		for pitch in chord:
			events.append((tick_cursor, mido.Message("note_on", channel=channel, note=pitch, velocity=settings.velocity)))

		for pitch in chord:
			events.append((tick_cursor + chord_ticks, mido.Message("note_off", channel=channel, note=pitch, velocity=0)))

		tick_cursor += chord_ticks

	return events


def build_midi_file (
	events: typing.Sequence[typing.Tuple[int, mido.Message]],
	assumed_bpm: float = chordcompanion.constants.DEFAULT_EXPORT_BPM
) -> mido.MidiFile:

	"""Pack absolute-tick events into a single-track MIDI file.

	The track opens with a tempo event for ``assumed_bpm`` so the file plays
	back at the tempo the ticks were computed for.
	"""

	midi_file = mido.MidiFile(type=0, ticks_per_beat=chordcompanion.constants.TICKS_PER_QUARTER_NOTE)
	track = mido.MidiTrack()
	midi_file.tracks.append(track)

	track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(max(1.0, assumed_bpm)), time=0))

	last_tick = 0

	for tick, message in events:
		track.append(message.copy(time=max(0, tick - last_tick)))
		last_tick = max(last_tick, tick)

	track.append(mido.MetaMessage("end_of_track", time=0))

	return midi_file


def write_midi_file (
	settings: chordcompanion.settings.Settings,
	path: str,
	assumed_bpm: float = chordcompanion.constants.DEFAULT_EXPORT_BPM
) -> bool:

	"""Export the progression to ``path``.

	Returns:
		True on success, False when the file could not be opened or written.
	"""

	events = export_sequence(settings, assumed_bpm)
	midi_file = build_midi_file(events, assumed_bpm)

	try:
		with open(path, "wb") as f:
			midi_file.save(file=f)

	except OSError as e:
		logger.error(f"Failed to export MIDI file {path}: {e}")
		return False

	logger.info(f"Exported {len(events)} events to {path}")

	return True
