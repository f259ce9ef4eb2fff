import pathlib

import mido
import pytest

import chordcompanion.processor
import chordcompanion.settings


def _companion (**settings_fields: object) -> chordcompanion.processor.ChordCompanion:

	settings = chordcompanion.settings.Settings(**settings_fields)  # type: ignore[arg-type]
	companion = chordcompanion.processor.ChordCompanion(settings=settings, seed=1)
	companion.prepare(44100, 512)

	return companion


def test_generate_on_next_block () -> None:

	"""A generate request starts the progression at the top of the next block."""

	companion = _companion()

	assert len(companion.process_block([], 512)) == 0

	companion.trigger_generate()
	output = list(companion.process_block([], 512))

	assert [(p, m.type, m.note, m.channel) for p, m in output] == [
		(0, "note_on", 48, 1),
		(0, "note_on", 52, 1),
		(0, "note_on", 55, 1),
	]

	# The request is one-shot.
	assert len(companion.process_block([], 512)) == 0


def test_generate_refreshes_display_strings () -> None:

	"""Building a progression updates the sequence and label snapshots."""

	companion = _companion()
	degrees = companion.generate()

	assert degrees == [1, 5, 6, 4]
	assert companion.sequence_notes == "[C3 E3 G3] | [G3 B3 D4] | [A3 C#4 E4] | [F3 A3 C4]"
	assert companion.progression_label == "I-V-VI-IV"
	assert companion.engine.is_playing()


def test_minor_label_is_lower_case () -> None:

	companion = _companion(key=9, scale="natural_minor", preset="ii-V-I")
	companion.generate()

	assert companion.progression_label == "ii-v-i"


def test_triggered_chord_updates_last_chord_notes () -> None:

	"""Live note-ons are answered on channel 1 and shown as the last chord."""

	companion = _companion()

	assert companion.last_chord_notes == ""

	output = list(companion.process_block([(32, mido.Message("note_on", note=60, velocity=110))], 512))

	assert [(p, m.note, m.channel) for p, m in output] == [(32, 48, 0), (32, 52, 0), (32, 55, 0)]
	assert companion.last_chord_notes == "C3 E3 G3"


def test_queue_and_trigger_share_a_block () -> None:

	"""Queued progression notes and triggered chords are merged by position."""

	companion = _companion()
	companion.trigger_generate()

	output = list(companion.process_block([(10, mido.Message("note_on", note=60, velocity=100))], 512))

	assert [(p, m.channel) for p, m in output] == [(0, 1)] * 3 + [(10, 0)] * 3


def test_seeded_companions_repeat () -> None:

	"""The same seed gives the same humanized output."""

	def render () -> list:

		companion = _companion(humanize_ms=20, humanize_velocity=10, note_length_ms=50)
		companion.trigger_generate()
		played = []

		for block in range(20):
			incoming = [(0, mido.Message("note_on", note=60, velocity=100))] if block == 3 else []
			for position, message in companion.process_block(incoming, 256):
				played.append((block, position, message.type, message.note, message.velocity, message.channel))

		return played

	assert render() == render()


def test_update_settings () -> None:

	"""Settings changes are validated; a rejected change keeps the old settings."""

	companion = _companion()
	companion.update_settings(key="D", quality="seventh")

	assert companion.settings.key == 2
	assert companion.settings.quality == "seventh"

	with pytest.raises(ValueError):
		companion.update_settings(inversion=9)

	assert companion.settings.inversion == 0
	assert companion.settings.key == 2


def test_export_request_flag () -> None:

	"""An export request is reported once and then cleared."""

	companion = _companion()

	assert companion.take_export_request() is False

	companion.request_export()

	assert companion.take_export_request() is True
	assert companion.take_export_request() is False


def test_export_midi_uses_current_settings (tmp_path: pathlib.Path) -> None:

	companion = _companion(preset="ii-V-I")
	path = tmp_path / "out.mid"

	assert companion.export_midi(str(path), 100)

	notes = [m for m in mido.MidiFile(str(path)).tracks[0] if not m.is_meta]
	assert len(notes) == 18


def test_prepare_rewinds () -> None:

	"""prepare() stops the queue and resets the trigger."""

	companion = _companion()
	companion.generate()
	companion.process_block([], 512)

	companion.prepare(48000)

	assert companion.sample_rate == 48000
	assert companion.block_size == 512
	assert not companion.engine.is_playing()
	assert companion.trigger_state.clock == 0


def test_prepare_keeps_note_offs_for_sounding_chords () -> None:

	"""A live chord held across prepare() is still released, at the top of the next block."""

	companion = _companion()
	output = companion.process_block([(0, mido.Message("note_on", note=60, velocity=100))], 512)
	ons = [m.note for _, m in output if m.type == "note_on"]

	companion.prepare(44100, 512)

	first = list(companion.process_block([], 512))

	assert sorted((p, m.type, m.note) for p, m in first) == [
		(0, "note_off", 48),
		(0, "note_off", 52),
		(0, "note_off", 55),
	]

	later = []
	for _ in range(200):
		later.extend(m for _, m in companion.process_block([], 512))

	assert ons == [48, 52, 55]
	assert later == []
