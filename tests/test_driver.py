import pathlib

import mido
import pytest

import chordcompanion.driver
import chordcompanion.midi_utils
import chordcompanion.processor
import chordcompanion.settings
import conftest


def _driver (settings: chordcompanion.settings.Settings, **kwargs: object) -> chordcompanion.driver.BlockDriver:

	companion = chordcompanion.processor.ChordCompanion(settings=settings, seed=0)
	companion.prepare(44100, 512)

	return chordcompanion.driver.BlockDriver(companion, conftest.FakeMidiOut(), realtime=False, **kwargs)  # type: ignore[arg-type]


def test_fast_run_plays_the_whole_progression () -> None:

	"""Without real-time pacing every queued note is sent and released."""

	driver = _driver(chordcompanion.settings.Settings(note_length_ms=10))
	driver.processor.trigger_generate()

	driver.run(max_blocks=10)

	sent = driver.midi_out.sent

	assert len(sent) == 24
	assert [m.type for m in sent[:3]] == ["note_on"] * 3
	assert driver.active_notes == set()
	assert driver.blocks_processed == 10
	assert not driver.running


def test_run_ends_with_panic () -> None:

	"""Stopping mid-chord releases held notes and sends All Notes Off / All Sound Off."""

	driver = _driver(chordcompanion.settings.Settings())
	driver.processor.trigger_generate()

	driver.run(max_blocks=1)

	sent = driver.midi_out.sent

	assert [(m.type, m.note) for m in sent[:3]] == [("note_on", 48), ("note_on", 52), ("note_on", 55)]
	assert sorted((m.type, m.note) for m in sent[3:6]) == [("note_off", 48), ("note_off", 52), ("note_off", 55)]
	assert [(m.type, m.control, m.channel) for m in sent[6:]] == [
		("control_change", 123, 1),
		("control_change", 120, 1),
	]
	assert driver.active_notes == set()


def test_input_is_routed_through_the_trigger () -> None:

	"""Note-ons waiting on the input port become chords on channel 1."""

	midi_in = conftest.FakeMidiIn()
	driver = _driver(chordcompanion.settings.Settings(), midi_in=midi_in)

	midi_in.inject(mido.Message("note_on", note=64, velocity=90))
	midi_in.inject(mido.Message("control_change", control=64, value=127))

	count = driver.process_next_block()

	assert count == 4
	assert [(m.type, getattr(m, "note", None), m.channel) for m in driver.midi_out.sent] == [
		("note_on", 48, 0),
		("note_on", 52, 0),
		("note_on", 55, 0),
		("control_change", None, 0),
	]


def test_export_request_is_served_between_blocks (tmp_path: pathlib.Path) -> None:

	"""The driver writes the file when the processor raises its export flag."""

	path = tmp_path / "live.mid"
	driver = _driver(chordcompanion.settings.Settings(), export_path=str(path), export_bpm=90.0)

	driver.processor.request_export()
	driver.process_next_block()

	assert path.exists()
	assert driver.processor.take_export_request() is False


def test_export_request_without_path (caplog: pytest.LogCaptureFixture) -> None:

	driver = _driver(chordcompanion.settings.Settings())
	driver.processor.request_export()

	driver.process_next_block()

	assert "no export path" in caplog.text


def test_stop_before_run_still_processes_nothing_extra () -> None:

	"""stop() makes a running loop return; panic on silence sends nothing."""

	driver = _driver(chordcompanion.settings.Settings())
	driver.stop()
	driver.panic()

	assert driver.midi_out.sent == []


def test_select_output_device (patch_midi: None) -> None:

	"""The only available output is opened when no name is given."""

	name, midi_out = chordcompanion.midi_utils.select_output_device()

	assert name == "Dummy MIDI"
	assert isinstance(midi_out, conftest.FakeMidiOut)


def test_select_output_device_unknown_name (patch_midi: None, caplog: pytest.LogCaptureFixture) -> None:

	assert chordcompanion.midi_utils.select_output_device("Nope") == (None, None)
	assert "not found" in caplog.text


def test_select_input_device (patch_midi: None) -> None:

	"""Input is only opened on request."""

	assert chordcompanion.midi_utils.select_input_device() == (None, None)

	name, midi_in = chordcompanion.midi_utils.select_input_device("Dummy MIDI")

	assert name == "Dummy MIDI"
	assert isinstance(midi_in, conftest.FakeMidiIn)
	assert chordcompanion.midi_utils.select_input_device("Nope") == (None, None)
