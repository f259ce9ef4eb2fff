"""Per-block host object.

``ChordCompanion`` is what a host (or :class:`chordcompanion.driver.BlockDriver`)
talks to. It owns the current settings, the queued progression engine, the
reactive trigger state and the display strings, and it exposes two one-shot
flags:

- ``trigger_generate()`` - on the next block, rebuild the progression queue,
  refresh the sequence display and start playback.
- ``request_export()`` - raise a flag for the driver to export a MIDI file
  outside the block callback (file IO never happens inside ``process_block``).

Example:
	```python
	companion = ChordCompanion(settings=Settings(key=2, quality="seventh"), seed=1)
	companion.prepare(sample_rate=48000, block_size=256)
	companion.trigger_generate()

	output = companion.process_block([], 256)

	for position, message in output:
		...
	```
"""

import logging
import random
import typing

import mido

import chordcompanion.chords
import chordcompanion.constants
import chordcompanion.display
import chordcompanion.engine
import chordcompanion.events
import chordcompanion.export
import chordcompanion.progressions
import chordcompanion.scales
import chordcompanion.settings
import chordcompanion.trigger


logger = logging.getLogger(__name__)


class ChordCompanion:

	"""
	Generates a queued progression and live triggered chords, one block at a time.
	"""

	def __init__ (
		self,
		settings: typing.Optional[chordcompanion.settings.Settings] = None,
		sample_rate: float = chordcompanion.constants.DEFAULT_SAMPLE_RATE,
		block_size: int = chordcompanion.constants.DEFAULT_BLOCK_SIZE,
		seed: typing.Optional[int] = None
	) -> None:

		"""Create a processor.

		Parameters:
			settings: Initial settings (defaults when omitted).
			sample_rate: Samples per second.
			block_size: Expected samples per block (informational; each
				``process_block`` call states its own length).
			seed: Optional seed. The queue and the trigger get independent
				generators derived from it, so playback is repeatable.
		"""

		self.settings = settings if settings is not None else chordcompanion.settings.Settings()
		self.sample_rate = sample_rate
		self.block_size = block_size

		if seed is not None:
			master = random.Random(seed)
			queue_rng = random.Random(master.randint(0, 2 ** 63))
			self.trigger_rng = random.Random(master.randint(0, 2 ** 63))
		else:
			queue_rng = random.Random()
			self.trigger_rng = random.Random()

		self.engine = chordcompanion.engine.ProgressionEngine(sample_rate=sample_rate, rng=queue_rng)
		self.trigger_state = chordcompanion.trigger.TriggerState()

		self._generate_requested = False
		self._export_requested = False

		# Display snapshots polled by a UI.
		self.last_chord_notes = ""
		self.sequence_notes = ""
		self.progression_label = ""


	def prepare (self, sample_rate: float, block_size: typing.Optional[int] = None) -> None:

		"""
		Get ready to play at a sample rate; rewinds the queue and the trigger.

		Note-offs still owed to live-triggered chords go out at the start of
		the next block.
		"""

		self.sample_rate = sample_rate

		if block_size is not None:
			self.block_size = block_size

		self.engine.prepare(sample_rate)
		self.trigger_state = chordcompanion.trigger.rewind(self.trigger_state)

		logger.info(f"Prepared at {sample_rate} Hz, block size {self.block_size}")


	def update_settings (self, **changes: typing.Any) -> None:

		"""
		Replace some settings. Invalid values raise ``ValueError`` and leave the old settings in place.
		"""

		self.settings = self.settings.replace(**changes)


	def trigger_generate (self) -> None:

		"""
		Build and start the progression at the start of the next block.
		"""

		self._generate_requested = True


	def request_export (self) -> None:

		"""
		Flag that the driver should export a MIDI file.
		"""

		self._export_requested = True


	def take_export_request (self) -> bool:

		"""
		Return whether an export was requested, clearing the flag.
		"""

		requested = self._export_requested
		self._export_requested = False

		return requested


	def generate (self) -> typing.List[int]:

		"""Build the queue from the current settings and start playback.

		Also refreshes ``sequence_notes`` and ``progression_label``.

		Returns:
			The degree sequence that was built.
		"""

		degrees = self.engine.build(self.settings)

		chords = [chordcompanion.chords.build_degree_chord(degree, self.settings) for degree in degrees]
		self.sequence_notes = chordcompanion.display.sequence_to_string(chords)
		self.progression_label = chordcompanion.progressions.degrees_to_roman(
			degrees,
			minor = chordcompanion.scales.is_minor(self.settings.scale)
		)

		self.engine.start_playback()

		logger.info(f"Generated {self.progression_label} in {chordcompanion.chords.PC_TO_NOTE_NAME[self.settings.key]} {self.settings.scale}")

		return degrees


	def process_block (
		self,
		incoming: typing.Iterable[typing.Tuple[int, mido.Message]],
		num_samples: int
	) -> chordcompanion.events.EventBuffer:

		"""Produce the output events for one block.

		Order within the block: a pending generate request is honoured,
		queued progression events are dispatched, then incoming messages go
		through the reactive trigger (note-ons become chords, everything else
		passes through).

		Parameters:
			incoming: ``(position, message)`` pairs received in this block.
			num_samples: Block length in samples.

		Returns:
			All output events for the block, in position order.
		"""

		if self._generate_requested:
			self._generate_requested = False
			self.generate()

		output = chordcompanion.events.EventBuffer()
		self.engine.dispatch(output, num_samples)

		self.trigger_state, triggered, chord = chordcompanion.trigger.process_block(
			self.trigger_state,
			incoming,
			num_samples,
			self.settings,
			self.sample_rate,
			self.trigger_rng
		)

		output.extend(triggered)

		if chord is not None:
			self.last_chord_notes = chordcompanion.display.notes_to_string(chord)

		return output


	def export_midi (self, path: str, assumed_bpm: float = chordcompanion.constants.DEFAULT_EXPORT_BPM) -> bool:

		"""
		Export the current settings' progression to a MIDI file.
		"""

		return chordcompanion.export.write_midi_file(self.settings, path, assumed_bpm)
