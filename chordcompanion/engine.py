"""Progression queue and block-based dispatch.

``ProgressionEngine`` turns a settings snapshot into a sorted list of timed
note events and then hands them out one processing block at a time::

	engine = ProgressionEngine(sample_rate=44100)
	engine.build(settings)
	engine.start_playback()

	while engine.is_playing():
		buffer = EventBuffer()
		engine.dispatch(buffer, 512)
		...

Dispatch keeps a read index and a sample cursor that only ever move
forward, so every event is delivered exactly once, in order, whatever the
block sizes. The queue is rebuilt wholesale by the next ``build``; nothing
in here loops or rescans.

The engine is not thread-safe. ``build`` and ``dispatch`` on one instance
must be serialised by the caller.
"""

import enum
import logging
import random
import typing

import chordcompanion.chords
import chordcompanion.constants
import chordcompanion.events
import chordcompanion.humanize
import chordcompanion.settings


logger = logging.getLogger(__name__)


class EngineState (enum.Enum):

	"""
	Where the queue is in its lifecycle.
	"""

	IDLE = "idle"
	BUILT = "built"
	PLAYING = "playing"
	EXHAUSTED = "exhausted"


class ProgressionEngine:

	"""
	Builds a humanized event queue from settings and dispatches it per block.
	"""

	def __init__ (self, sample_rate: float = chordcompanion.constants.DEFAULT_SAMPLE_RATE, rng: typing.Optional[random.Random] = None) -> None:

		"""Create an empty engine.

		Parameters:
			sample_rate: Samples per second used to convert note lengths and jitter.
			rng: Random source for humanization. Pass a seeded instance for
				repeatable output; defaults to an unseeded generator.
		"""

		self.sample_rate = sample_rate
		self.rng = rng if rng is not None else random.Random()

		self.queue: typing.List[chordcompanion.events.TimedEvent] = []
		self.next_index = 0
		self.sample_cursor = 0
		self.playing = False


	def prepare (self, sample_rate: float) -> None:

		"""
		Adopt a new sample rate and rewind playback (the queue is kept).
		"""

		self.sample_rate = sample_rate
		self.reset_playback()


	def reset_playback (self) -> None:

		"""
		Rewind the cursor and read index and stop playback.
		"""

		self.sample_cursor = 0
		self.next_index = 0
		self.playing = False


	def chord_length_samples (self, settings: chordcompanion.settings.Settings) -> int:

		"""
		Return the length of one chord in samples.
		"""

		return chordcompanion.humanize.ms_to_samples(self.sample_rate, settings.note_length_ms)


	def build (self, settings: chordcompanion.settings.Settings, rng: typing.Optional[random.Random] = None) -> typing.List[int]:

		"""Replace the queue with the progression described by ``settings``.

		Each degree's chord starts one chord length after the previous one.
		Every note gets a humanized velocity and independent on/off timing
		jitter (clamped at sample 0). Events are sorted by offset, with
		note-offs ahead of note-ons at the same offset and pitch as the last
		key. Playback is not started.

		Parameters:
			settings: Snapshot to build from.
			rng: Random source for this build (defaults to the engine's own).

		Returns:
			The degree sequence that was built.
		"""

		if rng is None:
			rng = self.rng

		self.queue = []
		self.next_index = 0
		self.sample_cursor = 0

		degrees = settings.degrees()
		chord_len = self.chord_length_samples(settings)
		channel = chordcompanion.constants.GENERATOR_CHANNEL

		time_cursor = 0

		for degree in degrees:

			for pitch in chordcompanion.chords.build_degree_chord(degree, settings):

				velocity = chordcompanion.humanize.humanize_velocity(settings.velocity, settings.humanize_velocity, rng)
				jitter_on = chordcompanion.humanize.timing_jitter(self.sample_rate, settings.humanize_ms, rng)
				jitter_off = chordcompanion.humanize.timing_jitter(self.sample_rate, settings.humanize_ms, rng)

				self.queue.append(chordcompanion.events.TimedEvent(
					offset = max(0, time_cursor + jitter_on),
					kind = chordcompanion.events.NOTE_ON,
					pitch = pitch,
					velocity = velocity,
					channel = channel
				))

				self.queue.append(chordcompanion.events.TimedEvent(
					offset = max(0, time_cursor + chord_len + jitter_off),
					kind = chordcompanion.events.NOTE_OFF,
					pitch = pitch,
					channel = channel
				))

			time_cursor += chord_len

		self.queue.sort(key=lambda event: event.sort_key())

		logger.debug(f"Built progression {degrees} at {self.sample_rate} Hz, queue size: {len(self.queue)}")

		return degrees


	def start_playback (self) -> None:

		"""
		Start (or resume) delivering queued events.
		"""

		self.playing = True


	def stop_playback (self) -> None:

		"""
		Pause delivery. Undelivered events stay queued.
		"""

		self.playing = False


	def is_playing (self) -> bool:

		return self.playing


	@property
	def state (self) -> EngineState:

		"""
		The current lifecycle state, derived from the queue and cursor.
		"""

		if self.playing:
			return EngineState.PLAYING

		if not self.queue:
			return EngineState.IDLE

		if self.next_index >= len(self.queue):
			return EngineState.EXHAUSTED

		return EngineState.BUILT


	def dispatch (self, buffer: chordcompanion.events.EventBuffer, num_samples: int) -> None:

		"""Add the events falling inside the next block to ``buffer``.

		The block covers ``[sample_cursor, sample_cursor + num_samples)``.
		Events inside it are added at their position relative to the block
		start. An event before the block is only delivered (at position 0)
		when the block starts the timeline and the event's offset is
		negative; any other late event is skipped. The cursor always moves
		on by ``num_samples``, even while stopped or with an empty queue.

		Playback stops by itself once the last event has been handed out.
		"""

		if not self.playing or not self.queue:
			self.sample_cursor += num_samples
			return

		block_start = self.sample_cursor
		block_end = block_start + num_samples

		while self.next_index < len(self.queue):

			event = self.queue[self.next_index]

			if event.offset >= block_end:
				break

			if event.offset >= block_start:
				buffer.add(event.to_message(), event.offset - block_start)

			elif block_start == 0 and event.offset < 0:
				buffer.add(event.to_message(), 0)

			self.next_index += 1

		self.sample_cursor += num_samples

		if self.next_index >= len(self.queue):
			self.playing = False
			logger.info("Progression queue exhausted")
