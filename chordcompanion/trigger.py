"""Real-time chord triggering from incoming note-ons.

Every incoming note-on (velocity above zero) is replaced by the chord of the
current progression degree. The degree steps forward once per chord length
of elapsed block time, whether or not anything is playing. All other
incoming messages pass through untouched.

The stepping phase, the running sample clock and any note-offs still to be
delivered live in an explicit ``TriggerState``. ``process_block`` takes one
state and returns the next, so nothing is hidden at module level and two
independent triggers never interfere::

	state = TriggerState()

	for incoming in blocks:
		state, output, chord = process_block(state, incoming, 512, settings, 44100, rng)

This runs alongside the queued progression in :mod:`chordcompanion.engine`
without sharing any of its state; both only resolve degrees from the same
settings.
"""

import dataclasses
import logging
import random
import typing

import mido

import chordcompanion.chords
import chordcompanion.constants
import chordcompanion.events
import chordcompanion.humanize
import chordcompanion.settings


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class TriggerState:

	"""Degree-stepping phase and undelivered note-offs of the trigger.

	Attributes:
		degree_index: Index into the resolved degree sequence.
		samples_until_advance: Countdown to the next degree step. ``None``
			starts a full chord length, so a fresh state holds the first
			degree for one chord instead of stepping on the very first block.
		clock: Absolute sample position of the next block's start.
		pending: ``(absolute_sample, message)`` pairs due in later blocks,
			in time order.
	"""

	degree_index: int = 0
	samples_until_advance: typing.Optional[int] = None
	clock: int = 0
	pending: typing.Tuple[typing.Tuple[int, mido.Message], ...] = ()


def _is_note_on (message: mido.Message) -> bool:

	return message.type == "note_on" and message.velocity > 0


def rewind (state: TriggerState) -> TriggerState:

	"""Reset the trigger to the top of a new timeline.

	The degree phase starts over, but note-offs for chords that are still
	sounding are kept and moved to the start of the next block so nothing is
	left hanging. Note-ons that had not been delivered yet are dropped.
	"""

	releases = tuple(
		(0, message)
		for _, message in state.pending
		if message.type == "note_off"
	)

	return TriggerState(pending=releases)


def process_block (
	state: TriggerState,
	incoming: typing.Iterable[typing.Tuple[int, mido.Message]],
	num_samples: int,
	settings: chordcompanion.settings.Settings,
	sample_rate: float,
	rng: random.Random
) -> typing.Tuple[TriggerState, chordcompanion.events.EventBuffer, typing.Optional[typing.List[int]]]:

	"""Run one block of the reactive trigger.

	The degree steps when the countdown reaches zero. A fresh state starts
	the countdown at a full chord length rather than at zero, so the first
	degree is held for one chord before the first step.

	Parameters:
		state: State returned by the previous block (or a fresh ``TriggerState()``).
		incoming: ``(position, message)`` pairs received during this block.
		num_samples: Block length in samples.
		settings: Settings snapshot for this block.
		sample_rate: Samples per second.
		rng: Random source for velocity and timing humanization.

	Returns:
		``(next_state, output, chord)`` where ``output`` holds the generated
		chords, due note-offs and passed-through messages, and ``chord`` is the
		last chord triggered in this block (``None`` when nothing fired).
	"""

	degrees = settings.degrees()
	chord_len = chordcompanion.humanize.ms_to_samples(sample_rate, settings.note_length_ms)

	degree_index = state.degree_index % len(degrees)
	countdown = (chord_len if state.samples_until_advance is None else state.samples_until_advance) - num_samples

	if countdown <= 0:
		degree_index = (degree_index + 1) % len(degrees)
		countdown = chord_len

	block_start = state.clock
	block_end = block_start + num_samples

	output = chordcompanion.events.EventBuffer()
	pending: typing.List[typing.Tuple[int, mido.Message]] = []

	def schedule (when: int, message: mido.Message) -> None:

		if when < block_end:
			output.add(message, max(0, when - block_start))
		else:
			pending.append((when, message))

	for when, message in state.pending:
		schedule(when, message)

	last_chord: typing.Optional[typing.List[int]] = None
	channel = chordcompanion.constants.TRIGGER_CHANNEL

	for position, message in incoming:

		if not _is_note_on(message):
			output.add(message, position)
			continue

		degree = degrees[degree_index]
		chord = chordcompanion.chords.build_degree_chord(degree, settings)

		for pitch in chord:

			velocity = chordcompanion.humanize.humanize_velocity(settings.velocity, settings.humanize_velocity, rng)
			jitter_on = chordcompanion.humanize.timing_jitter(sample_rate, settings.humanize_ms, rng)
			jitter_off = chordcompanion.humanize.timing_jitter(sample_rate, settings.humanize_ms, rng)

			on_time = max(block_start, block_start + position + jitter_on)
			off_time = max(on_time, on_time + chord_len + jitter_off)

			schedule(on_time, mido.Message("note_on", channel=channel, note=pitch, velocity=velocity))
			schedule(off_time, mido.Message("note_off", channel=channel, note=pitch, velocity=0))

		logger.debug(f"Triggered degree {degree} at sample {block_start + position}: {chord}")
		last_chord = chord

	pending.sort(key=lambda item: item[0])

	next_state = TriggerState(
		degree_index = degree_index,
		samples_until_advance = countdown,
		clock = block_end,
		pending = tuple(pending)
	)

	return next_state, output, last_chord
