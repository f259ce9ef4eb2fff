"""Fixed-size block loop for running the processor outside a plug-in host.

``BlockDriver`` stands in for an audio callback: it calls
``ChordCompanion.process_block`` once per block, sends the output to a
``mido`` port and reads any waiting input messages for the reactive
trigger.

In real-time mode the loop sleeps until each block's deadline, computed
from the start time rather than accumulated, so timing error does not
build up over a long session. With ``realtime=False`` blocks run back to
back, which renders a whole progression instantly (used by the tests).

Every message in a block is sent when the block is processed; the sample
position inside the block only orders them. At 512 samples and 44.1 kHz
that quantises timing to about 12 ms.
"""

import logging
import time
import typing

import mido

import chordcompanion.processor


logger = logging.getLogger(__name__)

# CC 123 (All Notes Off) and CC 120 (All Sound Off).
_ALL_NOTES_OFF = 123
_ALL_SOUND_OFF = 120


class BlockDriver:

	"""
	Calls a processor once per block and routes its MIDI in and out.
	"""

	def __init__ (
		self,
		processor: chordcompanion.processor.ChordCompanion,
		midi_out: typing.Any,
		midi_in: typing.Optional[typing.Any] = None,
		realtime: bool = True,
		export_path: typing.Optional[str] = None,
		export_bpm: float = 120.0
	) -> None:

		"""Set up the driver.

		Parameters:
			processor: The processor to drive (already prepared).
			midi_out: Output port with ``send()`` (or None to discard output).
			midi_in: Optional input port with ``iter_pending()``.
			realtime: Sleep to keep blocks on the wall clock (default True).
			export_path: Where to write the file when the processor raises its
				export flag. Export requests are ignored without a path.
			export_bpm: Tempo assumed by exports.
		"""

		self.processor = processor
		self.midi_out = midi_out
		self.midi_in = midi_in
		self.realtime = realtime
		self.export_path = export_path
		self.export_bpm = export_bpm

		self.running = False
		self.blocks_processed = 0
		self.active_notes: typing.Set[typing.Tuple[int, int]] = set()


	def _collect_input (self) -> typing.List[typing.Tuple[int, mido.Message]]:

		"""
		Read waiting input messages; they all land at the start of the block.
		"""

		if self.midi_in is None:
			return []

		return [(0, message) for message in self.midi_in.iter_pending()]


	def _send (self, message: mido.Message) -> None:

		"""
		Send one message and keep track of which notes are sounding.
		"""

		if message.type == "note_on" and message.velocity > 0:
			self.active_notes.add((message.channel, message.note))

		elif message.type in ("note_on", "note_off"):
			self.active_notes.discard((message.channel, message.note))

		if self.midi_out is not None:
			self.midi_out.send(message)


	def _handle_export_request (self) -> None:

		"""
		Run a requested export between blocks.
		"""

		if not self.processor.take_export_request():
			return

		if self.export_path is None:
			logger.warning("Export requested but no export path is configured")
			return

		self.processor.export_midi(self.export_path, self.export_bpm)


	def process_next_block (self) -> int:

		"""Process a single block and return the number of messages sent."""

		incoming = self._collect_input()
		output = self.processor.process_block(incoming, self.processor.block_size)

		for message in output.messages():
			self._send(message)

		self._handle_export_request()
		self.blocks_processed += 1

		return len(output)


	def run (self, max_blocks: typing.Optional[int] = None) -> None:

		"""Process blocks until ``stop()`` is called or ``max_blocks`` have run.

		Always finishes by silencing any notes still sounding.
		"""

		block_seconds = self.processor.block_size / self.processor.sample_rate
		start_time = time.perf_counter()
		blocks = 0

		self.running = True
		logger.info(f"Block driver started ({self.processor.block_size} samples per block)")

		try:
			while self.running and (max_blocks is None or blocks < max_blocks):

				self.process_next_block()
				blocks += 1

				if self.realtime:
					delay = start_time + blocks * block_seconds - time.perf_counter()

					if delay > 0:
						time.sleep(delay)

		finally:
			self.running = False
			self.panic()
			logger.info(f"Block driver stopped after {blocks} blocks")


	def stop (self) -> None:

		"""
		Ask ``run()`` to return after the current block.
		"""

		self.running = False


	def panic (self) -> None:

		"""
		Release every sounding note and send All Notes Off on the channels used.
		"""

		channels = {channel for channel, _ in self.active_notes}

		for channel, note in sorted(self.active_notes):
			self._send(mido.Message("note_off", channel=channel, note=note, velocity=0))

		if self.midi_out is None:
			return

		for channel in sorted(channels):
			self.midi_out.send(mido.Message("control_change", channel=channel, control=_ALL_NOTES_OFF, value=0))
			self.midi_out.send(mido.Message("control_change", channel=channel, control=_ALL_SOUND_OFF, value=0))
