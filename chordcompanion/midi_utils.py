import logging
import typing

import mido

logger = logging.getLogger(__name__)


def select_output_device (device_name: typing.Optional[str] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""
	Open a MIDI output port for live playback.

	With a `device_name`, only that port is opened. Without one, the first
	available port is used and the choice is logged so it can be pinned in the
	config file next time.

	Returns:
		A tuple of (device_name, midi_out) or (None, None) when nothing could be opened.
	"""

	try:
		outputs = mido.get_output_names()
		logger.info(f"Available MIDI outputs: {outputs}")

		if not outputs:
			logger.error("No MIDI output devices found.")
			return None, None

		if device_name is not None and device_name not in outputs:
			logger.error(f"MIDI output device '{device_name}' not found. Available devices: {outputs}")
			return None, None

		selected = device_name if device_name is not None else outputs[0]

		if device_name is None and len(outputs) > 1:
			logger.warning(f"Several MIDI outputs found - using '{selected}'. Set midi.output in the config to choose another.")

		midi_out = mido.open_output(selected)
		logger.info(f"Opened MIDI output: {selected}")

		return selected, midi_out

	except (OSError, IOError) as e:
		logger.error(f"Failed to open MIDI output: {e}")
		return None, None


def select_input_device (device_name: typing.Optional[str] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""
	Open a MIDI input port whose note-ons trigger chords.

	Input is optional: without a `device_name` nothing is opened. The port is
	polled by the driver (no callback), so messages are read on the block
	thread.

	Returns:
		A tuple of (device_name, midi_in) or (None, None).
	"""

	if device_name is None:
		return None, None

	try:
		inputs = mido.get_input_names()
		logger.info(f"Available MIDI inputs: {inputs}")

		if device_name not in inputs:
			logger.error(f"MIDI input device '{device_name}' not found. Available devices: {inputs}")
			return None, None

		midi_in = mido.open_input(device_name)
		logger.info(f"Opened MIDI input: {device_name}")

		return device_name, midi_in

	except (OSError, IOError) as e:
		logger.error(f"Failed to open MIDI input: {e}")
		return None, None
