import argparse
import logging
import math
import typing

import chordcompanion.constants
import chordcompanion.driver
import chordcompanion.export
import chordcompanion.midi_utils
import chordcompanion.processor
import chordcompanion.settings


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_parser () -> argparse.ArgumentParser:

	"""
	Command line: ``export`` writes a .mid file, ``play`` runs the progression live.
	"""

	parser = argparse.ArgumentParser(prog="chordcompanion", description="Diatonic chord progression generator")
	parser.add_argument("--config", default="config.yaml", help="YAML config file (default: config.yaml)")

	commands = parser.add_subparsers(dest="command", required=True)

	export_parser = commands.add_parser("export", help="Render the progression to a MIDI file")
	export_parser.add_argument("output", help="Destination .mid file")
	export_parser.add_argument("--bpm", type=float, default=None, help="Tempo assumed for the export")

	play_parser = commands.add_parser("play", help="Play the progression to a MIDI output")
	play_parser.add_argument("--output", default=None, help="MIDI output device name")
	play_parser.add_argument("--input", default=None, help="MIDI input device whose note-ons trigger chords")
	play_parser.add_argument("--seconds", type=float, default=None, help="Stop after this many seconds")

	return parser


def run_export (config: typing.Dict[str, typing.Any], output: str, bpm: typing.Optional[float]) -> int:

	"""
	Export the configured progression. Returns a process exit code.
	"""

	settings = chordcompanion.settings.settings_from_config(config)

	if bpm is None:
		bpm = float((config.get("export") or {}).get("bpm", chordcompanion.constants.DEFAULT_EXPORT_BPM))

	if not chordcompanion.export.write_midi_file(settings, output, bpm):
		return 1

	return 0


def run_play (config: typing.Dict[str, typing.Any], output: typing.Optional[str], input_name: typing.Optional[str], seconds: typing.Optional[float]) -> int:

	"""
	Play the configured progression live. Returns a process exit code.
	"""

	settings = chordcompanion.settings.settings_from_config(config)
	engine_config = config.get("engine") or {}
	midi_config = config.get("midi") or {}

	sample_rate = float(engine_config.get("sample_rate", chordcompanion.constants.DEFAULT_SAMPLE_RATE))
	block_size = int(engine_config.get("block_size", chordcompanion.constants.DEFAULT_BLOCK_SIZE))

	_, midi_out = chordcompanion.midi_utils.select_output_device(output or midi_config.get("output"))

	if midi_out is None:
		return 1

	_, midi_in = chordcompanion.midi_utils.select_input_device(input_name or midi_config.get("input"))

	companion = chordcompanion.processor.ChordCompanion(settings=settings, seed=engine_config.get("seed"))
	companion.prepare(sample_rate, block_size)
	companion.trigger_generate()

	driver = chordcompanion.driver.BlockDriver(companion, midi_out, midi_in)
	max_blocks = None if seconds is None else math.ceil(seconds * sample_rate / block_size)

	try:
		driver.run(max_blocks)

	except KeyboardInterrupt:
		logger.info("Stopping...")

	finally:
		midi_out.close()

		if midi_in is not None:
			midi_in.close()

	return 0


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the chordcompanion command.
	"""

	args = build_parser().parse_args(argv)
	config = chordcompanion.settings.load_config(args.config)

	if args.command == "export":
		return run_export(config, args.output, args.bpm)

	return run_play(config, args.output, args.input, args.seconds)


if __name__ == "__main__":
	raise SystemExit(main())
