import typing

import mido
import pytest


class FakeMidiOut:

	"""MIDI output stub that records what was sent."""

	def __init__ (self) -> None:

		"""Start with nothing sent."""

		self.sent: typing.List[mido.Message] = []
		self.closed = False


	def send (self, message: mido.Message) -> None:

		"""Record an outgoing MIDI message."""

		self.sent.append(message)


	def close (self) -> None:

		"""Mark the fake device closed."""

		self.closed = True


class FakeMidiIn:

	"""MIDI input stub whose pending messages are set by the test."""

	def __init__ (self) -> None:

		"""Start with no waiting messages."""

		self.waiting: typing.List[mido.Message] = []
		self.closed = False


	def inject (self, message: mido.Message) -> None:

		"""Queue a message to be returned by the next iter_pending()."""

		self.waiting.append(message)


	def iter_pending (self) -> typing.Iterator[mido.Message]:

		"""Yield and clear waiting messages."""

		waiting, self.waiting = self.waiting, []
		yield from waiting


	def close (self) -> None:

		"""Mark the fake device closed."""

		self.closed = True


# Module-level references so tests can reach the most recently opened fakes.
_current_fake_output: typing.Optional[FakeMidiOut] = None
_current_fake_input: typing.Optional[FakeMidiIn] = None


def _fake_get_output_names () -> typing.List[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI"]


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	global _current_fake_output
	_current_fake_output = FakeMidiOut()
	return _current_fake_output


def _fake_get_input_names () -> typing.List[str]:

	"""Return a fixed list of MIDI input names for tests."""

	return ["Dummy MIDI"]


def _fake_open_input (name: str) -> FakeMidiIn:

	"""Return a fake MIDI input regardless of the name."""

	global _current_fake_input
	_current_fake_input = FakeMidiIn()
	return _current_fake_input


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Patch mido to use fake MIDI output and input for all tests that need it."""

	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)
	monkeypatch.setattr(mido, "get_input_names", _fake_get_input_names)
	monkeypatch.setattr(mido, "open_input", _fake_open_input)
