"""Unit tests for folio.prompts."""

import io

from folio.prompts import (
    DefaultInput,
    InputProvider,
    InteractiveInput,
    ask_required,
    choose_input,
    read_piped_body,
)


class _FakeTTY(io.StringIO):
    def isatty(self) -> bool:
        return True


class TestProviders:
    def test_default_input_returns_default(self):
        assert DefaultInput().ask("Title", "fallback") == "fallback"
        assert DefaultInput().ask("Title") == ""

    def test_both_satisfy_protocol(self):
        assert isinstance(DefaultInput(), InputProvider)
        assert isinstance(InteractiveInput(), InputProvider)

    def test_choose_input_for_pipe(self):
        assert isinstance(choose_input(io.StringIO("")), DefaultInput)

    def test_choose_input_for_terminal(self):
        assert isinstance(choose_input(_FakeTTY()), InteractiveInput)


class TestAskRequired:
    def test_non_interactive_returns_blank_once(self):
        assert ask_required(DefaultInput(), "Title") == ""

    def test_non_interactive_uses_default(self):
        assert ask_required(DefaultInput(), "Date", "2024-03-05") == "2024-03-05"

    def test_interactive_repeats_until_answered(self, scripted):
        provider = scripted({"Title": ["", "  ", "Finally"]})
        assert ask_required(provider, "Title") == "Finally"
        assert provider.asked == ["Title", "Title", "Title"]


class TestReadPipedBody:
    def test_reads_pipe(self):
        assert read_piped_body(io.StringIO("# Body\n")) == "# Body\n"

    def test_terminal_is_not_read(self):
        assert read_piped_body(_FakeTTY("typed")) == ""
