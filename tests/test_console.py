"""
Console front end and CLI tests.

Prompts, the final report and the run-again loop are driven with scripted
input; the CLI is driven through a fake stdin.
"""
import sys
import os
import io
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from accsim.console import (
    prompt_choice, read_config, wants_another_run, ask_run_again,
    format_report, run_once, run_session,
    BANNER, RUN_AGAIN_PROMPT, BUS_SPEED_PROMPT, MEMORY_TYPE_PROMPT,
)
from accsim.emu import CPUState
from accsim.timing import BusSpeed, MemoryType, SimConfig
import cpusim


def scripted(*lines):
    """input()-compatible callable over a fixed list of answers."""
    remaining = list(lines)

    def _input(prompt=""):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    _input.remaining = remaining
    return _input


def no_sleep(seconds):
    pass


class TestPrompts:

    def test_valid_choice(self):
        out = []
        assert prompt_choice("pick", 1, 3, scripted("2"), out.append) == 2
        assert out == ["pick"]

    def test_reprompts_until_valid(self):
        """Non-numbers, out-of-range numbers, digit groups and non-ASCII digits are rejected"""
        out = []
        choice = prompt_choice("pick", 1, 2,
                               scripted("x", "3", "0", "0_1", "\uff11", " 1 "),
                               out.append)
        assert choice == 1
        assert out.count("pick") == 6
        assert out.count("Invalid choice. Please enter a number between 1 and 2.") == 5

    def test_eof_propagates(self):
        with pytest.raises(EOFError):
            prompt_choice("pick", 1, 3, scripted(), lambda line: None)

    def test_read_config_prompts_both(self):
        out = []
        config = read_config(scripted("3", "2"), out.append)
        assert config == SimConfig(BusSpeed.SLOW, MemoryType.DRAM)
        assert out == [BUS_SPEED_PROMPT, MEMORY_TYPE_PROMPT]

    def test_read_config_presets_skip_prompts(self):
        fake_input = scripted()
        config = read_config(fake_input, lambda line: None,
                             bus_speed=2, memory_type=1, no_delay=True)
        assert config.bus_speed == BusSpeed.MEDIUM
        assert config.memory_type == MemoryType.SRAM
        assert config.delay_ms == 0


class TestRunAgain:

    @pytest.mark.parametrize("answer", ["y", "Y", "yes", "YES", "Yes"])
    def test_restart_answers(self, answer):
        assert wants_another_run(answer)

    @pytest.mark.parametrize("answer", ["n", "", "maybe", "no", "yess", " y ", "yes ", None])
    def test_stop_answers(self, answer):
        assert not wants_another_run(answer)

    def test_ask_prints_prompt(self):
        out = []
        assert ask_run_again(scripted("yes"), out.append)
        assert out == [RUN_AGAIN_PROMPT]

    def test_ask_eof_stops(self):
        assert not ask_run_again(scripted(), lambda line: None)


class TestReport:

    def test_report_lines(self):
        result = run_once(SimConfig(no_delay=True), scripted("5"),
                          lambda line: None, no_sleep)
        lines = format_report(result)
        assert len(lines) == 20
        assert lines[0] == "Final Memory State:"
        assert lines[1] == "memory[0] = 5011"
        assert lines[14] == "memory[13] = 5"
        assert lines[17] == "Accumulator (AC) = 5"
        assert lines[18] == "Program Counter (PC) = 6"
        assert lines[19].startswith("Total Execution Time: ")
        assert lines[19].endswith(" ms")

    def test_run_once_output_order(self):
        out = []
        run_once(SimConfig(BusSpeed.FAST, MemoryType.SRAM), scripted("5"),
                 out.append, no_sleep)
        assert out[0] == ("Starting CPU Simulation with Bus Speed: Fast "
                          "and Memory Type: SRAM (Static RAM)")
        assert out[1] == "READ to address 11: input = 5"
        assert out[7] == "Final Memory State:"


class TestSession:

    def test_two_runs(self):
        """y restarts with fresh memory and fresh config prompts"""
        out = []
        sleeps = []
        clears = []
        fake_input = scripted("1", "2", "5", "YES", "3", "1", "7", "n")
        results = run_session(fake_input, out.append, sleeps.append,
                              lambda: clears.append(1))
        assert len(results) == 2
        assert fake_input.remaining == []
        assert len(clears) == 2
        assert out.count(BANNER) == 2
        assert results[0].memory[13] == 5
        assert results[1].memory[13] == 7
        assert results[1].memory[:6] == [5011, 1011, 2012, 3013, 4014, 7000]
        assert sleeps == [0.03] * 6 + [0.1] * 6

    @pytest.mark.parametrize("answer", ["n", "", "maybe"])
    def test_stops(self, answer):
        results = run_session(scripted("1", "1", "5", answer), lambda line: None,
                              no_sleep, lambda: None)
        assert len(results) == 1

    def test_invalid_input_run_offers_restart(self):
        """A rejected READ is reported inside the run, the loop carries on"""
        out = []
        results = run_session(scripted("abc", "y", "9", "n"), out.append, no_sleep,
                              lambda: None, bus_speed=1, memory_type=1)
        assert [r.state for r in results] == [CPUState.HALTED_NORMAL] * 2
        assert results[0].memory[11] == 0
        assert results[1].memory[11] == 9
        assert out.count(RUN_AGAIN_PROMPT) == 2

    def test_once(self):
        fake_input = scripted("5", "y")
        results = run_session(fake_input, lambda line: None, no_sleep, lambda: None,
                              bus_speed=1, memory_type=1, once=True)
        assert len(results) == 1
        assert fake_input.remaining == ["y"]


class TestCLI:

    ARGS = ["--bus-speed", "1", "--memory-type", "1", "--no-delay", "--no-clear"]

    def test_single_run(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("5\nn\n"))
        assert cpusim.main(self.ARGS) == 0
        out = capsys.readouterr().out
        assert "Welcome to the CPU Simulation!" in out
        assert "STORE to address 13: memory[13] = 5" in out
        assert "Accumulator (AC) = 5" in out

    def test_once_skips_run_again(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("5\n"))
        assert cpusim.main(self.ARGS + ["--once"]) == 0
        assert RUN_AGAIN_PROMPT not in capsys.readouterr().out

    def test_closed_input_at_menu(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO(""))
        assert cpusim.main(["--no-delay", "--no-clear"]) == 1
        assert "Input closed" in capsys.readouterr().err

    def test_bad_flag_value(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cpusim.main(["--bus-speed", "4"])
        assert exc.value.code == 2

    def test_ctrl_c(self, monkeypatch, capsys):
        """Ctrl-C gets its own message, not the closed-input one"""
        def _interrupt(**kwargs):
            raise KeyboardInterrupt
        monkeypatch.setattr(cpusim, "run_session", _interrupt)
        assert cpusim.main(["--no-clear"]) == 1
        err = capsys.readouterr().err
        assert "Interrupted." in err
        assert "Input closed" not in err
