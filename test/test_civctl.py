#!/usr/bin/env python3
"""Tests for the civctl command line."""

import argparse
import logging
import os
import subprocess
import sys
import unittest
from pathlib import Path
from unittest import mock

import civctl
from civ.constants import TRACE

# Path to civctl.py (parent directory of test/)
_SCRIPT_DIR = Path(__file__).parent.parent
_CIVCTL = _SCRIPT_DIR / "civctl.py"


def _run(*args: str) -> subprocess.CompletedProcess:
    env = {k: v for k, v in os.environ.items() if not k.startswith("CIV_")}
    return subprocess.run(
        [sys.executable, str(_CIVCTL), *args],
        capture_output=True,
        text=True,
        env=env,
        timeout=30,
    )


class TestArguments(unittest.TestCase):
    """Test argument parsing."""

    def test_help_lists_subcommands(self) -> None:
        proc = _run("--help")
        self.assertEqual(proc.returncode, 0)
        for name in ("status", "freq", "mode", "gps", "power", "watch"):
            self.assertIn(name, proc.stdout)

    def test_subcommand_required(self) -> None:
        proc = _run("-p", "/dev/null")
        self.assertNotEqual(proc.returncode, 0)

    def test_power_state_choices(self) -> None:
        proc = _run("power", "toggle")
        self.assertNotEqual(proc.returncode, 0)
        self.assertIn("invalid choice", proc.stderr.lower())

    def test_bad_address_rejected(self) -> None:
        proc = _run("--radio-addr", "XYZ", "status")
        self.assertNotEqual(proc.returncode, 0)
        self.assertIn("--radio-addr", proc.stderr)


class TestConnectFailure(unittest.TestCase):
    """Test behavior when the radio cannot be reached."""

    def test_missing_port_prints_troubleshooting(self) -> None:
        proc = _run("-p", "/dev/does-not-exist", "-b", "19200", "status")
        self.assertEqual(proc.returncode, civctl.ExitCode.CONNECT_FAILED)
        self.assertIn("CI-V Address", proc.stderr)
        self.assertIn("Echo Back", proc.stderr)


class TestBuildConfig(unittest.TestCase):
    """Test that flags override the environment."""

    def _args(self, **overrides: object) -> argparse.Namespace:
        values = dict(
            radio_addr=None,
            controller_addr=None,
            baudrate=None,
            timeout=None,
            no_echo=False,
        )
        values.update(overrides)
        return argparse.Namespace(**values)

    def test_defaults(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            config = civctl.build_config(self._args())
        self.assertEqual(config.radio_addr, 0xB4)
        self.assertTrue(config.echo_back)

    def test_flags_override_environment(self) -> None:
        env = {"CIV_RADIO_ADDR": "94", "CIV_TIMEOUT_S": "3.0", "CIV_BAUDRATE": "4800"}
        with mock.patch.dict(os.environ, env, clear=True):
            config = civctl.build_config(self._args(radio_addr=0xA2, no_echo=True))
        self.assertEqual(config.radio_addr, 0xA2)
        self.assertEqual(config.timeout_s, 3.0)
        self.assertEqual(config.baud_rate, 4800)
        self.assertFalse(config.echo_back)

    def test_log_levels(self) -> None:
        self.assertEqual(civctl._log_level(0), logging.WARNING)
        self.assertEqual(civctl._log_level(1), logging.INFO)
        self.assertEqual(civctl._log_level(2), logging.DEBUG)
        self.assertEqual(civctl._log_level(5), TRACE)


if __name__ == "__main__":
    unittest.main()
