#!/usr/bin/env python3
"""Command-line control of a CI-V radio (ID-52A Plus)."""

import argparse
import logging
import queue
import signal
import sys
from dataclasses import replace
from enum import IntEnum
from types import FrameType

import serial

from civ.constants import TRACE
from civ.errors import CivError
from civ.frequency import Frequency
from civ.gps import GpsPosition
from civ.mode import OperatingMode
from link.device import DEFAULT_PRODUCT_MATCH, find_radio_port
from session.config import RadioConfig, parse_address
from session.poller import Connected, Disconnected, Error, Info, RadioPoller, StateUpdate
from session.radio import Radio
from session.report import StateReport

logger = logging.getLogger(__name__)

TROUBLESHOOTING = """\
Could not talk to the radio.
  1. Connect the radio with a USB-C data cable
  2. On the radio, under Menu > Set > Function, check:
       CI-V Address = B4 (or pass --radio-addr)
       CI-V Baud Rate (SP Jack) = Auto
       CI-V Transceive = ON
       USB/Bluetooth->Remote Transceive Address = 00
       USB Connect = Serialport
       USB Serialport Function = CI-V (Echo Back ON, or pass --no-echo)
  3. Install the Icom USB driver if the port does not appear"""


class ExitCode(IntEnum):
    """Exit codes for civctl."""

    SUCCESS = 0
    CONNECT_FAILED = 1  # Port not found, no answer at any bit rate
    COMMAND_FAILED = 2  # Connected, but a command was rejected or timed out


def _log_level(verbosity: int) -> int:
    return {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}.get(verbosity, TRACE)


def build_config(args: argparse.Namespace) -> RadioConfig:
    """Defaults, then CIV_* environment, then command-line flags."""
    config = RadioConfig.from_env()
    changes: dict = {}
    if args.radio_addr is not None:
        changes["radio_addr"] = args.radio_addr
    if args.controller_addr is not None:
        changes["controller_addr"] = args.controller_addr
    if args.baudrate is not None:
        changes["baud_rate"] = args.baudrate
    if args.timeout is not None:
        changes["timeout_s"] = args.timeout
    if args.no_echo:
        changes["echo_back"] = False
    return replace(config, **changes)


def connect(args: argparse.Namespace, config: RadioConfig) -> Radio:
    port = args.port or find_radio_port(args.product)
    if args.baudrate is None:
        radio = Radio.auto_connect(port, config)
    else:
        radio = Radio.connect(port, config)
    logger.info(f"Connected to {port} at {radio.config.baud_rate} baud")
    return radio


def cmd_status(radio: Radio, args: argparse.Namespace) -> None:
    print(f"Transceiver ID: {radio.read_transceiver_id():#04x}")
    print(f"Frequency: {radio.read_frequency()}")
    print(f"Mode: {radio.read_mode()}")
    print(f"S-meter: {radio.read_s_meter()}")
    print(f"AF level: {radio.read_af_level()}  Squelch: {radio.read_squelch()}")


def cmd_freq(radio: Radio, args: argparse.Namespace) -> None:
    if args.mhz is not None:
        radio.set_frequency(Frequency.from_mhz(args.mhz))
    print(radio.read_frequency())


def cmd_mode(radio: Radio, args: argparse.Namespace) -> None:
    if args.name is not None:
        radio.set_mode(OperatingMode.from_label(args.name))
    print(radio.read_mode())


def cmd_gps(radio: Radio, args: argparse.Namespace) -> None:
    position = GpsPosition.from_raw(radio.read_gps_position())
    print(position)
    if position.utc is not None:
        print(f"UTC: {position.utc.isoformat()}")


def cmd_power(radio: Radio, args: argparse.Namespace) -> None:
    if args.state == "on":
        radio.power_on()
    else:
        radio.power_off()
    print(f"Power {args.state}")


def cmd_watch(radio: Radio, args: argparse.Namespace) -> None:
    """Print a state snapshot every cycle until Ctrl-C."""
    poller = RadioPoller(radio)
    running = True

    def handler(_sig: int, _frame: FrameType | None) -> None:
        nonlocal running
        running = False

    signal.signal(signal.SIGINT, handler)
    poller.start()
    try:
        while running:
            try:
                event = poller.events.get(timeout=0.5)
            except queue.Empty:
                continue
            match event:
                case Connected():
                    print("Polling radio (Ctrl-C to stop)")
                case StateUpdate(state=state):
                    StateReport(state).print()
                    print()
                case Error(message=message):
                    print(f"Error: {message}")
                case Info(message=message):
                    print(message)
                case Disconnected():
                    break
    finally:
        poller.stop(timeout_s=5.0)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Control an Icom radio over CI-V",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s status                      Find the radio, detect baud, show status
  %(prog)s -p /dev/ttyACM0 freq 145.5  Set 145.500 MHz
  %(prog)s mode FM-N                   Switch to narrow FM
  %(prog)s -vv watch                   Poll continuously with debug logging
""",
    )
    parser.add_argument("-p", "--port", type=str, help="Serial port (default: find by USB product)")
    parser.add_argument(
        "--product",
        type=str,
        default=DEFAULT_PRODUCT_MATCH,
        help=f"USB product string to look for (default: {DEFAULT_PRODUCT_MATCH})",
    )
    parser.add_argument(
        "-b", "--baudrate", type=int, help="Baud rate (default: detect 19200/9600/4800)"
    )
    parser.add_argument("--radio-addr", type=parse_address, help="Radio CI-V address (default: B4)")
    parser.add_argument(
        "--controller-addr", type=parse_address, help="Controller CI-V address (default: E0)"
    )
    parser.add_argument("--timeout", type=float, help="Reply timeout in seconds (default: 1.0)")
    parser.add_argument(
        "--no-echo", action="store_true", help="Link does not echo transmitted frames"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (-v, -vv, -vvv)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("status", help="Show frequency, mode and meters").set_defaults(
        func=cmd_status
    )
    freq_parser = subparsers.add_parser("freq", help="Read or set frequency")
    freq_parser.add_argument("mhz", type=float, nargs="?", help="New frequency in MHz")
    freq_parser.set_defaults(func=cmd_freq)
    mode_parser = subparsers.add_parser("mode", help="Read or set operating mode")
    mode_parser.add_argument(
        "name", nargs="?", help=f"One of {', '.join(m.value for m in OperatingMode)}"
    )
    mode_parser.set_defaults(func=cmd_mode)
    subparsers.add_parser("gps", help="Show the radio's GPS position").set_defaults(func=cmd_gps)
    power_parser = subparsers.add_parser("power", help="Switch the radio on or off")
    power_parser.add_argument("state", choices=["on", "off"])
    power_parser.set_defaults(func=cmd_power)
    subparsers.add_parser("watch", help="Poll and print state until Ctrl-C").set_defaults(
        func=cmd_watch
    )

    args = parser.parse_args()
    logging.basicConfig(level=_log_level(args.verbose))

    try:
        config = build_config(args)
        radio = connect(args, config)
    except (CivError, serial.SerialException, ValueError) as e:
        logger.error(f"Connection failed: {e}")
        print(TROUBLESHOOTING, file=sys.stderr)
        return ExitCode.CONNECT_FAILED

    try:
        args.func(radio, args)
        return ExitCode.SUCCESS
    except (CivError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return ExitCode.COMMAND_FAILED
    finally:
        radio.close()


if __name__ == "__main__":
    sys.exit(main())
