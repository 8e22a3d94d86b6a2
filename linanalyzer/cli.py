"""Command line entry point: decode LIN traffic and print the frames."""

from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path

from .analyzer import AnalysisResult, LINAnalyzer
from .channel import BitState, DigitalChannel
from .frames import DisplayBase
from .results import LINResults
from .settings import DEFAULT_BIT_RATE, DEFAULT_LIN_VERSION, LINSettings
from .simulation import SimulationDataGenerator

_FORMATS = ("tabular", "bubble", "csv", "json")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linanalyzer",
        description="Decode LIN bus frames from a recorded or simulated serial line.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="edge file: the initial level (0 or 1) followed by edge sample numbers",
    )
    parser.add_argument(
        "--simulate", type=int, metavar="SAMPLES",
        help="decode simulated traffic of this many samples instead of a file",
    )
    parser.add_argument("--seed", type=int, help="random seed for simulation")
    parser.add_argument("--sample-rate", type=int, default=1_000_000)
    parser.add_argument("--bit-rate", type=int, default=DEFAULT_BIT_RATE)
    parser.add_argument(
        "--lin-version", type=float, choices=(1.0, 2.0), default=DEFAULT_LIN_VERSION
    )
    parser.add_argument(
        "--display-base",
        choices=[base.value for base in DisplayBase],
        default=DisplayBase.HEXADECIMAL.value,
    )
    parser.add_argument("--format", choices=_FORMATS, default="tabular")
    parser.add_argument("--trigger-sample", type=int, default=0)
    return parser


def _read_edge_file(path: str) -> DigitalChannel:
    tokens = []
    for line in Path(path).read_text().splitlines():
        tokens.extend(line.split("#", 1)[0].split())
    if not tokens:
        raise ValueError(f"{path}: no data")
    try:
        numbers = [int(token) for token in tokens]
    except ValueError as exc:
        raise ValueError(f"{path}: malformed edge file") from exc
    if numbers[0] not in (0, 1):
        raise ValueError(f"{path}: initial level must be 0 or 1")
    return DigitalChannel(BitState(numbers[0]), tuple(numbers[1:]))


def _print_frames(
    analysis: AnalysisResult,
    results: LINResults,
    output_format: str,
    display_base: DisplayBase,
    trigger_sample: int,
) -> None:
    out = sys.stdout
    if output_format == "csv":
        results.export(out, display_base, trigger_sample)
    elif output_format == "json":
        for frame in analysis.frames_v2:
            record = {
                "type": frame.frame_type,
                "start": frame.starting_sample,
                "end": frame.ending_sample,
                **frame.data,
            }
            out.write(json.dumps(record) + "\n")
    else:
        for index, frame in enumerate(analysis.frames):
            if output_format == "bubble":
                text = " | ".join(results.bubble_text(index, display_base))
            else:
                text = results.tabular_text(index, display_base)
            out.write(f"{index}\t{frame.starting_sample}\t{frame.ending_sample}\t{text}\n")


def main(argv: list[str] | None = None) -> int:
    """Run the decoder; return the process exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if (args.input is None) == (args.simulate is None):
        parser.error("give either an input file or --simulate, not both")

    settings = LINSettings(lin_version=args.lin_version, bit_rate=args.bit_rate)
    try:
        if args.simulate is not None:
            generator = SimulationDataGenerator(
                settings, args.sample_rate, rng=random.Random(args.seed)
            )
            channel = generator.generate(args.simulate, args.sample_rate)
        else:
            channel = _read_edge_file(args.input)
        analysis = LINAnalyzer(settings).analyze(channel, args.sample_rate)
        results = LINResults(analysis, args.sample_rate)
        _print_frames(
            analysis, results, args.format, DisplayBase(args.display_base), args.trigger_sample
        )
    except (OSError, ValueError) as exc:
        print(f"linanalyzer: error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())