import io
import json
import random

import pytest

from linanalyzer.analyzer import LINAnalyzer
from linanalyzer.channel import DigitalChannel
from linanalyzer.cli import main
from linanalyzer.frames import DisplayBase
from linanalyzer.results import EXPORT_HEADER, LINResults
from linanalyzer.settings import LINSettings
from linanalyzer.simulation import SimulationDataGenerator

SAMPLE_RATE = 1_000_000


def test_simulated_csv_starts_with_header(capsys):
    assert main(["--simulate", "200000", "--seed", "1", "--format", "csv"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == EXPORT_HEADER
    assert len(lines) > 1


def test_simulation_is_deterministic_with_seed(capsys):
    main(["--simulate", "150000", "--seed", "9"])
    first = capsys.readouterr().out
    main(["--simulate", "150000", "--seed", "9"])
    second = capsys.readouterr().out
    assert first == second
    assert "Header Break" in first


def test_json_output_records(capsys):
    assert main(["--simulate", "150000", "--seed", "2", "--format", "json"]) == 0
    records = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert records
    assert records[0]["type"] == "header_break"
    assert all(record["start"] <= record["end"] for record in records)


def test_edge_file_matches_direct_export(tmp_path, capsys):
    settings = LINSettings()
    generator = SimulationDataGenerator(settings, SAMPLE_RATE, rng=random.Random(5))
    simulated = generator.generate(200_000, SAMPLE_RATE)
    path = tmp_path / "edges.txt"
    path.write_text(
        "# recorded line\n"
        + f"{int(simulated.initial_state)}\n"
        + "\n".join(str(edge) for edge in simulated.edges)
        + "\n"
    )
    assert main([str(path), "--format", "csv"]) == 0
    printed = capsys.readouterr().out

    channel = DigitalChannel(simulated.initial_state, simulated.edges)
    analysis = LINAnalyzer(settings).analyze(channel, SAMPLE_RATE)
    expected = io.StringIO()
    LINResults(analysis, SAMPLE_RATE).export(expected, DisplayBase.HEXADECIMAL, 0)
    assert printed == expected.getvalue()


def test_missing_file_reports_error(tmp_path, capsys):
    assert main([str(tmp_path / "absent.txt")]) == 1
    assert "error" in capsys.readouterr().err


def test_bad_initial_level(tmp_path, capsys):
    path = tmp_path / "edges.txt"
    path.write_text("7 10 20\n")
    assert main([str(path)]) == 1
    assert "initial level" in capsys.readouterr().err


def test_bit_rate_out_of_range(capsys):
    assert main(["--simulate", "1000", "--bit-rate", "10"]) == 1
    assert "bit rate" in capsys.readouterr().err


def test_requires_exactly_one_source():
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 2