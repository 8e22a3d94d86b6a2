# linanalyzer

Decoding and simulation of LIN (Local Interconnect Network) bus traffic.

`linanalyzer` takes a sampled digital signal from a LIN bus line and splits it
into the parts of a LIN frame: the header break, the sync byte (`0x55`), the
protected identifier, the response data bytes and the checksum. Faults are
flagged on the frame they occur in: byte framing errors, a missing break, a
missing sync byte and checksum mismatches.

It can also generate a simulated LIN signal with random identifiers and data,
which is useful for trying the decoder out without any hardware.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

Installing the package provides the `linanalyzer` command. It decodes either
an edge file or simulated traffic and prints the decoded frames:

```
linanalyzer capture.txt --sample-rate 1000000
linanalyzer --simulate 200000 --seed 1 --format csv
```

Exactly one of an input file or `--simulate SAMPLES` must be given.

An edge file holds whitespace-separated integers: the initial line level
(`0` or `1`) followed by the sample numbers at which the level toggles, in
strictly increasing order. Anything after a `#` on a line is ignored.

Options:

- `--simulate SAMPLES`: decode simulated traffic covering this many samples.
- `--seed N`: random seed for the simulation.
- `--sample-rate HZ`: sample rate of the signal (default 1000000). It must be
  at least four times the bit rate.
- `--bit-rate BPS`: LIN bit rate (default 20000, 1000 to 1000000 allowed).
- `--lin-version {1.0,2.0}`: protocol version (default 2.0).
- `--display-base`: `binary`, `decimal`, `hexadecimal` (default), `ascii` or
  `ascii_hex`.
- `--format`: `tabular` (default; one line per frame with index, start and
  end sample and a description), `bubble` (the short-to-long descriptions
  separated by `|`), `csv` (one line of times and values per packet) or
  `json` (one JSON object per decoded frame).
- `--trigger-sample N`: sample that CSV times are measured from (default 0).

Errors in the input or settings are reported on standard error and the
command exits with status 1.

## Library use

The main pieces are:

- `linanalyzer.checksum.LINChecksum`: the LIN checksum (inverted sum with
  carry wrap-around), with `add()`, `result()` and `clear()`.
- `linanalyzer.settings.LINSettings`: input channel, bit rate (1,000 to
  1,000,000 bit/s, 20,000 by default) and LIN protocol version (1 or 2, 2 by
  default), with `validate()`, `save()` and `LINSettings.load(text)` to store
  and restore them as text.
- `linanalyzer.channel`: a sampled digital line (`DigitalChannel`), a cursor
  that walks it edge by edge (`ChannelCursor`), and a writer for building
  signals (`SimulationChannel`).
- `linanalyzer.frames`: the decoded `Frame` record, `FrameState`,
  `FrameFlags`, `DisplayBase` and `format_number()`.
- `linanalyzer.simulation.SimulationDataGenerator`: writes random LIN frames
  into a simulated channel; `generate()` returns the resulting
  `DigitalChannel`.
- `linanalyzer.analyzer.LINAnalyzer`: decodes a channel into frames, keyed
  frame records (`FrameV2`), bit markers and packets, returned as an
  `AnalysisResult`.
- `linanalyzer.results.LINResults`: turns decoded frames into bubble and
  table text and exports packets as CSV.

### Checksums

```python
from linanalyzer.checksum import LINChecksum

checksum = LINChecksum()
for byte in (0x4A, 0x55, 0x93, 0xE5):
    checksum.add(byte)
print(hex(checksum.result()))  # 0xe6
```

When decoding version 2 traffic, the analyzer includes the protected
identifier in the checksum except for identifiers `0x3C` and `0x3D`, which use
the classic (data-only) checksum.

### Simulating and decoding

```python
import random

from linanalyzer.analyzer import LINAnalyzer
from linanalyzer.frames import DisplayBase
from linanalyzer.results import LINResults
from linanalyzer.settings import LINSettings
from linanalyzer.simulation import SimulationDataGenerator

settings = LINSettings()
generator = SimulationDataGenerator(settings, 1_000_000, rng=random.Random(1))
channel = generator.generate(200_000, 1_000_000)

analysis = LINAnalyzer(settings).analyze(channel, 1_000_000)
results = LINResults(analysis, 1_000_000)
for index in range(len(analysis.frames)):
    print(results.tabular_text(index, DisplayBase.HEXADECIMAL))
```

### Protected identifiers

```python
from linanalyzer.simulation import protected_identifier

pid = protected_identifier(0x3C)  # identifier in bits 0-5, parity in bits 6 and 7
```

## Decoding notes

- A break field must be low for at least 13 bit times before it is accepted
  as the start of a frame. A data byte whose stop bit is low, with no edge in
  the next three bit times and the line then staying high for at least half
  a bit, is also taken as a break and restarts decoding.
- The response length is not known in advance. Once a byte equals the running
  checksum it is reported as a possible checksum; decoding continues, and the
  packet is closed after eight data bytes at the latest.
- Inter-byte spaces between the bytes of a frame are reported as their own
  frames.
- Decoding stops quietly when the end of the recorded signal is reached.

## What it does not do

The package has no waveform display or graphical interface, and it does not
read capture files from logic analyzers: input is either a `DigitalChannel`
built in code or the plain edge file described above.