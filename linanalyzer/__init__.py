"""Decoding and simulation of LIN bus traffic from sampled digital signals."""

__version__ = "0.1.0"