"""Instruction-level simulators of clustered spiking neural network accelerators."""

__version__ = "0.1.0"
__all__ = ["csnn", "fcsnn"]