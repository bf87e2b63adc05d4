"""Simulator of the fully connected spiking network accelerator."""

__all__ = [
    "isa",
    "alu",
    "pe",
    "spike_memory",
    "cluster",
    "hidden_layer",
    "output_layer",
    "controller",
]