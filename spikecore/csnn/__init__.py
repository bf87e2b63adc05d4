"""Building blocks of the convolutional spiking network accelerator."""

__all__ = ["layout", "register_file", "spike_scheduler", "potential_init"]