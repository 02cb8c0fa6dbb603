"""Gran Turismo 7 telemetry decoding and UDP client, and a simulated virtual DualShock 4 controller."""

__version__ = "0.1.0"