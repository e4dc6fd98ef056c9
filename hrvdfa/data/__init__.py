"""Sensor-side collaborators: packet decoding and file replay."""
