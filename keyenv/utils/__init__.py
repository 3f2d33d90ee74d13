"""Configuration, decoding, rendering and logging helpers."""
