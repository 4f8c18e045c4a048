"""Validation pipeline: request types, the engine facade and result formatting."""
