"""Engine settings and compliance domain definitions."""
