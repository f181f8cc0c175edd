"""Single-vehicle ride tracker: geodesy, ride stats, fuel model and session control."""

__version__ = "0.1.0"
