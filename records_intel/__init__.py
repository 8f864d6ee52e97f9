"""Public-records document intelligence: tiered analysis and person resolution."""

__version__ = "0.1.0"
