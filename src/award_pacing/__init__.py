"""Award pacing, check-in and risk signals for scholarship disbursements."""

__version__ = "0.3.0"
