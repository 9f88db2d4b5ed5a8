"""CI Simple: calculator API plus test report generation and notifications."""

__version__ = "1.0.0"
