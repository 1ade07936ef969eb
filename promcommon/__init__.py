"""Label sets, fingerprints, timestamps, query values, alerts, silences, logger setup and WSGI helpers for monitoring components."""

__version__ = "0.1.0"