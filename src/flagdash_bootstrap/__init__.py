"""flagdash-bootstrap - release artifact installer for the flagdash CLI."""

__version__ = "0.1.0"
