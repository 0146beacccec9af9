"""The ``simpdb`` command-line interface."""
