"""Entrypoints (inbound adapters) for simpdb.

Expose the library to the outside world. Currently only the ``simpdb``
command-line tool, which inspects and converts table files.
"""
