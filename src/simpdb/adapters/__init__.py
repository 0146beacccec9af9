"""Adapters (outbound) for simpdb.

Concrete implementations of the interfaces in `simpdb.interfaces`: codecs for
the supported file formats, record mappers, and file / in-memory storages.
"""
