"""Concrete adapters for the interfaces in :mod:`link_archiver.interfaces`."""
