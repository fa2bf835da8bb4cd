"""Bindery - Client binding compiler for declarative API descriptions."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("bindery")
except PackageNotFoundError:
    __version__ = "(local)"
