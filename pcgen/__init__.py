"""pcgen - Persistent collection decorator generator."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pcgen")
except PackageNotFoundError:
    __version__ = "(local)"
