"""pkgworld - keeps the world file of explicitly requested packages."""

__version__ = "0.1.0"
