"""linguard: build-time verified translation catalogs."""

VERSION = "0.4.0"
