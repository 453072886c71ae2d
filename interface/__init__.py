"""Drivers for the Chess 2.0 engine: REST API and terminal."""
