"""Utilities package for the Coffee Calculator application."""
