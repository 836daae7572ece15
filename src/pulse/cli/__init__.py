"""Pulse command-line interface."""
