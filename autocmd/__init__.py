"""Composable autonomous commands, conditions, a command controller and an autonomous chooser."""

__version__ = "0.1.0"