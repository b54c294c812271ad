#!/usr/bin/env python


class UnisexNamesError(Exception):
    """Base class for every error raised by the unisex names pipeline."""


class MalformedRecordError(UnisexNamesError, ValueError):
    """A birth record failed validation; the whole run is aborted."""


class ConfigurationError(UnisexNamesError, ValueError):
    """A threshold value is outside its numeric domain."""


class ConsistencyError(UnisexNamesError):
    """Snapshot and trend statistics disagree for the same name."""
