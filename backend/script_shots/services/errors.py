"""Exceptions raised by the shot registry services."""


class ShotAssignError(Exception):
    """Base class for rejected shot operations."""


class InvalidSelectionError(ShotAssignError):
    """The selected fragment is empty or cannot be found in the script."""


class OutOfBoundsError(ShotAssignError):
    """A resolved span does not lie within the script."""


class ScriptUnavailableError(ShotAssignError):
    """The scene has no script text, so no span can be located or claimed."""


class ShotNotFoundError(ShotAssignError):
    pass


class InvalidOrderError(ShotAssignError):
    """A reorder request does not list every shot of the scene exactly once."""


class RangeOverlapError(Exception):
    """A claim was attempted on a span that intersects an existing claim.

    Callers must check ``RangeRegistry.overlaps`` first; this is never
    resolved silently.
    """


class StoreError(Exception):
    """Persistence failure in a Shot Store or Script Source."""
