"""
Exception hierarchy for Namewarden.

User-facing errors (:class:`ValidationError`, :class:`EarlyTermination`) carry
a message that the command cog shows verbatim. Store and moderation errors are
logged by the component that catches them.
"""


class NamewardenError(Exception):
    """Base class for all Namewarden errors."""


class ValidationError(NamewardenError):
    """Bad input or missing authorization. Raised before any side effect."""


class EarlyTermination(NamewardenError):
    """A workflow was abandoned (e.g. nobody answered the prompt in time)."""


class StoreError(NamewardenError):
    """The Config Store could not be read or written."""


class DuplicateKeyError(StoreError):
    """An insert collided with an existing (server, object type, object id) row."""


class ModerationActionError(NamewardenError):
    """A Discord-side moderation step failed."""


class BanError(ModerationActionError):
    """The ban was refused (missing privilege) or the member is already gone."""


class DeliveryError(ModerationActionError):
    """A direct message could not be delivered (blocked bot or closed DMs)."""
