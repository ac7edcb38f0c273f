"""Exception hierarchy for BillVerify.

Only ingestion and explicit user actions raise; the verification pipeline
degrades per entry instead of raising.
"""

from __future__ import annotations


class BillVerifyError(Exception):
    """Base class for all BillVerify errors."""

    pass


class IngestionError(BillVerifyError):
    """Uploaded time entry data could not be turned into a valid batch.

    The message is short and user-facing; no partial batch is ever returned
    alongside it.
    """

    pass


class ProfileNotFoundError(BillVerifyError):
    """Requested billing profile does not exist in the profile store."""

    pass


class EntryNotFoundError(BillVerifyError):
    """A review action referenced an entry id that is not in the batch."""

    pass


class PipelineCancelled(BillVerifyError):
    """The caller's cancellation check fired during a pipeline run."""

    pass
