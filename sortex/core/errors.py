from fastapi import status


class SortexError(Exception):
    """Failure with a client-facing code. The message stays in the logs."""

    code = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StorageFailure(SortexError):
    code = "storage_unavailable"


class LedgerWriteFailure(SortexError):
    """The object was stored but the upload row or point credit was not written."""

    code = "ledger_write_failed"


class BinSourceFailure(SortexError):
    code = "bin_source_unavailable"
    status_code = status.HTTP_502_BAD_GATEWAY
