# WORKFLOW: Error taxonomy for the price import/export pipeline.
# Used by: Archive codec, CSV reader, record validator, persistence gateway, routers
# Errors:
# 1. InvalidArchive - upload is not a readable zip archive (400)
# 2. EntryNotFound - archive has no data entry; handled as an empty import
# 3. MalformedTable - CSV could not be read (400)
# 4. InvalidID / InvalidPrice - row field failed to parse (400)
# 5. MissingUpload / UploadTooLarge - multipart payload problems (400 / 413)
# 6. PersistenceError - transaction, insert, aggregate or query failure (500)
# 7. MethodNotAllowed - unsupported HTTP method on the prices endpoint (405)
#
# Routers translate every PriceTransferError into an HTTP response using status_code.

from typing import Optional


class PriceTransferError(Exception):
    """Base error for the import/export pipeline."""

    status_code: int = 500

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"{message} (row {line_number})"
        super().__init__(message)
        self.line_number = line_number


class InvalidArchive(PriceTransferError):
    status_code = 400


class EntryNotFound(PriceTransferError):
    status_code = 400


class MalformedTable(PriceTransferError):
    status_code = 400


class InvalidID(PriceTransferError):
    status_code = 400


class InvalidPrice(PriceTransferError):
    status_code = 400


class MissingUpload(PriceTransferError):
    status_code = 400


class UploadTooLarge(PriceTransferError):
    status_code = 413


class PersistenceError(PriceTransferError):
    status_code = 500


class MethodNotAllowed(PriceTransferError):
    status_code = 405
