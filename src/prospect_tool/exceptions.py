"""Domain errors raised by the prospect import and matching services"""


class ProspectImportError(Exception):
    """Base class for user-facing import failures."""


class UploadRejected(ProspectImportError):
    pass


class CSVDecodeError(UploadRejected):
    pass


class MappingError(ProspectImportError):
    pass


class MissingActorError(ProspectImportError):
    pass


class StoreError(ProspectImportError):
    pass


class DuplicateCheckError(ProspectImportError):
    """The duplicate lookup failed; the import must not proceed unchecked."""

    def __init__(self, message: str = "Unable to verify duplicates, try again"):
        super().__init__(message)


class ImportSessionNotFound(ProspectImportError):
    pass


class ImportStateError(ProspectImportError):
    pass
