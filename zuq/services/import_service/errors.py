"""Exceptions raised by the import pipeline.

Row-level validation problems are never raised; they are collected on the
record. These exceptions cover whole-file and persistence failures.
"""


class ImportServiceError(Exception):
    """Base class for import pipeline errors."""


class ImportParseError(ImportServiceError, ValueError):
    """The uploaded file could not be turned into records."""


class UnsupportedDataTypeError(ImportServiceError, ValueError):
    """The requested data type has no rule table."""

    def __init__(self, data_type: str):
        self.data_type = data_type
        super().__init__(f"Tipo de dados não suportado: {data_type}")


class TemplateNotFoundError(ImportServiceError, LookupError):
    """No template exists for the requested data type."""

    def __init__(self, data_type: str):
        self.data_type = data_type
        super().__init__("Template não encontrado")


class MissingReferenceError(ImportServiceError):
    """A record references an equipment or supplier that does not exist."""


class NotAuthenticatedError(ImportServiceError):
    """An import was attempted without a user."""

    def __init__(self) -> None:
        super().__init__("Usuário não autenticado")
