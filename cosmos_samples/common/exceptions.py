"""
Sample Exceptions.

Exception classes raised by the sample code itself. Errors returned by the
Cosmos DB service surface as ``azure.cosmos.exceptions.CosmosHttpResponseError``
and are not wrapped.
"""


class SampleError(Exception):
    """Base exception for sample errors.

    Attributes:
        message: Error message
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(SampleError):
    """Configuration cannot be used to build a client."""

    def __init__(self, message: str, setting: str = ""):
        """Initialize configuration error.

        Args:
            message: Error message
            setting: Name of the offending setting
        """
        super().__init__(message)
        self.setting = setting


class InvalidDocumentError(SampleError):
    """Document is missing its id or partition key value."""

    def __init__(self, message: str, document_id: str = "", partition_key: str = ""):
        """Initialize invalid document error.

        Args:
            message: Error message
            document_id: Document identifier
            partition_key: Partition key value
        """
        super().__init__(message)
        self.document_id = document_id
        self.partition_key = partition_key
