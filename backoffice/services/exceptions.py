class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class DownstreamServiceError(ServiceError):
    """Raised when the document store returns an error response."""

    def __init__(self, message: str, status_code: int | None = None, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code


class RecordNotFoundError(ServiceError):
    """Raised when a document id does not exist in its collection."""

    def __init__(self, collection: str, document_id: str):
        super().__init__(f"{collection}/{document_id} not found")
        self.collection = collection
        self.document_id = document_id


class InvalidQueryError(ServiceError):
    """Raised when a query parameter cannot be interpreted."""

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.field = field
