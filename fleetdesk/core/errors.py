class DispatchError(Exception):
    """Base for errors the API turns into an ``{"error": ...}`` response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DispatchError):
    status_code = 400


class ConflictError(DispatchError):
    status_code = 400


class NotFoundError(DispatchError):
    status_code = 404

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found")
        self.entity = entity


class ZipNotFoundError(NotFoundError):
    def __init__(self, zip_code: str):
        super().__init__("ZIP code")
        self.zip_code = zip_code


class TransientStoreError(DispatchError):
    status_code = 500
