# errors.py
# Error vocabulary shared by routes and services


class ZoneQueryError(Exception):
    """Base error. Rendered as {"error": category, "message": message}."""

    category = "Bad request"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.category, "message": self.message}


class InvalidCoordinatesError(ZoneQueryError):
    category = "Invalid coordinates"


class InvalidResolutionError(ZoneQueryError):
    category = "Invalid resolution"


class InvalidHashError(ZoneQueryError):
    category = "Invalid H3 hash"


class InvalidKError(ZoneQueryError):
    category = "Invalid k value"


class InvalidPolygonError(ZoneQueryError):
    category = "Invalid polygon"


class InvalidBoundingBoxError(ZoneQueryError):
    category = "Invalid bounding box"


class InvalidRadiusError(ZoneQueryError):
    category = "Invalid radius"


class InvalidPaginationError(ZoneQueryError):
    category = "Invalid pagination"


class MissingParametersError(ZoneQueryError):
    category = "Missing parameters"


class InternalError(ZoneQueryError):
    category = "Internal server error"
    status_code = 500

    def __init__(self, message: str = "Something went wrong!"):
        super().__init__(message)
