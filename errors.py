"""Error taxonomy shared by the booking core and the HTTP routers.

Every error carries the HTTP status it is reported with; ``main.py`` installs
a handler that renders them as ``{"error": <name>, "detail": <message>}``.
"""
from fastapi import status


class ParkingError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    @property
    def name(self) -> str:
        return type(self).__name__


class ValidationError(ParkingError):
    status_code = status.HTTP_400_BAD_REQUEST


class UserNotFound(ParkingError):
    status_code = status.HTTP_404_NOT_FOUND


class NotFound(ParkingError):
    status_code = status.HTTP_404_NOT_FOUND


class ZoneNotAllowed(ParkingError):
    status_code = status.HTTP_403_FORBIDDEN


class LotConflict(ParkingError):
    status_code = status.HTTP_409_CONFLICT


class InvalidTransition(ParkingError):
    status_code = status.HTTP_409_CONFLICT


class StorageError(ParkingError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
