"""
Domain exceptions.

Services raise these; the command-line surface catches them per operation
and turns them into a short notification.
"""


class ClientDeskError(Exception):
    """Base class for all application errors"""


class NotFoundError(ClientDeskError, LookupError):
    """A document does not exist for the current user"""

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection} document '{doc_id}' not found")


class PermissionDeniedError(ClientDeskError, PermissionError):
    """The document belongs to another user"""


class InvalidInputError(ClientDeskError, ValueError):
    """Form data failed a business rule"""


class TimerAlreadyRunningError(ClientDeskError):
    """A timer is already running and must be stopped first"""
