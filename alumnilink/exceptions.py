# alumnilink/exceptions.py
class MentorshipError(Exception):
    """Base exception for mentorship business rules"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MentorshipError):
    """Raised when input is missing or malformed"""
    pass


class ForbiddenError(MentorshipError):
    """Raised when the actor lacks the role or ownership for an action"""
    pass


class NotFoundError(MentorshipError):
    """Raised when a mentorship, session, goal or user does not exist"""
    pass


class DuplicateRequestError(MentorshipError):
    """Raised when an open mentorship already exists for the pair"""
    pass


class InvalidStateError(MentorshipError):
    """Raised when an action is not allowed in the current state"""
    pass


class InvalidTransitionError(InvalidStateError):
    """Raised when a mentorship status transition is not allowed"""
    pass
