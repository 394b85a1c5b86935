class MereError(Exception):
    """Base exception for Mere"""
    pass

class ArityError(MereError):
    """Raised when the argument count violates the active checking policy"""
    pass

class NotBoundError(MereError):
    """Raised when a task has no callable or a label has no task"""
    pass

class InvalidTaskError(MereError):
    """Raised when a task or a label was expected and neither was found"""
    pass

class ConfigurationError(MereError):
    """Raised when an invalid argument checking mode is supplied"""
    pass


__all__ = [
    'MereError',
    'ArityError',
    'NotBoundError',
    'InvalidTaskError',
    'ConfigurationError',
]
