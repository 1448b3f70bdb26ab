"""Engine error types used across modules."""


class EngineError(RuntimeError):
    """Base error for engine failures."""


class HashingError(EngineError):
    """Raised when hashing inputs fails or detects races."""
