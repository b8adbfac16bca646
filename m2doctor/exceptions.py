"""Custom exceptions for m2-doctor."""


class M2DoctorError(Exception):
    """Base exception for all m2-doctor errors."""


class ResolutionError(M2DoctorError):
    """Raised when no local repository path could be determined."""


class ScanIOError(M2DoctorError):
    """Raised when the scan root is missing, empty, or not a directory."""

    def __init__(self, path: str, problem: str):
        self.path = path
        self.problem = problem
        super().__init__(f"{problem}: {path}" if path else problem)
