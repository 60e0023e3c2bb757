"""Error taxonomy for the fact-check engine.

Only NoCredentialsConfigured and AllBackendsFailed ever reach the user.
BackendCallFailed is recorded per backend and excluded from the merge;
ReconcileOnEmptyInput signals a programming error in the caller.
"""

from typing import Dict


class FactCheckError(Exception):
    """Base class. `user_message` is the single line shown to the user."""

    user_message = "Fact check failed."

    def __init__(self, message: str = ""):
        super().__init__(message or self.user_message)


class NoCredentialsConfigured(FactCheckError):
    user_message = "No API Keys found. Please set at least one API Key."


class BackendCallFailed(FactCheckError):
    def __init__(self, backend: str, reason: str):
        self.backend = backend
        self.reason = reason
        super().__init__(f"{backend}: {reason}")


class AllBackendsFailed(FactCheckError):
    user_message = "All fact-check services failed. Please try again later."

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        details = "; ".join(f"{name}: {reason}" for name, reason in self.errors.items())
        super().__init__(f"All backends failed ({details})")


class ReconcileOnEmptyInput(FactCheckError):
    def __init__(self):
        super().__init__("reconcile() requires at least one report")
