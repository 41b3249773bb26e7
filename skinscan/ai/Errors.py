from typing import Optional


class AnalysisError(Exception):
    """Base for every error the analysis pipeline exposes to its caller."""

    message = "Skin analysis failed. Please try again later."

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message or self.message)
        self.detail = detail


class ImageValidationError(AnalysisError):
    message = "Face image must not be empty."


class UpstreamServiceError(AnalysisError):
    """Image store, vision API or catalog unreachable or failing. Never retried here."""


class ConfigurationError(AnalysisError):
    message = "Skin analysis is misconfigured."


class NoSkinTypesConfigured(ConfigurationError):
    message = "No skin types found in the catalog."
