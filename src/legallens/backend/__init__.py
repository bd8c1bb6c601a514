"""HTTP client for the LegalLens backend service."""

from .client import BackendAnalysisFetch, BackendClient, BackendHistoryFetch

__all__ = ["BackendAnalysisFetch", "BackendClient", "BackendHistoryFetch"]
