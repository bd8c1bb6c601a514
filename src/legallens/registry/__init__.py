"""Document registry."""

from .service import WELCOME_MESSAGE_ID, DocumentRegistry, overall_risk, welcome_text

__all__ = ["WELCOME_MESSAGE_ID", "DocumentRegistry", "overall_risk", "welcome_text"]
