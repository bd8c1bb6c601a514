"""Gradio UI for LegalLens."""

from .app import build_interface, launch, render_updates, submit_login, submit_signup

__all__ = ["build_interface", "launch", "render_updates", "submit_login", "submit_signup"]
