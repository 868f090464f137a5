"""
softvibe interactive programming courses.

This package bundles the learner state model (progress, drafts, view
routing) with thin clients for an OpenAI-backed tutor and a Judge0-style
code execution sandbox.
"""

from .config.loader import load_settings

__all__ = ["load_settings"]
