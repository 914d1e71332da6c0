"""Wizard layer - 4단계 가이드 인터뷰."""

from .wizard import GuidedStrategyWizard
from .prompts.wizard_prompts import STEP_PROMPTS, STEP_TITLES, GREETING_MESSAGE

__all__ = ["GuidedStrategyWizard", "STEP_PROMPTS", "STEP_TITLES", "GREETING_MESSAGE"]
