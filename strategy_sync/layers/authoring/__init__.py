"""Authoring layer - 위저드 답변으로 문서 4종 생성."""

from .answer_parser import StrategyInputs, parse_answers
from .author import TemplateDocumentAuthor

__all__ = ["StrategyInputs", "parse_answers", "TemplateDocumentAuthor"]
