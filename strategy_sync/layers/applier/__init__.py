"""Applier layer - Action을 문서 콘텐츠 변환으로 적용."""

from .mutations import MUTATION_REGISTRY, MutationFn
from .applier import SuggestionApplier

__all__ = ["MUTATION_REGISTRY", "MutationFn", "SuggestionApplier"]
