"""Guided Strategy Wizard 상태 모델."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


TOTAL_STEPS = 4


class WizardPhase(str, Enum):
    INACTIVE = "inactive"
    AWAITING = "awaiting"
    GENERATING = "generating"


class WizardState(BaseModel):
    """
    위저드 상태 (불변).

    전이는 항상 새 상태 객체를 만들어 교체합니다.
    - inactive: step=None, answers={}
    - awaiting: step=1..4, answers는 1..step-1
    - generating: step=4, answers는 1..4
    """

    model_config = ConfigDict(frozen=True)

    phase: WizardPhase = WizardPhase.INACTIVE
    step: Optional[int] = Field(default=None, ge=1, le=TOTAL_STEPS)
    answers: dict[int, str] = Field(default_factory=dict)

    @classmethod
    def awaiting(cls, step: int, answers: Optional[dict[int, str]] = None) -> "WizardState":
        return cls(phase=WizardPhase.AWAITING, step=step, answers=dict(answers or {}))

    def record(self, text: str) -> "WizardState":
        """현재 단계 답변을 기록한 다음 상태 (step 4는 generating)."""
        answers = {**self.answers, self.step: text}
        if self.step >= TOTAL_STEPS:
            return WizardState(phase=WizardPhase.GENERATING, step=TOTAL_STEPS, answers=answers)
        return WizardState.awaiting(self.step + 1, answers)

    @property
    def is_active(self) -> bool:
        return self.phase != WizardPhase.INACTIVE


class WizardReply(BaseModel):
    """wizard.submit() 결과."""

    accepted: bool = Field(..., description="입력이 현재 단계 답변으로 기록되었는지")
    message: Optional[str] = Field(default=None, description="다음 프롬프트 또는 완료 메시지")
    step: Optional[int] = Field(default=None, description="다음 단계 (완료 시 None)")
    completed: bool = Field(default=False, description="문서 생성 완료 여부")
