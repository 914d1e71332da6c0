"""strategy-sync: 기획 문서 4종(Canvas, Strategy, OKRs, FinancialProjection) 정합성 엔진."""

__version__ = "0.1.0"
