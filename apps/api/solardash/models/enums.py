"""Closed enumerations shared by the calculation modules."""

import enum


# ── Profit analysis ──────────────────────────────────────────────────────────


class FinancingType(str, enum.Enum):
    SELF_FUNDING = "SELF_FUNDING"
    BANK_LOAN = "BANK_LOAN"
    GOVERNMENT_LOAN = "GOVERNMENT_LOAN"
    FACTORING = "FACTORING"


FINANCING_TYPE_LABELS: dict[FinancingType, str] = {
    FinancingType.SELF_FUNDING: "자부담 100%",
    FinancingType.BANK_LOAN: "은행 80% 대출",
    FinancingType.GOVERNMENT_LOAN: "금융지원사업",
    FinancingType.FACTORING: "팩토링",
}

FINANCING_TYPE_DESCRIPTIONS: dict[FinancingType, str] = {
    FinancingType.SELF_FUNDING: "초기 투자 전액 자부담, 대출 없음",
    FinancingType.BANK_LOAN: "자부담 20%, 은행 대출 80% (시중금리)",
    FinancingType.GOVERNMENT_LOAN: "자부담 20%, 정부 대출 80% (1.75% 고정, 2등급 모듈 필수)",
    FinancingType.FACTORING: "자부담 0%, 서울보증 5% + 동부화재 7~9% + 은행대출",
}


# ── Grid connection ──────────────────────────────────────────────────────────


class VoltageType(str, enum.Enum):
    LOW = "LOW"
    HIGH = "HIGH"
    EXTRA_HIGH = "EXTRA_HIGH"


class SupplyType(str, enum.Enum):
    OVERHEAD = "OVERHEAD"
    UNDERGROUND = "UNDERGROUND"


class PaymentType(str, enum.Enum):
    LUMP_SUM = "LUMP_SUM"
    INSTALLMENT = "INSTALLMENT"
