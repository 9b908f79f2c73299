"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from credo_analytics.domain.models import (
    CLVTier,
    CreditCard,
    Customer,
    FraudReport,
    Loan,
    Payment,
    RiskLevel,
    ScorePoint,
    Segment,
    SpendingEntry,
)


class ORMModel(BaseModel):
    """Response model populated from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Loans and fraud
# ---------------------------------------------------------------------------


class FraudReportSchema(ORMModel):
    reason: str
    details: str = ""
    reported_at: str
    contact: Optional[str] = None
    auto_flagged: bool = False


class LoanSchema(BaseModel):
    """Loan as supplied by the data-access layer"""

    id: str = Field(..., min_length=1)
    name: str = ""
    provider: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    total: float = Field(0.0, ge=0)
    remaining: float = Field(0.0, ge=0)
    is_fraud: bool = False
    fraud_report: Optional[FraudReportSchema] = None

    def to_domain(self) -> Loan:
        report = self.fraud_report
        return Loan(
            id=self.id,
            name=self.name,
            provider=self.provider,
            email=self.email,
            phone=self.phone,
            address=self.address,
            total=self.total,
            remaining=self.remaining,
            is_fraud=self.is_fraud,
            fraud_report=FraudReport(**report.model_dump()) if report else None,
        )


class CandidateLoanSchema(LoanSchema):
    """Loan not persisted yet; the id is optional"""

    id: str = ""


class PortfolioRequest(BaseModel):
    loans: List[LoanSchema]
    max_depth: Optional[int] = Field(None, ge=0)

    def domain_loans(self) -> List[Loan]:
        return [loan.to_domain() for loan in self.loans]


class AnalyzeRequest(PortfolioRequest):
    start_loan_id: str = Field(..., min_length=1)


class ValidateLoanRequest(BaseModel):
    candidate: CandidateLoanSchema
    existing_loans: List[LoanSchema] = []
    max_depth: Optional[int] = Field(None, ge=0)


class FraudPathEntrySchema(ORMModel):
    loan_id: str
    name: str
    provider: str
    fraud_score: int
    depth: int
    path: List[str]


class FraudAnalysisResponse(ORMModel):
    risk_level: RiskLevel
    fraud_score: int
    connected_loans: int
    network_depth: int
    fraud_path: List[FraudPathEntrySchema]
    visited: List[str]


class LoanAnalysisSchema(ORMModel):
    loan_id: str
    loan_name: str
    provider: str
    analysis: FraudAnalysisResponse


class GraphStatsSchema(ORMModel):
    total_nodes: int
    total_edges: int


class PortfolioAuditResponse(ORMModel):
    overall_risk: RiskLevel
    total_loans: int
    analyzed_loans: List[LoanAnalysisSchema]
    flagged_loans: List[LoanAnalysisSchema]
    recommendations: List[str]
    graph_stats: GraphStatsSchema


class LoanFraudReportResponse(ORMModel):
    loan_id: str
    name: str
    provider: str
    amount: float
    remaining: float
    analysis: FraudAnalysisResponse
    generated_at: str


class LoanValidationResponse(ORMModel):
    is_valid: bool
    fraud_score: int
    risk_level: RiskLevel
    warnings: List[str]
    should_flag: bool


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------


class CustomerSchema(BaseModel):
    id: str = Field(..., min_length=1)
    joined_date: Optional[datetime] = None
    last_active: Optional[datetime] = None
    total_spending: float = 0.0
    is_premium: bool = False
    name: str = ""
    email: Optional[str] = None

    def to_domain(self) -> Customer:
        return Customer(**self.model_dump())


class CustomersRequest(BaseModel):
    customers: List[CustomerSchema]
    as_of: Optional[datetime] = Field(None, description="Reference time, defaults to now")

    def domain_customers(self) -> List[Customer]:
        return [customer.to_domain() for customer in self.customers]


class RFMRecordSchema(ORMModel):
    customer_id: str
    recency: int
    frequency: int
    monetary: float
    r_score: int
    f_score: int
    m_score: int
    segment: Segment


class SegmentSummarySchema(ORMModel):
    total_customers: int
    avg_recency: int
    avg_frequency: float
    avg_monetary: int
    champions: int
    segment_counts: Dict[Segment, int]


class RFMResponse(BaseModel):
    customers: List[RFMRecordSchema]
    summary: SegmentSummarySchema


class CLVRecordSchema(ORMModel):
    customer_id: str
    predicted_clv: float
    tier: CLVTier
    avg_order_value: float
    purchase_frequency: float
    predicted_lifespan_months: int
    customer_value: float
    months_since_joined: int
    total_spending: float
    last_active: Optional[datetime] = None


class CLVSummarySchema(ORMModel):
    total_customers: int
    avg_clv: float
    total_clv: float
    high_value_customers: int
    tier_counts: Dict[CLVTier, int]
    avg_order_value: int
    avg_purchase_frequency: float
    avg_lifespan_months: float
    avg_customer_value: int
    retention_rate: float


class CLVResponse(BaseModel):
    customers: List[CLVRecordSchema]
    summary: CLVSummarySchema


# ---------------------------------------------------------------------------
# Credit categories and utilization
# ---------------------------------------------------------------------------


class CreditActionSchema(ORMModel):
    title: str
    description: str
    impact: str


class UtilizationLimitsSchema(ORMModel):
    recommended: int
    ideal: int
    warning_threshold: int
    danger_threshold: int
    message: str


class CreditCategoryResponse(ORMModel):
    key: str
    name: str
    min_score: int
    max_score: int
    css_class: str
    utilization: UtilizationLimitsSchema
    required_actions: List[CreditActionSchema]
    suggestions: List[CreditActionSchema]


class CreditCardSchema(BaseModel):
    id: str
    name: str = ""
    limit: float = Field(0.0, ge=0)
    balance: float = Field(0.0, ge=0)

    def to_domain(self) -> CreditCard:
        return CreditCard(**self.model_dump())


class UtilizationRequest(BaseModel):
    credit_score: int
    cards: List[CreditCardSchema]
    card_id: str
    amount: float = Field(..., gt=0)


class CardSchema(ORMModel):
    id: str
    name: str
    limit: float
    balance: float


class UtilizationChangeSchema(ORMModel):
    can_proceed: bool
    error: Optional[str] = None
    total_limit: float
    current_balance: float
    current_utilization: float
    new_balance: float
    new_utilization: float
    utilization_increase: float
    card_name: str
    card_limit: float
    card_current_balance: float
    card_new_balance: float
    card_utilization: float
    available_credit: float
    shortfall: float


class UtilizationWarningSchema(ORMModel):
    level: str
    message: str
    recommendation: str
    category_name: Optional[str] = None
    recommended_limit: Optional[int] = None
    ideal_limit: Optional[int] = None


class UtilizationReportResponse(ORMModel):
    success: bool
    change: UtilizationChangeSchema
    warning: Optional[UtilizationWarningSchema] = None
    should_proceed: bool
    limits: Optional[UtilizationLimitsSchema] = None
    eligible_cards: List[CardSchema] = []


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------


class ScorePointSchema(BaseModel):
    score: int
    timestamp: datetime


class ScoreTrendRequest(BaseModel):
    history: List[ScorePointSchema]
    window_days: int = Field(30, gt=0)
    as_of: Optional[datetime] = None

    def domain_history(self) -> List[ScorePoint]:
        return [ScorePoint(**point.model_dump()) for point in self.history]


class PaymentSchema(BaseModel):
    amount: float
    due_date: datetime
    completed: bool = False


class PaymentActivityRequest(BaseModel):
    payments: List[PaymentSchema]
    window_days: int = Field(90, gt=0)
    as_of: Optional[datetime] = None

    def domain_payments(self) -> List[Payment]:
        return [Payment(**payment.model_dump()) for payment in self.payments]


class SpendingEntrySchema(BaseModel):
    amount: float
    timestamp: datetime


class SpendingVelocityRequest(BaseModel):
    history: List[SpendingEntrySchema]
    window_days: int = Field(30, gt=0)
    as_of: Optional[datetime] = None

    def domain_history(self) -> List[SpendingEntry]:
        return [SpendingEntry(**entry.model_dump()) for entry in self.history]


class ScoreTrendResponse(ORMModel):
    percentage_change: float
    direction: str
    data_points: int
    window_days: int
    oldest_score: Optional[int] = None
    newest_score: Optional[int] = None


class PaymentActivityResponse(ORMModel):
    on_time_rate: float
    total_payments: int
    completed_payments: int
    avg_amount: float
    status: str
    window_days: int


class SpendingVelocityResponse(ORMModel):
    avg_daily_spending: float
    total_spending: float
    projected_monthly: float
    trend: str
    window_days: int
