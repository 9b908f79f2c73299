"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from credo_analytics.utils.date_utils import Moment

# Adjacency list keyed by loan id, neighbours in insertion order
RelationshipGraph = Dict[str, List[str]]


class RiskLevel(str, Enum):
    """Fraud risk classification. NONE is only used for an empty portfolio."""

    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Segment(str, Enum):
    """Named RFM behavioural segments"""

    CHAMPIONS = "champions"
    LOYAL = "loyal"
    POTENTIAL = "potential"
    PROMISING = "promising"
    NEED_ATTENTION = "need-attention"
    ABOUT_TO_SLEEP = "about-to-sleep"
    AT_RISK = "at-risk"
    CANT_LOSE = "cant-lose"
    HIBERNATING = "hibernating"
    LOST = "lost"


class CLVTier(str, Enum):
    STARTER = "starter"
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


# ---------------------------------------------------------------------------
# Loans and fraud analysis
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FraudReport:
    """Fraud report attached to a loan (by the user or automatically)"""

    reason: str
    details: str
    reported_at: str  # ISO-8601
    contact: Optional[str] = None
    auto_flagged: bool = False


@dataclass
class Loan:
    """Loan record supplied by the data-access layer"""

    id: str
    name: str = ""
    provider: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    total: float = 0.0
    remaining: float = 0.0
    is_fraud: bool = False
    fraud_report: Optional[FraudReport] = None


@dataclass
class FraudPathEntry:
    """Suspicious loan found during traversal"""

    loan_id: str
    name: str
    provider: str
    fraud_score: int
    depth: int
    path: List[str]


@dataclass
class FraudAnalysisResult:
    """Output of a single depth-bounded traversal"""

    risk_level: RiskLevel
    fraud_score: int
    connected_loans: int
    network_depth: int
    fraud_path: List[FraudPathEntry]
    visited: List[str]  # unique ids in visit order


@dataclass
class LoanAnalysis:
    """Traversal result tagged with the loan it started from"""

    loan_id: str
    loan_name: str
    provider: str
    analysis: FraudAnalysisResult

    @property
    def risk_level(self) -> RiskLevel:
        return self.analysis.risk_level

    @property
    def fraud_score(self) -> int:
        return self.analysis.fraud_score

    @property
    def connected_loans(self) -> int:
        return self.analysis.connected_loans


@dataclass
class GraphStats:
    total_nodes: int
    total_edges: int


@dataclass
class PortfolioAudit:
    """Fraud audit across every loan in a portfolio"""

    overall_risk: RiskLevel
    total_loans: int
    analyzed_loans: List[LoanAnalysis]
    flagged_loans: List[LoanAnalysis]
    recommendations: List[str]
    graph_stats: GraphStats = field(default_factory=lambda: GraphStats(0, 0))


@dataclass
class LoanFraudReport:
    """Detailed fraud report for one loan"""

    loan_id: str
    name: str
    provider: str
    amount: float
    remaining: float
    analysis: FraudAnalysisResult
    generated_at: str


@dataclass
class LoanValidation:
    """Gate result for a loan that has not been persisted yet"""

    is_valid: bool
    fraud_score: int
    risk_level: RiskLevel
    warnings: List[str]
    should_flag: bool


# ---------------------------------------------------------------------------
# Customers, RFM and CLV
# ---------------------------------------------------------------------------


@dataclass
class Customer:
    """Read-only customer record used by segmentation"""

    id: str
    joined_date: Optional[Moment] = None
    last_active: Optional[Moment] = None
    total_spending: float = 0.0
    is_premium: bool = False
    name: str = ""
    email: Optional[str] = None


@dataclass
class RFMRecord:
    customer_id: str
    recency: int
    frequency: int
    monetary: float
    r_score: int = 3
    f_score: int = 3
    m_score: int = 3
    segment: Segment = Segment.LOST


@dataclass
class SegmentSummary:
    total_customers: int
    avg_recency: int
    avg_frequency: float
    avg_monetary: int
    champions: int
    segment_counts: Dict[Segment, int]


@dataclass
class CLVRecord:
    customer_id: str
    predicted_clv: float
    tier: CLVTier
    avg_order_value: float
    purchase_frequency: float
    predicted_lifespan_months: int
    customer_value: float
    months_since_joined: int
    total_spending: float
    last_active: Optional[Moment] = None


@dataclass
class CLVSummary:
    total_customers: int
    avg_clv: float
    total_clv: float
    high_value_customers: int
    tier_counts: Dict[CLVTier, int]
    avg_order_value: int = 0
    avg_purchase_frequency: float = 0.0
    avg_lifespan_months: float = 0.0
    avg_customer_value: int = 0
    # Percent of customers active in the last 30 days
    retention_rate: float = 0.0


# ---------------------------------------------------------------------------
# Credit categories and utilization
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UtilizationLimits:
    """Recommended credit utilization percentages for a category"""

    recommended: int
    ideal: int
    warning_threshold: int
    danger_threshold: int
    message: str


@dataclass(frozen=True)
class CreditAction:
    title: str
    description: str = ""
    impact: str = "Medium"


@dataclass(frozen=True)
class CreditCategory:
    key: str
    name: str
    min_score: int
    max_score: int
    css_class: str
    utilization: UtilizationLimits
    required_actions: Tuple[CreditAction, ...] = ()
    suggestions: Tuple[CreditAction, ...] = ()


@dataclass
class CreditCard:
    id: str
    name: str = ""
    limit: float = 0.0
    balance: float = 0.0


@dataclass
class UtilizationChange:
    """Effect of charging a payment to one card"""

    can_proceed: bool
    error: Optional[str] = None
    total_limit: float = 0.0
    current_balance: float = 0.0
    current_utilization: float = 0.0
    new_balance: float = 0.0
    new_utilization: float = 0.0
    utilization_increase: float = 0.0
    card_name: str = ""
    card_limit: float = 0.0
    card_current_balance: float = 0.0
    card_new_balance: float = 0.0
    card_utilization: float = 0.0
    available_credit: float = 0.0
    shortfall: float = 0.0


@dataclass
class UtilizationWarning:
    level: str  # none | safe | caution | warning | danger
    message: str
    recommendation: str = ""
    category_name: Optional[str] = None
    recommended_limit: Optional[int] = None
    ideal_limit: Optional[int] = None


@dataclass
class UtilizationReport:
    success: bool
    change: UtilizationChange
    warning: Optional[UtilizationWarning] = None
    should_proceed: bool = False
    limits: Optional[UtilizationLimits] = None
    # Cards that could take the whole payment, for suggesting an alternative
    eligible_cards: List[CreditCard] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Sliding-window trends
# ---------------------------------------------------------------------------


@dataclass
class ScorePoint:
    score: int
    timestamp: Moment


@dataclass
class Payment:
    amount: float
    due_date: Moment
    completed: bool = False


@dataclass
class SpendingEntry:
    amount: float
    timestamp: Moment


@dataclass
class ScoreTrend:
    percentage_change: float
    direction: str  # up | down | stable
    data_points: int
    window_days: int
    oldest_score: Optional[int] = None
    newest_score: Optional[int] = None


@dataclass
class PaymentActivity:
    on_time_rate: float
    total_payments: int
    completed_payments: int
    avg_amount: float
    status: str
    window_days: int


@dataclass
class SpendingVelocity:
    avg_daily_spending: float
    total_spending: float
    projected_monthly: float
    trend: str
    window_days: int
