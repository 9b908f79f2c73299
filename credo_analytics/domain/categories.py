"""Credit-score category lookup backed by a binary search tree of score ranges"""

import logging
from typing import Any, Generic, Iterator, List, Optional, Tuple, TypeVar

from credo_analytics.domain.exceptions import InvalidScoreRangeError
from credo_analytics.domain.models import CreditAction, CreditCategory, UtilizationLimits

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_CREDIT_SCORE = 300
MAX_CREDIT_SCORE = 850


class CategoryNode(Generic[T]):
    """Tree node holding one inclusive [min_score, max_score] range"""

    __slots__ = ("min_score", "max_score", "category_data", "left", "right")

    def __init__(self, min_score: int, max_score: int, category_data: T):
        self.min_score = min_score
        self.max_score = max_score
        self.category_data = category_data
        self.left: Optional["CategoryNode[T]"] = None
        self.right: Optional["CategoryNode[T]"] = None


class ScoreRangeIndex(Generic[T]):
    """
    Binary search tree over non-overlapping score ranges, ordered by min_score.

    The tree is never rebalanced: insertion order decides its shape. Inserting
    the middle range first and then bisecting keeps lookups at O(log n);
    ascending insertion degrades them to O(n).
    """

    def __init__(self) -> None:
        self.root: Optional[CategoryNode[T]] = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def insert(self, min_score: int, max_score: int, category_data: T) -> None:
        if min_score > max_score:
            raise InvalidScoreRangeError(f"min_score {min_score} exceeds max_score {max_score}")

        new_node = CategoryNode(min_score, max_score, category_data)
        self._size += 1
        if self.root is None:
            self.root = new_node
            return

        node = self.root
        while True:
            if min_score < node.min_score:
                if node.left is None:
                    node.left = new_node
                    return
                node = node.left
            else:
                if node.right is None:
                    node.right = new_node
                    return
                node = node.right

    def trace(self, score: float) -> Tuple[Optional[T], int]:
        """Search for score, returning (category or None, nodes compared)"""
        comparisons = 0
        node = self.root
        while node is not None:
            comparisons += 1
            if node.min_score <= score <= node.max_score:
                return node.category_data, comparisons
            node = node.left if score < node.min_score else node.right
        return None, comparisons

    def search(self, score: float) -> Optional[T]:
        category, comparisons = self.trace(score)
        logger.debug(
            "Category lookup",
            extra={"score": score, "found": category is not None, "comparisons": comparisons},
        )
        return category

    def height(self) -> int:
        if self.root is None:
            return 0
        best = 0
        stack: List[Tuple[CategoryNode[T], int]] = [(self.root, 1)]
        while stack:
            node, level = stack.pop()
            best = max(best, level)
            for child in (node.left, node.right):
                if child is not None:
                    stack.append((child, level + 1))
        return best

    def in_order(self) -> List[Tuple[int, int, T]]:
        """All ranges in ascending order of min_score"""
        return list(self._walk())

    def _walk(self) -> Iterator[Tuple[int, int, T]]:
        stack: List[CategoryNode[T]] = []
        node = self.root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.min_score, node.max_score, node.category_data
            node = node.right


HIGH_RISK = CreditCategory(
    key="HIGH_RISK",
    name="High Risk",
    min_score=300,
    max_score=579,
    css_class="high-risk",
    utilization=UtilizationLimits(
        recommended=30,
        ideal=10,
        warning_threshold=25,
        danger_threshold=30,
        message="Keep utilization below 30% to avoid further score damage",
    ),
    required_actions=(
        CreditAction(
            "Pay all bills on time starting this month",
            "Make every payment on time - no missed or late payments. "
            "Payment history is the most critical factor in rebuilding your credit.",
            "Critical",
        ),
        CreditAction(
            "Clear overdue or defaulted accounts",
            "Contact creditors immediately to set up payment plans for any past-due accounts. "
            "Bringing accounts current is your top priority.",
            "Critical",
        ),
        CreditAction(
            "Keep credit card usage below 30%",
            "Reduce credit utilization to under 30% of your total limit. "
            "High utilization signals financial stress to lenders.",
            "High",
        ),
        CreditAction(
            "Avoid applying for new loans or cards temporarily",
            "Each application creates a hard inquiry that lowers your score. "
            "Focus on rebuilding existing credit, not obtaining new credit.",
            "High",
        ),
        CreditAction(
            "Build credit history if needed",
            "If you have no credit history, get a secured credit card or take a small credit "
            "builder loan from your bank to establish positive payment records.",
            "High",
        ),
    ),
    suggestions=(
        CreditAction(
            "Use auto-pay for bills",
            "Set up automatic payments to avoid forgetting due dates. "
            "This ensures consistent on-time payments starting this month.",
        ),
        CreditAction(
            "Check credit report for errors",
            "Review your credit reports carefully and dispute any inaccuracies. "
            "Removing incorrect negative items can significantly boost your score.",
        ),
        CreditAction(
            "Track credit score monthly",
            "Monitor your credit score regularly to notice improvements and stay motivated "
            "on your credit repair journey.",
        ),
        CreditAction(
            "Focus on one debt at a time",
            'Use the "Snowball" method - pay off smallest debts first for quick wins, '
            "then move to larger ones for momentum.",
        ),
    ),
)

NEEDS_IMPROVEMENT = CreditCategory(
    key="NEEDS_IMPROVEMENT",
    name="Needs Improvement",
    min_score=580,
    max_score=669,
    css_class="needs-improvement",
    utilization=UtilizationLimits(
        recommended=25,
        ideal=10,
        warning_threshold=20,
        danger_threshold=25,
        message="Aim for under 25% utilization to improve your score",
    ),
    required_actions=(
        CreditAction(
            "Make every payment on time for 6 months",
            "Establish a consistent pattern of on-time payments. "
            "Set up automatic payments or reminders to ensure 100% on-time payment rate.",
            "Critical",
        ),
        CreditAction(
            "Reduce credit card balances below 25%",
            "Lower your credit utilization to under 25%, ideally under 10%. "
            "Pay down high-balance cards first for maximum score impact.",
            "High",
        ),
        CreditAction(
            "Keep old accounts open and active",
            "Don't close old accounts - they help your credit age. "
            "Keep them active with small purchases every few months.",
            "High",
        ),
        CreditAction(
            "Limit new credit inquiries",
            "Avoid too many new credit applications. "
            "Maximum 1 every 6 months to minimize hard inquiries on your report.",
            "High",
        ),
        CreditAction(
            "Check credit report and remove errors",
            "Review your credit reports from all three bureaus. "
            "Dispute and remove any inaccurate negative entries immediately.",
            "Medium",
        ),
    ),
    suggestions=(
        CreditAction(
            "Set reminders before due dates",
            "Create calendar alerts or phone reminders 2-3 days before each bill is due "
            "to ensure you never miss a payment.",
        ),
        CreditAction(
            "Keep one small credit card active",
            "Maintain at least one credit card with small recurring charges (like Netflix) "
            "and pay it in full each month to build positive history.",
        ),
        CreditAction(
            "Avoid co-signing loans",
            "Don't co-sign loans for others until your score improves to 670+. "
            "Co-signing adds debt to your profile and increases risk.",
        ),
        CreditAction(
            "Add a goal tracker",
            "Set milestones (e.g., 650 -> 670) and track your progress monthly. "
            "Small wins keep you motivated on your improvement journey.",
        ),
    ),
)

MODERATE_RISK = CreditCategory(
    key="MODERATE_RISK",
    name="Moderate Risk",
    min_score=670,
    max_score=739,
    css_class="moderate-risk",
    utilization=UtilizationLimits(
        recommended=20,
        ideal=10,
        warning_threshold=15,
        danger_threshold=20,
        message='Keep under 20% to move into "Low Risk" category',
    ),
    required_actions=(
        CreditAction(
            "Keep credit utilization under 20-25%",
            "Maintain low credit card balances relative to limits. "
            "Aim for under 20% on each card to demonstrate responsible credit use.",
            "Critical",
        ),
        CreditAction(
            "Continue 100% on-time payments",
            "You're doing great! Keep making every payment on time. "
            "Consistency over time strengthens your credit profile significantly.",
            "Critical",
        ),
        CreditAction(
            "Limit credit applications to 1-2 per year",
            "Only apply for new credit when truly needed. "
            "Too many inquiries can lower your score and signal credit shopping.",
            "High",
        ),
        CreditAction(
            "Maintain a healthy credit mix",
            "Have both revolving (credit cards) and installment (loans) credit. "
            "If you only have cards, consider a small loan.",
            "Medium",
        ),
        CreditAction(
            "Avoid unnecessary account closures",
            "Keep old accounts open, especially your oldest ones. "
            "Closing accounts reduces your credit age and available credit.",
            "Medium",
        ),
    ),
    suggestions=(
        CreditAction(
            "Pay card before statement date",
            "Your statement balance is reported to credit bureaus. "
            "Pay before the statement closing date to show lower utilization.",
        ),
        CreditAction(
            "Schedule automatic full payments",
            "Set up autopay to pay your full statement balance each month. "
            "This ensures perfect payment history with zero effort.",
        ),
        CreditAction(
            "Keep inactive accounts alive",
            "Check for any dormant accounts and use them occasionally with small purchases. "
            "Inactive accounts may be closed by the issuer.",
        ),
        CreditAction(
            "Review credit reports quarterly",
            "Monitor your credit reports every 3-4 months for errors, fraud, or unexpected changes. "
            "Early detection prevents bigger issues.",
        ),
    ),
)

LOW_RISK = CreditCategory(
    key="LOW_RISK",
    name="Low Risk",
    min_score=740,
    max_score=799,
    css_class="low-risk",
    utilization=UtilizationLimits(
        recommended=15,
        ideal=10,
        warning_threshold=12,
        danger_threshold=15,
        message="Maintain under 15% to reach prime status",
    ),
    required_actions=(
        CreditAction(
            "Maintain perfect payment history",
            "One missed payment can drop your score significantly at this level. "
            "Continue your spotless record with autopay and alerts.",
            "Critical",
        ),
        CreditAction(
            "Keep utilization consistently under 15-20%",
            "Maintain low balances on all cards. "
            "Consider paying before statement close to report even lower utilization.",
            "Critical",
        ),
        CreditAction(
            "Monitor credit reports regularly",
            "Check your credit reports every few months for errors or unauthorized activity. "
            "Quick action prevents score damage.",
            "High",
        ),
        CreditAction(
            "Keep old credit lines open",
            "Preserve your credit history by keeping oldest accounts active. "
            "Length of history is crucial at this score level.",
            "High",
        ),
        CreditAction(
            "Use credit occasionally",
            "Don't let accounts go dormant. "
            "Make small purchases periodically and pay in full to show active, responsible credit use.",
            "Medium",
        ),
    ),
    suggestions=(
        CreditAction(
            "Ask for credit limit increases",
            "Request higher limits on existing cards to improve your utilization ratio. "
            "With your score, approvals are likely without hard inquiries.",
        ),
        CreditAction(
            "Diversify with low-risk accounts",
            "Consider adding a small EMI or credit builder loan to show you can manage "
            "different types of credit responsibly.",
        ),
        CreditAction(
            "Sign up for credit monitoring alerts",
            "Enable real-time alerts for any changes to your credit report. "
            "Early detection of errors or fraud protects your excellent score.",
        ),
        CreditAction(
            "Stay below 2 hard inquiries per year",
            "Be very selective with new credit applications. "
            'Multiple inquiries can drop you from "Very Good" to "Good" category.',
        ),
    ),
)

PRIME = CreditCategory(
    key="PRIME",
    name="Prime",
    min_score=800,
    max_score=850,
    css_class="prime",
    utilization=UtilizationLimits(
        recommended=10,
        ideal=5,
        warning_threshold=8,
        danger_threshold=10,
        message="Keep below 10% to maintain excellent credit",
    ),
    required_actions=(
        CreditAction(
            "Keep utilization under 10%",
            "Maintain very low credit card balances. "
            "At prime level, even 15-20% utilization can prevent you from reaching 850.",
            "Critical",
        ),
        CreditAction(
            "Maintain 100% on-time payments",
            "You've mastered credit! Continue your perfect payment history. "
            "Even one late payment can drop you 50-100 points.",
            "Critical",
        ),
        CreditAction(
            "Check credit report monthly",
            "Monitor for fraud or identity theft issues. "
            "With excellent credit, you're a high-value target for criminals.",
            "High",
        ),
        CreditAction(
            "Avoid unnecessary new credit lines",
            "Only apply for credit when truly needed. "
            "Each hard inquiry temporarily lowers your score, even at prime level.",
            "Medium",
        ),
        CreditAction(
            "Keep existing accounts responsibly active",
            "Use your cards occasionally with small purchases and pay in full. "
            "Don't let premium accounts go dormant and get closed.",
            "Medium",
        ),
    ),
    suggestions=(
        CreditAction(
            "Set up credit alerts",
            "Enable alerts for any change or inquiry to your credit. "
            "At this level, you're a target for fraud - stay vigilant.",
        ),
        CreditAction(
            "Negotiate best offers with lenders",
            "You have maximum leverage. "
            "Negotiate lowest rates on mortgages, auto loans, and request premium card benefits.",
        ),
        CreditAction(
            "Monitor average account age",
            "Keep your oldest accounts open and active. "
            "Don't close them even if unused - they're valuable for your credit age.",
        ),
        CreditAction(
            "Stay diversified across credit types",
            "Use multiple types of credit (cards, loans, EMI) responsibly. "
            "Diversity strengthens your already excellent profile.",
        ),
    ),
)

CREDIT_CATEGORIES: Tuple[CreditCategory, ...] = (
    HIGH_RISK,
    NEEDS_IMPROVEMENT,
    MODERATE_RISK,
    LOW_RISK,
    PRIME,
)

# Middle range first, then bisect: produces a tree of height 3
#              670
#            /     \
#         580       740
#         /           \
#      300             800
BALANCED_INSERTION_ORDER: Tuple[CreditCategory, ...] = (
    MODERATE_RISK,
    NEEDS_IMPROVEMENT,
    LOW_RISK,
    HIGH_RISK,
    PRIME,
)


def build_credit_category_index(
    categories: Tuple[CreditCategory, ...] = BALANCED_INSERTION_ORDER,
) -> ScoreRangeIndex[CreditCategory]:
    """Build the category index once at startup; callers treat it as read-only."""
    index: ScoreRangeIndex[CreditCategory] = ScoreRangeIndex()
    for category in categories:
        index.insert(category.min_score, category.max_score, category)

    logger.info("Credit category index built", extra={"categories": len(index), "height": index.height()})
    return index


def lookup_category(index: ScoreRangeIndex[Any], score: float) -> Optional[Any]:
    """Category for a credit score, or None outside [300, 850]"""
    if not MIN_CREDIT_SCORE <= score <= MAX_CREDIT_SCORE:
        return None
    return index.search(score)
