"""
Reputation risk assessment.

Maps an aggregated brand sentiment to a risk level with contributing factors
and a static list of recommended actions, and turns an assessment into a
prioritised action plan.
"""

from typing import Any, Dict, List

from .models import AggregatedSentiment, RiskAssessment, RiskLevel

RISK_RECOMMENDATIONS: Dict[RiskLevel, List[str]] = {
    RiskLevel.CRITICAL: [
        'Immediate crisis management response required',
        'Engage with negative mentions directly',
        'Implement damage control strategy',
        'Consider public statement or apology',
    ],
    RiskLevel.HIGH: [
        'Increase monitoring frequency',
        'Develop response strategy for negative mentions',
        'Focus on positive content creation',
        'Engage with community proactively',
    ],
    RiskLevel.MEDIUM: [
        'Monitor trends closely',
        'Address specific concerns raised',
        'Boost positive content marketing',
        'Engage with satisfied customers',
    ],
    RiskLevel.LOW: [
        'Maintain current monitoring',
        'Continue positive engagement',
        'Leverage positive mentions for marketing',
    ],
}


class RiskAssessor:
    """
    Assesses reputation risk from an aggregate.

    Levels:
        score < critical_threshold                      -> critical
        critical_threshold <= score < warning_threshold -> high
        negative share of mentions > negative_ratio     -> medium
        otherwise                                       -> low

    A volume above ``high_volume`` adds a factor to any non-low assessment.
    It annotates the assessment only; the level is never raised by volume.
    """

    def __init__(self, critical_threshold: float = -0.7, warning_threshold: float = -0.3,
                 negative_ratio_threshold: float = 0.3, high_volume: int = 1000):
        self.critical_threshold = critical_threshold
        self.warning_threshold = warning_threshold
        self.negative_ratio_threshold = negative_ratio_threshold
        self.high_volume = high_volume

    def assess_risk(self, aggregated: AggregatedSentiment) -> RiskAssessment:
        """Assess the reputation risk of an aggregated sentiment."""
        score = aggregated.overall.score
        factors = []

        if score < self.critical_threshold:
            level = RiskLevel.CRITICAL
            factors.append('Overall sentiment critically low')
        elif score < self.warning_threshold:
            level = RiskLevel.HIGH
            factors.append('Overall sentiment concerning')
        elif aggregated.negative_ratio() > self.negative_ratio_threshold:
            level = RiskLevel.MEDIUM
            factors.append('High ratio of negative mentions')
        else:
            level = RiskLevel.LOW

        if aggregated.volume > self.high_volume and level != RiskLevel.LOW:
            factors.append('High volume amplifies risk')

        return RiskAssessment(
            level=level,
            score=score,
            factors=factors,
            recommendations=list(RISK_RECOMMENDATIONS[level])
        )

    def generate_action_recommendations(self, aggregated: AggregatedSentiment,
                                        risk: RiskAssessment) -> List[Dict[str, Any]]:
        """
        Build a prioritised action plan.

        Risk recommendations come first, followed by a satisfaction initiative
        when the overall score is negative and an awareness campaign when the
        mention volume is low.
        """
        priority = 'critical' if risk.level == RiskLevel.CRITICAL else 'high'
        actions = [
            {
                'type': 'risk_mitigation',
                'priority': priority,
                'action': recommendation,
                'category': 'reputation_management'
            }
            for recommendation in risk.recommendations
        ]

        if aggregated.overall.score < 0:
            actions.append({
                'type': 'sentiment_improvement',
                'priority': 'high',
                'action': 'Launch customer satisfaction improvement initiative',
                'category': 'customer_experience'
            })

        if aggregated.volume < 50:
            actions.append({
                'type': 'brand_awareness',
                'priority': 'medium',
                'action': 'Increase brand visibility and engagement campaigns',
                'category': 'marketing'
            })

        return actions
