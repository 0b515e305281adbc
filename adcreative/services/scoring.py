"""
Creative performance scoring

Composite score (fixed weights):
    score = 0.4 * CTR% + 0.4 * conversion rate% + 0.2 * (1 / CPC)
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

CTR_WEIGHT = 0.4
CONVERSION_RATE_WEIGHT = 0.4
CPC_WEIGHT = 0.2


@dataclass
class CreativeScore:
    """Aggregated performance for one creative name"""

    total_impressions: int = 0
    total_clicks: int = 0
    total_spend: float = 0.0
    total_conversions: int = 0
    avg_ctr: float = 0.0
    avg_cpc: float = 0.0
    conversion_rate: float = 0.0
    cpc_score: float = 0.0
    score: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_impressions": self.total_impressions,
            "total_clicks": self.total_clicks,
            "total_spend": round(self.total_spend, 2),
            "total_conversions": self.total_conversions,
            "avg_ctr": self.avg_ctr,
            "avg_cpc": self.avg_cpc,
            "conversion_rate": self.conversion_rate,
            "cpc_score": self.cpc_score,
            "score": self.score,
        }


def _field(record, name: str):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def calculate_performance_scores(records: Iterable) -> Dict[str, CreativeScore]:
    """
    Group performance records by ad name and compute composite scores.

    Accepts ORM rows or dicts with ad_name, impressions, clicks, spend, conversions.
    Pure function: aggregation is sum based so input order does not matter.
    """
    scores: Dict[str, CreativeScore] = {}

    for record in records:
        name = _field(record, "ad_name") or ""
        score = scores.setdefault(name, CreativeScore())
        score.total_impressions += int(_field(record, "impressions") or 0)
        score.total_clicks += int(_field(record, "clicks") or 0)
        score.total_spend += float(_field(record, "spend") or 0)
        score.total_conversions += int(_field(record, "conversions") or 0)

    for score in scores.values():
        score.avg_ctr = (
            score.total_clicks / score.total_impressions * 100
            if score.total_impressions > 0 else 0.0
        )
        score.avg_cpc = (
            score.total_spend / score.total_clicks
            if score.total_clicks > 0 else 0.0
        )
        score.conversion_rate = (
            score.total_conversions / score.total_clicks * 100
            if score.total_clicks > 0 else 0.0
        )
        score.cpc_score = 1 / score.avg_cpc if score.avg_cpc > 0 else 0.0
        score.score = (
            score.avg_ctr * CTR_WEIGHT
            + score.conversion_rate * CONVERSION_RATE_WEIGHT
            + score.cpc_score * CPC_WEIGHT
        )

    return scores


def rank_performers(scores: Dict[str, CreativeScore]) -> list:
    """(name, score) pairs, best first; ties keep name order"""
    return sorted(scores.items(), key=lambda item: (-item[1].score, item[0]))


def best_performer(scores: Dict[str, CreativeScore]) -> Optional[Tuple[str, CreativeScore]]:
    ranked = rank_performers(scores)
    return ranked[0] if ranked else None


def worst_performer(scores: Dict[str, CreativeScore]) -> Optional[Tuple[str, CreativeScore]]:
    ranked = rank_performers(scores)
    return ranked[-1] if ranked else None
