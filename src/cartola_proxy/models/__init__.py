from .standings import AggregatedStanding, LeagueSummary, MarketStatus, ParticipantRecord

__all__ = [
    "AggregatedStanding",
    "LeagueSummary",
    "MarketStatus",
    "ParticipantRecord",
]
