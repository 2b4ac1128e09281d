from .roster import RosterCache, RosterCacheEntry

__all__ = ["RosterCache", "RosterCacheEntry"]
