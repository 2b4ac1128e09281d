"""Persist and load upstream route profiles."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict

from cartola_proxy.config.settings import UpstreamRoutes


@dataclass
class RouteProfile:
    routes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "RouteProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(routes={str(k): str(v) for k, v in data.get("routes", {}).items()})

    @classmethod
    def from_routes(cls, routes: UpstreamRoutes) -> "RouteProfile":
        return cls(routes=asdict(routes))

    def apply(self, base: UpstreamRoutes) -> UpstreamRoutes:
        return base.with_overrides(self.routes)

    def save(self, path: Path) -> None:
        payload = {"routes": self.routes}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
