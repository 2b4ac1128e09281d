"""Error taxonomy shared by the core pipeline and the HTTP facade."""

from __future__ import annotations

from typing import Any


class ProxyError(RuntimeError):
    """Base class for failures that abort a standings request."""

    kind = "proxy_error"
    http_status = 500
    default_message = "Upstream request failed."

    def __init__(
        self,
        message: str | None = None,
        *,
        upstream_status: int | None = None,
        upstream_body: Any = None,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
        self.hint = hint
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": self.kind,
            "message": self.message,
            "upstream_status": self.upstream_status,
            "upstream_body": self.upstream_body,
            "hint": self.hint,
        }
        if self.details:
            payload.update(self.details)
        return payload


class UpstreamUnreachable(ProxyError):
    """Network failure or per-call timeout talking to the upstream API."""

    kind = "upstream_unreachable"
    http_status = 502
    default_message = "Upstream API could not be reached."


class RequestDeadlineExceeded(UpstreamUnreachable):
    kind = "deadline_exceeded"
    http_status = 504
    default_message = "Standings computation exceeded the request deadline."


class Unauthorized(ProxyError):
    """Upstream rejected (or required) the configured credential."""

    kind = "unauthorized"
    http_status = 401
    default_message = "Upstream rejected the credential."


class NotFound(ProxyError):
    kind = "not_found"
    http_status = 404
    default_message = "Upstream resource not found."


class LeagueNotFound(NotFound):
    kind = "league_not_found"
    default_message = "League not found upstream."


class EmptyParticipants(ProxyError):
    """League resolved, but no participant could be extracted from it."""

    kind = "empty_participants"
    http_status = 404
    default_message = "League has no recognizable participants."


class UpstreamError(ProxyError):
    kind = "upstream_error"
    http_status = 502
    default_message = "Upstream API returned an error."


def classify_failure(
    status_code: int | None,
    body: Any,
    *,
    has_token: bool,
    context: str = "upstream request",
    not_found: type[NotFound] = NotFound,
) -> ProxyError:
    """Map an upstream status/body pair onto the error taxonomy."""

    if status_code is None:
        return UpstreamUnreachable(
            f"Could not reach upstream for {context}.",
            upstream_body=body,
        )
    if status_code in (401, 403):
        hint = None if has_token else "No credential configured; set GLB_TOKEN."
        return Unauthorized(
            f"Upstream refused {context} ({status_code}).",
            upstream_status=status_code,
            upstream_body=body,
            hint=hint,
        )
    if status_code == 404:
        return not_found(
            f"Upstream has no resource for {context}.",
            upstream_status=status_code,
            upstream_body=body,
        )
    return UpstreamError(
        f"Upstream failed {context} ({status_code}).",
        upstream_status=status_code,
        upstream_body=body,
    )
