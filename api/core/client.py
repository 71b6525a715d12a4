"""
Client identity (IP + User-Agent) as seen by the counting endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request


@dataclass(frozen=True)
class ClientIdentity:
    ip: str
    user_agent: str


def _forwarded_ip(request: Request, trusted_proxy_hops: int) -> str:
    # Proxies append the peer they saw, so only the right-most hops are
    # trustworthy; anything further left was written by the client.
    hops = [hop.strip() for hop in request.headers.get("x-forwarded-for", "").split(",")]
    hops = [hop for hop in hops if hop]
    if hops:
        return hops[max(len(hops) - trusted_proxy_hops, 0)]
    return request.headers.get("x-real-ip", "").strip()


def client_identity(
    request: Request,
    *,
    trust_forwarded_for: bool = True,
    trusted_proxy_hops: int = 1,
) -> ClientIdentity:
    """
    Prefer the address recorded by our own proxies (the X-Forwarded-For hop
    `trusted_proxy_hops` places from the right, then X-Real-IP) and fall back
    to the socket peer.
    """
    ip = ""
    if trust_forwarded_for and trusted_proxy_hops > 0:
        ip = _forwarded_ip(request, trusted_proxy_hops)
    if not ip and request.client is not None:
        ip = request.client.host or ""
    user_agent = request.headers.get("user-agent", "")
    return ClientIdentity(ip=ip, user_agent=user_agent)


async def get_client_identity(request: Request) -> ClientIdentity:
    """
    FastAPI dependency; trust of proxy headers comes from app settings.
    """
    state = request.app.state
    return client_identity(
        request,
        trust_forwarded_for=bool(getattr(state, "trust_forwarded_for", True)),
        trusted_proxy_hops=int(getattr(state, "trusted_proxy_hops", 1)),
    )
