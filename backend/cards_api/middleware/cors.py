from __future__ import annotations

import re

DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:3000",
    # Vite dev server
    "http://localhost:5173",
)

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization"]


def _split_csv(v: str | None) -> list[str]:
    if not v:
        return []
    return [s.strip() for s in str(v).split(",") if s.strip()]


def build_allowed_origins(*, frontend_urls: str | None) -> list[str]:
    allowed: set[str] = set(DEFAULT_ALLOWED_ORIGINS)
    for origin in _split_csv(frontend_urls):
        allowed.add(origin.rstrip("/"))
    return sorted(allowed)


def build_allowed_origin_regex(*, suffixes: str | None) -> str | None:
    """
    CORSMiddleware supports a single allow_origin_regex, which we use for
    hosting-provider preview domains, e.g. ``vercel.app`` allows
    ``https://my-app-git-branch.vercel.app``.

    Notes:
    - Only subdomains of the *registrable* domain match, not suffixes like
      "evilvercel.app", and not the bare domain itself.
    - Port is permitted for dev/staging custom setups.
    - Returns None when no suffix is configured; the allowlist alone applies.
    """
    domains = [re.escape(s.lstrip(".").lower()) for s in _split_csv(suffixes)]
    if not domains:
        return None
    return r"^https?://([a-z0-9-]+\.)+(" + "|".join(domains) + r")(:\d+)?$"
