from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """Per-operator settings the search screen needs, passed in explicitly."""

    tenant_id: str
    constrained_viewport: bool = False
    page_size: int = 10
