from dataclasses import dataclass


@dataclass(frozen=True)
class Notification:
    error: bool
    label: str  # translation key, rendered by the shell
