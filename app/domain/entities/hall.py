from dataclasses import dataclass


@dataclass(frozen=True)
class HallOption:
    code: str
    name: str
