"""Caller identity as handed over by the authentication layer."""

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    CLIENT = "client"
    CONSULTANT = "consultant"
    ADMIN = "admin"


@dataclass(frozen=True)
class Caller:
    id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_client(self) -> bool:
        return self.role == Role.CLIENT

    @property
    def is_consultant(self) -> bool:
        return self.role == Role.CONSULTANT
