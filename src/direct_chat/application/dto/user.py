from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RegisterUserDTO:
    username: str
    fullname: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class ProfileUpdateDTO:
    username: str | None = None
    fullname: str | None = None
    email: str | None = None

    def changes(self) -> dict[str, str]:
        return {k: v for k, v in (
            ("username", self.username),
            ("fullname", self.fullname),
            ("email", self.email),
        ) if v is not None}
