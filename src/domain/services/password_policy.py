"""Password strength meter and policy checks."""

import re
from dataclasses import dataclass

MIN_LENGTH = 8
POINTS_PER_CRITERION = 20
REGISTRATION_MIN_SCORE = 80

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(r"[\W_]")


@dataclass(frozen=True)
class PasswordStrength:
    """Result of scoring a password against the five criteria."""

    length: bool
    uppercase: bool
    lowercase: bool
    number: bool
    special: bool

    @property
    def score(self) -> int:
        met = sum((self.length, self.uppercase, self.lowercase, self.number, self.special))
        return met * POINTS_PER_CRITERION

    @property
    def label(self) -> str:
        if self.score < 40:
            return "Weak"
        if self.score < 80:
            return "Medium"
        return "Strong"

    @property
    def all_met(self) -> bool:
        return self.score == 5 * POINTS_PER_CRITERION

    def missing(self) -> list[str]:
        """Names of the criteria the password fails."""
        return [
            name
            for name in ("length", "uppercase", "lowercase", "number", "special")
            if not getattr(self, name)
        ]


def evaluate_password(password: str) -> PasswordStrength:
    return PasswordStrength(
        length=len(password) >= MIN_LENGTH,
        uppercase=bool(_UPPER.search(password)),
        lowercase=bool(_LOWER.search(password)),
        number=bool(_DIGIT.search(password)),
        special=bool(_SPECIAL.search(password)),
    )
