"""EmailAddress value object for validated email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from accounts.domain import accounts

_FORBIDDEN_CHARACTERS = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


@accounts.value_object
class EmailAddress:
    """A validated email address.

    Exactly one @, non-empty local and domain parts that neither start nor end
    with a dot, a dotted domain without hyphen-edged labels, no consecutive
    dots, no whitespace and none of the characters that need quoting.
    """

    address = String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address
        if not _is_valid(email):
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

    @property
    def normalized(self) -> str:
        return self.address.strip().lower()


def _is_valid(email: str) -> bool:
    if any(ws in email for ws in (" ", "\t", "\n")):
        return False
    if email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)
    for part in (local_part, domain_part):
        if not part or part.startswith(".") or part.endswith("."):
            return False
    if "." not in domain_part:
        return False
    if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
        return False
    if ".." in email:
        return False
    return not any(ch in email for ch in _FORBIDDEN_CHARACTERS)
