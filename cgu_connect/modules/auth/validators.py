from typing import List, Tuple
from cgu_connect.config import settings

DOMAIN_ERROR = "Only CGU Odisha email addresses are allowed"
PASSWORD_MISMATCH_ERROR = "Passwords do not match"


class AccountValidator:
    """Checks run on account forms before anything is sent to Supabase Auth"""

    @staticmethod
    def has_allowed_domain(email: str) -> bool:
        # Domains are case-insensitive; the local part is irrelevant here.
        return email.strip().lower().endswith(settings.allowed_email_domain.lower())

    @staticmethod
    def validate_signup(email: str, password: str, confirm_password: str) -> Tuple[bool, List[str]]:
        """
        Validate a signup form.
        Returns (is_valid, errors) with errors in the order the form reports them.
        """
        errors = []
        if not AccountValidator.has_allowed_domain(email):
            errors.append(DOMAIN_ERROR)
        if password != confirm_password:
            errors.append(PASSWORD_MISMATCH_ERROR)
        if len(password) < settings.min_password_length:
            errors.append(f"Password must be at least {settings.min_password_length} characters")
        return len(errors) == 0, errors

    @staticmethod
    def validate_reset(email: str) -> Tuple[bool, List[str]]:
        if not AccountValidator.has_allowed_domain(email):
            return False, [DOMAIN_ERROR]
        return True, []
