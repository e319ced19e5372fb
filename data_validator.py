import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from models.developer_record import DEVELOPER_FIELDS, WORK_TYPES, DeveloperDraft
from models.principal import ROLES
from services.domain_utils import normalize_github_url, normalize_linkedin_profile_url


EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


class DataValidator:
    def validate_email(self, email: Any) -> bool:
        """Validate email format."""
        if not email or not isinstance(email, str):
            return False
        return bool(EMAIL_RE.match(email.strip()))

    def validate_name(self, name: Any) -> bool:
        """Validate person name."""
        if not name or not isinstance(name, str):
            return False

        # Basic validation: should have reasonable length
        name = name.strip()
        return (
            len(name) >= 1 and
            len(name) <= 200 and
            not name.startswith(('http', 'www', '@'))  # Basic sanity checks
        )

    def validate_registration(self, data: Dict[str, Any]) -> List[str]:
        """Check account fields: all required, known role, plausible email."""
        errors = []

        for field in ('email', 'password', 'name', 'role'):
            if not data.get(field):
                errors.append(f"Missing required field: {field}")
        if errors:
            return errors

        if data['role'] not in ROLES:
            errors.append(f"Invalid role: {data['role']} (expected one of {', '.join(ROLES)})")
        if not self.validate_email(data['email']):
            errors.append(f"Invalid email format: {data['email']}")
        if not self.validate_name(data['name']):
            errors.append(f"Invalid name format: {data['name']}")

        return errors

    def validate_profile(self, data: Dict[str, Any]) -> List[str]:
        """Check developer profile fields before creation."""
        errors = []

        for field in ('first_name', 'last_name', 'work_type', 'field', 'email'):
            if not data.get(field):
                errors.append(f"Missing required field: {field}")
        if errors:
            return errors

        if data['work_type'] not in WORK_TYPES:
            errors.append(f"work_type must be one of {', '.join(WORK_TYPES)}")
        if data['field'] not in DEVELOPER_FIELDS:
            errors.append(f"field must be one of {', '.join(DEVELOPER_FIELDS)}")
        for name_field in ('first_name', 'last_name'):
            if not self.validate_name(data[name_field]):
                errors.append(f"Invalid {name_field} format: {data[name_field]}")
        if not self.validate_email(data['email']):
            errors.append(f"Invalid email format: {data['email']}")

        # Optional links: empty means "not provided", anything else must parse
        if data.get('github') and not normalize_github_url(data['github']):
            errors.append(f"Invalid GitHub URL: {data['github']}")
        if data.get('linkedin') and not normalize_linkedin_profile_url(data['linkedin']):
            errors.append(f"Invalid LinkedIn profile URL: {data['linkedin']}")

        return errors

    def clean_profile_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Trim text fields, lower-case email, canonicalize links."""
        cleaned = dict(data)
        for key in ('first_name', 'last_name', 'work_type', 'field'):
            if isinstance(cleaned.get(key), str):
                cleaned[key] = cleaned[key].strip()
        if isinstance(cleaned.get('email'), str):
            cleaned['email'] = cleaned['email'].strip().lower()
        cleaned['github'] = normalize_github_url(cleaned.get('github'))
        cleaned['linkedin'] = normalize_linkedin_profile_url(cleaned.get('linkedin'))
        return cleaned

    def build_profile_draft(self, data: Dict[str, Any]) -> Tuple[Optional[DeveloperDraft], List[str]]:
        """Validate and clean raw input; returns (draft, []) or (None, errors)."""
        errors = self.validate_profile(data)
        if errors:
            logging.warning(f"Profile validation failed: {errors}")
            return None, errors
        cleaned = self.clean_profile_data(data)
        fields = {k: cleaned.get(k) for k in DeveloperDraft.model_fields}
        return DeveloperDraft(**fields), []
