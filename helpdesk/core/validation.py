from typing import Optional

from helpdesk.core.errors import ValidationError


def require_text(**fields: Optional[str]) -> None:
    # every field must carry non-blank text
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise ValidationError(f"Incomplete data: {', '.join(missing)} required")
