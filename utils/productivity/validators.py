"""
Validation utilities for productivity record input

Checks a record before it is handed to the store: required references,
positive integer update count and a real calendar date.
"""
from datetime import datetime, date
from typing import Any, Dict, Optional, Tuple
import logging
import re

logger = logging.getLogger(__name__)


class ProductivityValidator:
    """Validator for new productivity records (Portuguese user-facing messages)"""

    MSG_REQUIRED = "Por favor, preencha todos os campos obrigatórios."
    MSG_INVALID_COUNT = "O número de atualizações deve ser um número válido maior que zero."
    MSG_INVALID_DATE = "Informe uma data válida (AAAA-MM-DD)."

    # ==================== Field parsers ====================

    @staticmethod
    def parse_updates_count(value: Any) -> Optional[int]:
        """Parse a positive integer count; None when not a valid count."""
        if value is None or isinstance(value, bool):
            return None

        if isinstance(value, int):
            count = value
        elif isinstance(value, float):
            if not value.is_integer():
                return None
            count = int(value)
        else:
            text_value = str(value).strip()
            if not re.fullmatch(r'\+?[0-9]+', text_value):
                return None
            count = int(text_value)

        return count if count > 0 else None

    @staticmethod
    def parse_record_date(value: Any) -> Optional[date]:
        """Parse a calendar date from date/datetime/ISO string."""
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return datetime.strptime(str(value).strip(), '%Y-%m-%d').date()
        except ValueError:
            return None

    # ==================== Record validation ====================

    def validate_record_input(
        self,
        agent_id: Any,
        leadership_role_id: Any,
        updates_count: Any,
        record_date: Any
    ) -> Tuple[bool, Optional[str], Dict]:
        """
        Validate a new productivity record.

        Returns:
            Tuple of (is_valid, error_message, cleaned_values)
        """
        if not str(agent_id or '').strip() or not str(leadership_role_id or '').strip():
            logger.warning("Record rejected: missing agent or leadership role")
            return False, self.MSG_REQUIRED, {}

        if updates_count is None or str(updates_count).strip() == '':
            logger.warning("Record rejected: missing updates count")
            return False, self.MSG_REQUIRED, {}

        count = self.parse_updates_count(updates_count)
        if count is None:
            logger.warning(f"Record rejected: invalid updates count {updates_count!r}")
            return False, self.MSG_INVALID_COUNT, {}

        parsed_date = self.parse_record_date(record_date)
        if parsed_date is None:
            logger.warning(f"Record rejected: invalid date {record_date!r}")
            return False, self.MSG_INVALID_DATE, {}

        return True, None, {
            'agent_id': str(agent_id).strip(),
            'leadership_role_id': str(leadership_role_id).strip(),
            'updates_count': count,
            'date': parsed_date,
        }


def validate_record_input(
    agent_id: Any,
    leadership_role_id: Any,
    updates_count: Any,
    record_date: Any
) -> Tuple[bool, Optional[str], Dict]:
    """Module-level shortcut for ProductivityValidator.validate_record_input."""
    return ProductivityValidator().validate_record_input(
        agent_id, leadership_role_id, updates_count, record_date
    )
