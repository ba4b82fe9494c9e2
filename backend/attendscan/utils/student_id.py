"""Institutional student identifier formatting (NN-NNNN)."""
import re

STUDENT_ID_DIGITS = 6
STUDENT_ID_PATTERN = re.compile(r'^\d{2}-\d{4}$')

def format_student_id(raw) -> str:
    """
    Normalize any supplied identifier to ``NN-NNNN``.
    
    Non-digits are stripped, then the digits are left-padded with zeros or
    truncated to the first six before the hyphen is inserted after position 2.
    """
    if raw is None:
        return raw
    digits = re.sub(r'\D', '', str(raw))
    digits = digits[:STUDENT_ID_DIGITS].rjust(STUDENT_ID_DIGITS, '0')
    return f"{digits[:2]}-{digits[2:]}"

def is_formatted_student_id(value: str) -> bool:
    return bool(value) and STUDENT_ID_PATTERN.match(value) is not None
