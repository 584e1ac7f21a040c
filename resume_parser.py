"""
Resume text extraction and candidate field validation.

Supports PDF (PyPDF2), DOCX (python-docx) and plain text uploads. Contact
details are pulled out with regular expressions; the same validators gate the
collecting-info phase of the interview.
"""
import io
import re
import logging
from datetime import datetime, timezone
from typing import Dict, Any, List

import PyPDF2
from docx import Document

from state import REQUIRED_FIELDS

logger = logging.getLogger(__name__)

MAX_RESUME_BYTES = 10 * 1024 * 1024

EMAIL_REGEX = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_REGEX = re.compile(r"(?:\+?1[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})")

NAME_PATTERNS = [
    re.compile(r"^([A-Z][a-z]+[ \t]+[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)?)", re.MULTILINE),
    re.compile(r"Name\s*:?\s*([A-Z][a-z]+[ \t]+[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)?)", re.IGNORECASE),
]

VALID_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
VALID_PHONE = re.compile(r"^[+]?[1-9]?[\d\s\-()]{10,}$")
VALID_NAME = re.compile(r"^[A-Za-z\s.'-]+$")


class ResumeParseError(ValueError):
    """Raised when an uploaded resume cannot be turned into text."""


def validate_email(email: str) -> bool:
    return bool(email) and bool(VALID_EMAIL.match(email.strip()))


def validate_phone(phone: str) -> bool:
    return bool(phone) and bool(VALID_PHONE.match(phone.strip()))


def validate_name(name: str) -> bool:
    return bool(name) and len(name.strip()) >= 2 and bool(VALID_NAME.match(name.strip()))


FIELD_VALIDATORS = {
    "name": validate_name,
    "email": validate_email,
    "phone": validate_phone,
}


def check_missing_fields(candidate_data: Dict[str, Any]) -> List[str]:
    """Return required fields that are empty or fail validation, in a fixed order."""
    return [
        field
        for field in REQUIRED_FIELDS
        if not FIELD_VALIDATORS[field](candidate_data.get(field) or "")
    ]


def extract_text_from_bytes(file_bytes: bytes, file_name: str) -> str:
    """
    Extract text content from file bytes.

    Supports: PDF, DOCX, TXT, MD
    """
    if not file_bytes:
        raise ResumeParseError("Uploaded file is empty.")
    if len(file_bytes) > MAX_RESUME_BYTES:
        raise ResumeParseError("File size too large. Please upload a file smaller than 10MB.")

    file_name_lower = file_name.lower()

    if file_name_lower.endswith((".txt", ".md")):
        return file_bytes.decode("utf-8", errors="ignore")

    if file_name_lower.endswith(".pdf"):
        try:
            pdf_reader = PyPDF2.PdfReader(io.BytesIO(file_bytes))
            text_parts = []
            for page in pdf_reader.pages:
                page_text = page.extract_text()
                if page_text:
                    text_parts.append(page_text)
            return "\n".join(text_parts)
        except Exception as e:
            raise ResumeParseError(
                f"PDF processing failed: {e}. Please try uploading a DOCX file instead."
            ) from e

    if file_name_lower.endswith(".docx"):
        try:
            doc = Document(io.BytesIO(file_bytes))
        except Exception as e:
            raise ResumeParseError(f"DOCX extraction error: {e}") from e
        return "\n".join(para.text for para in doc.paragraphs if para.text.strip())

    raise ResumeParseError("Unsupported file type. Please upload a PDF or DOCX file.")


def format_phone_number(phone: str) -> str:
    digits = re.sub(r"\D", "", phone)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) == 11 and digits[0] == "1":
        return f"({digits[1:4]}) {digits[4:7]}-{digits[7:]}"
    return phone


def clean_name(name: str) -> str:
    return " ".join(word.capitalize() for word in name.split())


def extract_name(text: str) -> str:
    for pattern in NAME_PATTERNS:
        match = pattern.search(text)
        if match:
            name = match.group(1).strip()
            if len(name) <= 50 and VALID_NAME.match(name):
                return clean_name(name)

    # First short line that looks like a name
    for line in text.splitlines()[:5]:
        line = line.strip()
        if (
            0 < len(line) <= 50
            and re.match(r"^[A-Z][A-Za-z\s.'-]+$", line)
            and "@" not in line
            and "www" not in line
        ):
            return clean_name(line)

    return ""


def extract_email(text: str) -> str:
    match = EMAIL_REGEX.search(text)
    return match.group(0).lower() if match else ""


def extract_phone(text: str) -> str:
    match = PHONE_REGEX.search(text)
    if match:
        return f"({match.group(1)}) {match.group(2)}-{match.group(3)}"
    return ""


def extract_information(text: str) -> Dict[str, str]:
    return {
        "name": extract_name(text),
        "email": extract_email(text),
        "phone": extract_phone(text),
    }


def parse_resume(file_bytes: bytes, file_name: str) -> Dict[str, Any]:
    """
    Parse an uploaded resume into contact details plus the raw text.

    Raises:
        ResumeParseError: for oversized, unsupported or unreadable files
    """
    text = extract_text_from_bytes(file_bytes, file_name)
    if not text.strip():
        raise ResumeParseError(
            "No readable text found in the resume. Please ensure the file contains text content."
        )

    info = extract_information(text)
    logger.info(
        "Parsed resume %s: name=%s email=%s phone=%s",
        file_name, bool(info["name"]), bool(info["email"]), bool(info["phone"]),
    )
    return {
        **info,
        "raw_text": text,
        "file_name": file_name,
        "file_size": len(file_bytes),
        "extracted_at": datetime.now(timezone.utc).isoformat(),
    }
