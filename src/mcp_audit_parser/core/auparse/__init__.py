"""Linux audit log parsing.

Turns raw auditd lines into :class:`AuditMessage` objects whose bodies are
tokenized, normalized and enriched on first access.
"""

from __future__ import annotations

from .enrichment import apply_generic_steps, apply_type_steps, enrich, hex_decode
from .header import parse, parse_audit_header, parse_log_line
from .hexcodec import decode_hex_field, decode_uppercase_hex, hex_to_string
from .message import RESERVED_SUMMARY_KEYS, AuditMessage
from .normalizer import normalize_message
from .rule_key import extract_rule_tags
from .tokenizer import extract_key_value_pairs

__all__ = [
    "AuditMessage",
    "RESERVED_SUMMARY_KEYS",
    "apply_generic_steps",
    "apply_type_steps",
    "decode_hex_field",
    "decode_uppercase_hex",
    "enrich",
    "extract_key_value_pairs",
    "extract_rule_tags",
    "hex_decode",
    "hex_to_string",
    "normalize_message",
    "parse",
    "parse_audit_header",
    "parse_log_line",
]
