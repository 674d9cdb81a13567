"""
Payment request services: preparation, signature string, signing/export.
"""
from .canonical import signature_string
from .normalizer import prepare
from .signature_service import export_signed, export_unsigned

__all__ = ["prepare", "signature_string", "export_signed", "export_unsigned"]
