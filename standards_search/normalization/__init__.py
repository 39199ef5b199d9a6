"""
Text normalization package for register fields.

Provides the shared normalizer used for indexing and comparison, and
validation of CAS-style registry identifiers.
"""

from .text_normalizer import TextNormalizer, normalize_text
from .registry_id import RegistryIdValidator, validate_registry_id

__all__ = [
    'TextNormalizer',
    'normalize_text',
    'RegistryIdValidator',
    'validate_registry_id',
]
