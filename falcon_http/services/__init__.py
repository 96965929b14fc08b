# Services package

from .variable_substitution import extract_variables, replace_variables, substitute, substitute_pairs
from .request_url import RequestUrl

__all__ = [
    "extract_variables",
    "replace_variables",
    "substitute",
    "substitute_pairs",
    "RequestUrl",
]
