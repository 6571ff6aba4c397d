from .checks import FormatCheck, SvgCheck, WebPCheck, check_for_target, get_check
from .verifier import VerificationStats, Verifier

__all__ = [
    "FormatCheck",
    "SvgCheck",
    "VerificationStats",
    "Verifier",
    "WebPCheck",
    "check_for_target",
    "get_check",
]
