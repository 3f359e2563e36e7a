"""
Contract verification for the deployed BAB tokens.

Builds a verification request from deployment data and submits it to the
selected network's block explorer.
"""

from bab_deploy.verification.request import (
    ConstructorArguments,
    VerificationRequest,
    encode_constructor_args,
    load_deployment_record,
)

from bab_deploy.verification.driver import (
    VerificationDriver,
    VerificationResult,
)

__all__ = [
    'ConstructorArguments',
    'VerificationRequest',
    'encode_constructor_args',
    'load_deployment_record',
    'VerificationDriver',
    'VerificationResult',
]
