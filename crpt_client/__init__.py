"""Rate-limited client for the CRPT document registration API."""

import logging

from crpt_client.adapters.rate_limit import SlidingWindowRateGate, TimeUnit
from crpt_client.client import CrptApi, create_submitter
from crpt_client.schemas.document import Description, Document, Product, SubmissionRequest
from crpt_client.services.document_submitter import DocumentSubmitter, SubmissionResult

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CrptApi",
    "Description",
    "Document",
    "DocumentSubmitter",
    "Product",
    "SlidingWindowRateGate",
    "SubmissionRequest",
    "SubmissionResult",
    "TimeUnit",
    "create_submitter",
]
