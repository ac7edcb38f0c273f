"""Verification pipeline for BillVerify.

Single forward pass over a batch of time entries: flags, quality checks,
UTBMS classification, split suggestions, rounding and confidence.
"""

from billverify.pipeline.orchestrator import VerificationPipeline, VerificationResult, run_pipeline

__all__ = ["VerificationPipeline", "VerificationResult", "run_pipeline"]
