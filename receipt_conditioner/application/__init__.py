"""Application layer - use cases and orchestration."""

from .services.orchestrator import ReceiptImageProcessor

__all__ = ['ReceiptImageProcessor']
