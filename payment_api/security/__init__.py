# Webhook signature verification

from .webhook_signature import WebhookSignatureVerifier, SignatureCheck

__all__ = ["WebhookSignatureVerifier", "SignatureCheck"]
