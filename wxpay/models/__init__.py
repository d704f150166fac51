from .schemas import (
    ByBillingDate,
    ByExternalOrderId,
    ByTransactionId,
    Lookup,
    PayOrder,
    RefundOrder,
    TransactionType,
    TransferOrder,
    VerificationReason,
    VerificationResult,
    VerificationState,
)
