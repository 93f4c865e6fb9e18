"""Recursive proof sequencing: one proof per transaction, folded left by merge."""

import logging
from collections.abc import Sequence

from zkcloud.errors.exceptions import EmptyInputError, ProofCreationError, ProofMergeError
from zkcloud.workers.base import ZkCloudWorker

logger = logging.getLogger(__name__)


async def sequence(worker: ZkCloudWorker, transactions: Sequence[str]) -> str:
    """Reduce ``transactions`` to a single proof.

    Proofs are created in input order and merged strictly left to right,
    ``merge(merge(p1, p2), p3)``, so the final proof preserves transaction
    order. The first ``None`` from ``create`` or ``merge`` aborts the run.
    """
    if not transactions:
        raise EmptyInputError()

    proofs: list[str] = []
    for index, transaction in enumerate(transactions):
        proof = await worker.create(transaction)
        if proof is None:
            raise ProofCreationError(index)
        proofs.append(proof)
    logger.debug("Created %d proofs", len(proofs))

    accumulator = proofs[0]
    for index in range(1, len(proofs)):
        merged = await worker.merge(accumulator, proofs[index])
        if merged is None:
            raise ProofMergeError(index)
        accumulator = merged

    return accumulator
