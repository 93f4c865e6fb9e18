"""String enums shared across zkcloud."""

from enum import StrEnum


class Command(StrEnum):
    RECURSIVE_PROOF = "recursiveProof"
    EXECUTE = "execute"


class JobStatus(StrEnum):
    STARTED = "started"
    FINISHED = "finished"
    FAILED = "failed"


class Blockchain(StrEnum):
    LOCAL = "local"
    DEVNET = "devnet"
    LIGHTNET = "lightnet"
    MAINNET = "mainnet"
    ZEKO = "zeko"


class CloudVariant(StrEnum):
    LOCAL = "local"
    REMOTE = "remote"


class TaskPolicy(StrEnum):
    RECURRING = "recurring"
    ONE_SHOT = "one_shot"


class OutcomeKind(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"
    NOT_APPLICABLE = "not_applicable"
