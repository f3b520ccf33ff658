from coder.code_format import CodeMessage, FileRecord, ShapeError, Snapshot, validate_snapshot
from coder.emitter import EmissionState, FileEmitter, FinalizedFile, iter_finalized
from coder.scanner import scan

__all__ = [
    "CodeMessage",
    "EmissionState",
    "FileEmitter",
    "FileRecord",
    "FinalizedFile",
    "ShapeError",
    "Snapshot",
    "iter_finalized",
    "scan",
    "validate_snapshot",
]
