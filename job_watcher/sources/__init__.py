from .base import FIELD_SEPARATOR, JobSource
from .sacct import SacctSource
from .squeue import SqueueSource

__all__ = ["FIELD_SEPARATOR", "JobSource", "SacctSource", "SqueueSource"]
