from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger("contentspec")

DEFAULT_INDENTATION_SIZE = 2


@dataclass
class ParserConfig:
    """Settings for a single parse run.

    indentation_size: number of whitespace characters per nesting level. A ``Spaces`` metadata
        line overrides it for the rest of the document.
    process_processes: synthesize NEXT/PREVIOUS relationships between the topics of PROCESS containers.
    verbosity: 0 records errors and warnings, 1 adds info notes, 2 adds debug notes.
    """

    indentation_size: int = DEFAULT_INDENTATION_SIZE
    process_processes: bool = False
    verbosity: int = 0
