from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Callable, List, Optional

import numpy as np

from ..schema import RawWord

ProgressFn = Callable[[int], None]


class PageSegMode(IntEnum):
    # Tesseract --psm values
    AUTO = 3
    SPARSE_TEXT = 11


class ITxtExtractor(ABC):
    @abstractmethod
    def recognize(
        self,
        gray_l8: np.ndarray,
        *,
        languages: str,
        mode: PageSegMode,
        progress: Optional[ProgressFn] = None,
    ) -> List[RawWord]:
        ...
