import numpy as np
import numpy.typing as npt

POSITIONS = npt.NDArray[np.float64]
INDICES = npt.NDArray[np.int64]
MASK = npt.NDArray[np.bool_]
COLORS = npt.NDArray[np.float32]
