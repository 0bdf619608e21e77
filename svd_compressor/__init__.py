from .config import SolverConfig
from .eigen import EigenPair, EigenSolver, eigen_decomposition, make_random_source
from .errors import ConvergenceShortfall, DegenerateComponent, DimensionMismatch, SVDCompressorError
from .pipeline import (
    CompressionResult,
    Progress,
    calculate_mse,
    compress_image,
    detect_image_type,
    to_pixel_buffer,
)
from .reconstruct import (
    ByCount,
    ByEnergy,
    compress,
    compress_by_count,
    compress_by_energy,
    policy_from_method,
)
from .svd import SVDResult, decompose

__version__ = "1.2.0"
