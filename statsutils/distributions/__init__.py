from .distribution import Distribution
from .resampler import Resampler
