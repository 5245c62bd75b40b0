from noisewatch.models.base import Base
from noisewatch.models.report import MediaType, NoiseReport

__all__ = ["Base", "MediaType", "NoiseReport"]
