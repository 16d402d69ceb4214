"""Spirit 카탈로그 Core 패키지"""

from saka.core.spirit.models import SpiritRecord, SpiritStats
from saka.core.spirit.registry import SpiritCatalog

__all__ = ["SpiritRecord", "SpiritStats", "SpiritCatalog"]
