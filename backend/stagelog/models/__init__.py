from stagelog.models.show import Show
from stagelog.models.performance import Performance
from stagelog.models.access_scheme import AccessScheme

__all__ = [
    "Show",
    "Performance",
    "AccessScheme",
]
