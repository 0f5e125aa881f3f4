"""Infrastructure providers."""

# Import bases
from .broker import BrokerProvider
from .cache import CacheProvider
from .email import EmailProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .broker import ProdBrokerProvider  # noqa: F401
from .cache import ProdCacheProvider  # noqa: F401
from .email import ProdEmailProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "BrokerProvider",
    "CacheProvider",
    "EmailProvider",
    "PersistenceProvider",
    "ProdBrokerProvider",
    "ProdCacheProvider",
    "ProdEmailProvider",
    "ProdPersistenceProvider",
]
