"""persistweave - persistence.xml discovery and reconciliation for JPA static weaving."""

__version__ = "0.1.0"

from persistweave.application.services.orchestrator import run
from persistweave.domain.model.configuration import WeaveConfig

__all__ = ["WeaveConfig", "__version__", "run"]
