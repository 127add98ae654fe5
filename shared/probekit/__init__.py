"""probekit — delayed health/readiness gates and the HTTP pipeline around them."""

from probekit.config import BaseServiceSettings
from probekit.gate import DelayedGate
from probekit.logging import setup_logging

__all__ = ["setup_logging", "BaseServiceSettings", "DelayedGate"]
