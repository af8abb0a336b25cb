from .loader import load_config, parse_set_overrides
from .models import AwsAccessConfig, E2EConfig, IamConfig, KubernetesConfig

__all__ = [
    "load_config",
    "parse_set_overrides",
    "AwsAccessConfig",
    "E2EConfig",
    "IamConfig",
    "KubernetesConfig",
]
