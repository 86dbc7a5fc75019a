from .listeners import ListenersResource, extract_listeners
from .loadbalancers import LoadBalancersResource, extract_load_balancers

__all__ = [
    "ListenersResource",
    "extract_listeners",
    "LoadBalancersResource",
    "extract_load_balancers",
]
