"""
Backend registry.

Only the threaded CPU backend exists; the registry keeps the driver and
CLI independent of the concrete backend class.
"""
from .base import TransportBackend
from .cpu import CPUBackend


def list_backends():
    """List all backends with their status."""
    cpu = CPUBackend()
    return [('CPU', cpu.get_name(), cpu.is_available())]


def get_backend(name: str = 'cpu', n_workers=None) -> TransportBackend:
    """Get a specific backend by name.

    Args:
        name: 'cpu' (or 'auto')
        n_workers: worker threads, None -> os.cpu_count()

    Returns:
        TransportBackend instance

    Raises:
        ValueError if backend not available
    """
    name = name.lower()

    if name in ('cpu', 'auto'):
        return CPUBackend(n_workers=n_workers)
    else:
        raise ValueError(f"Unknown backend: {name}. Choose from: cpu, auto")
