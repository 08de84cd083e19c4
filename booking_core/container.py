"""Dependency injection container for repository access."""

from dataclasses import dataclass
from typing import Callable, ContextManager, Optional

from .repositories.interfaces.system_config_repository import ISystemConfigRepository
from .repositories.interfaces.client_repository import IClientRepository
from .repositories.interfaces.specialist_repository import ISpecialistRepository
from .repositories.interfaces.schedule_repository import IScheduleRepository
from .repositories.interfaces.appointment_repository import IAppointmentRepository
from .repositories.interfaces.transaction_repository import ITransactionRepository
from .repositories.interfaces.follow_up_repository import IFollowUpRepository


@dataclass
class Container:
    """Holds all repository instances for dependency injection."""

    config: ISystemConfigRepository
    clients: IClientRepository
    specialists: ISpecialistRepository
    schedule: IScheduleRepository
    appointments: IAppointmentRepository
    transactions: ITransactionRepository
    follow_ups: IFollowUpRepository
    # Context manager grouping repository writes into one storage transaction
    atomic: Callable[[], ContextManager[None]]


_container: Optional[Container] = None


def get_container() -> Container:
    """Returns the global container instance.

    Raises:
        RuntimeError: If container has not been initialized.
    """
    if _container is None:
        raise RuntimeError(
            "Container not initialized. Call set_container() in the application entry point."
        )
    return _container


def set_container(container: Container) -> None:
    """Sets the global container instance.

    Args:
        container: Container with concrete repository implementations.
    """
    global _container
    _container = container


def reset_container() -> None:
    """Resets the global container. Useful for testing."""
    global _container
    _container = None
