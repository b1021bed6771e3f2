"""Pytest configuration and shared fixtures."""
import pytest

from objectregister import ObjectFactory, ObjectRegistry, RegistryConfig
from objectregister.members import clear_member_cache

from sample_objects import Channel, PowerStation, Reservoir, Simulation, Storage


@pytest.fixture(autouse=True)
def reset_member_cache():
    """Resolve dataclass members afresh for each test."""
    clear_member_cache()
    yield
    clear_member_cache()


@pytest.fixture
def simulation():
    return Simulation()


@pytest.fixture
def registry(simulation):
    """Empty registry pointing back at a test simulation."""
    return ObjectRegistry(context=simulation)


@pytest.fixture
def permissive_registry(simulation):
    """Registry that lets a key change type (legacy behaviour)."""
    return ObjectRegistry(context=simulation, config=RegistryConfig(allow_type_override=True))


@pytest.fixture
def factory(registry):
    """Factory knowing every sample class."""
    factory = ObjectFactory(registry)
    factory.add_class(Channel)
    factory.add_class(Storage)
    factory.add_class(Reservoir, base=Storage)
    factory.add_class(PowerStation)
    return factory
