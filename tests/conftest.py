# =============================================================================
# File: tests/conftest.py
# Description: Shared fixtures wiring the fakes into real components
# =============================================================================

import pytest

from employee_sync.config.cache_config import CacheConfig
from employee_sync.config.hr_service_config import HrServiceConfig
from employee_sync.config.rabbitmq_config import RabbitMQConfig
from employee_sync.infra.persistence.cache_manager import DerivedViewCache
from employee_sync.infra.persistence.cache_store import RedisCacheStore
from employee_sync.wse.core.pubsub_bus import PubSubBus
from employee_sync.wse.publishers.change_notifier import ChangeNotifier
from tests.fakes.fake_amqp import FakeBroker
from tests.fakes.fake_hr_directory import FakeHrDirectory
from tests.fakes.fake_redis import FakeRedis


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache_config():
    return CacheConfig(ttl_seconds=60, key_prefix="")


@pytest.fixture
def cache(fake_redis, cache_config):
    return DerivedViewCache(RedisCacheStore(fake_redis), cache_config)


@pytest.fixture
def notifier(fake_redis):
    return ChangeNotifier(PubSubBus(fake_redis))


@pytest.fixture
def directory():
    return FakeHrDirectory()


@pytest.fixture
def hr_config():
    return HrServiceConfig(base_url="http://hr.test", timeout_seconds=1)


@pytest.fixture
def broker():
    return FakeBroker()


@pytest.fixture
def rabbitmq_config():
    return RabbitMQConfig()
