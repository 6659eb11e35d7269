# =============================================================================
# File: employee_sync/config/rabbitmq_config.py
# Description: RabbitMQ broker topology and connection configuration
# =============================================================================

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import SettingsConfigDict

from employee_sync.common.base.base_config import BaseConfig


# noinspection PyMethodParameters
class RabbitMQConfig(BaseConfig):
    """
    Configuration for the employee event broker.

    Controls:
    - Connection settings
    - Topology (durable topic exchange, durable queue, binding key)
    - Consumer flow control (prefetch)
    """

    model_config = SettingsConfigDict(
        env_prefix='RABBITMQ_',
    )

    # =========================================================================
    # Connection Settings
    # =========================================================================

    host: str = Field(default="127.0.0.1", description="Broker host")
    port: int = Field(default=5672, description="Broker AMQP port")
    user: str = Field(default="guest", description="Broker login")
    password: SecretStr = Field(default=SecretStr("guest"), description="Broker password")
    vhost: str = Field(default="/", description="Broker virtual host")

    connection_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for establishing a broker connection"
    )

    reconnect_delay_seconds: float = Field(
        default=5.0,
        description="Pause between consume sessions after the broker connection drops"
    )

    # =========================================================================
    # Topology
    # =========================================================================

    exchange: str = Field(default="hr.events", description="Durable topic exchange")
    queue: str = Field(default="hub.employee.events", description="Durable consumer queue")
    binding_key: str = Field(default="employee.#", description="Queue binding pattern")

    # =========================================================================
    # Consumer Flow Control
    # =========================================================================

    prefetch_count: int = Field(
        default=1,
        description="Unacknowledged deliveries allowed per consumer"
    )

    processing_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Per-message processing deadline; unset means no deadline"
    )

    @field_validator('prefetch_count')
    def validate_prefetch(cls, v: int) -> int:
        if v < 1:
            raise ValueError("prefetch_count must be at least 1")
        return v

    def get_password(self) -> str:
        """Get broker password as plain string"""
        return self.password.get_secret_value()


@lru_cache(maxsize=1)
def get_rabbitmq_config() -> RabbitMQConfig:
    """Get RabbitMQ configuration singleton (cached)."""
    return RabbitMQConfig()


def reset_rabbitmq_config() -> None:
    """Reset config singleton (for testing)."""
    get_rabbitmq_config.cache_clear()
