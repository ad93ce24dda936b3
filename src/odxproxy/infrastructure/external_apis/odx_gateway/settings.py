# Copyright (c)
# SPDX-License-Identifier: MIT
"""ODX gateway client settings.

Purpose:
    Pydantic-based configuration for the gateway client: gateway URL and API
    key, transport timeout, and the Odoo instance the gateway forwards to.

Layer:
    infrastructure

Notes:
    Values are sourced from environment variables prefixed with ``ODX_``.
"""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from odxproxy.application.schemas.dto.requests import ClientInfo, InstanceInfo

DEFAULT_GATEWAY_URL = "https://gateway.odxproxy.io"


class OdxProxySettings(BaseSettings):
    """Configuration for the ODX gateway client.

    Environment variables (with ``model_config.env_prefix``):

    * ``ODX_GATEWAY_URL``
    * ``ODX_API_KEY``
    * ``ODX_TIMEOUT_S``
    * ``ODX_ODOO_URL``
    * ``ODX_ODOO_USER_ID``
    * ``ODX_ODOO_DB``
    * ``ODX_ODOO_API_KEY``
    """

    gateway_url: str = Field(
        DEFAULT_GATEWAY_URL,
        description="Base URL of the ODX gateway.",
    )
    api_key: SecretStr = Field(
        ...,
        description="Gateway API key, sent as the x-api-key header.",
    )
    timeout_s: float = Field(
        60.0,
        gt=0,
        description="Per-request timeout in seconds for the transport client.",
    )
    odoo_url: str = Field(..., description="Base URL of the Odoo instance.")
    odoo_user_id: int = Field(..., description="Odoo user id owning the API key.")
    odoo_db: str = Field(..., description="Odoo database name.")
    odoo_api_key: SecretStr = Field(..., description="Odoo user API key.")

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_prefix="ODX_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    def to_client_info(self) -> ClientInfo:
        """Build the :class:`ClientInfo` consumed by ``OdxProxyClient.configure``."""
        return ClientInfo(
            instance=InstanceInfo(
                url=self.odoo_url,
                user_id=self.odoo_user_id,
                db=self.odoo_db,
                api_key=self.odoo_api_key.get_secret_value(),
            ),
            odx_api_key=self.api_key.get_secret_value(),
            gateway_url=self.gateway_url,
        )
